"""
CatTrack Backend — User Document Model
=======================================

What:  The stored shape of a user, the role enum, and the request Actor.
How:   Pydantic models with `_id` aliased to `id`; `to_document()` produces the
       dict that goes into the `users` collection.
Who:   UserService reads and writes these; dependencies build Actor values from
       bearer tokens.

Stored document (collection `users`):
    {
        "_id": "<24-hex ObjectId string>",
        "user_name": "Alice",
        "email": "alice@example.com",
        "role": "user" | "admin",
        "password": "<bcrypt hash>"
    }

The password hash never leaves the service layer; `public()` is the only
projection handed to responses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field

from cattrack.models.cat import OwnerSnapshot


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UserDocument(BaseModel):
    """A user as stored, password hash included."""

    id: str = Field(alias="_id")
    user_name: str
    email: str
    role: Role = Role.USER
    password: str

    model_config = {"populate_by_name": True}

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    def public(self) -> Dict[str, Any]:
        """Projection safe to return to callers (no credential)."""
        return {
            "_id": self.id,
            "user_name": self.user_name,
            "email": self.email,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class Actor:
    """
    The authenticated identity issuing a request.

    The token names the user; the fields are the stored record as read at the
    start of the request, so profile changes apply without a new login.
    """

    id: str
    user_name: str
    email: str
    role: Role

    def snapshot(self) -> OwnerSnapshot:
        """Owner snapshot to embed in records this actor creates."""
        return OwnerSnapshot(id=self.id, user_name=self.user_name, email=self.email)
