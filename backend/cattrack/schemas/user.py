"""
CatTrack Backend — User Request/Response Schemas
=================================================

What:  API contract for the users endpoints.
How:   Request bodies are validated by FastAPI before any service code runs;
       a failure becomes a 400 through the validation handler in main.py.

Registration never accepts a role: every registered account is a plain user.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from cattrack.models.user import Role

# bcrypt refuses input longer than this many bytes
PASSWORD_MAX_BYTES = 72


def _password_fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    return value


class UserCreate(BaseModel):
    user_name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=5, max_length=PASSWORD_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _password_fits_bcrypt(v)


class UserUpdate(BaseModel):
    """Profile change for the current user. Omitted fields are left unchanged."""

    user_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=5, max_length=PASSWORD_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _password_fits_bcrypt(v)


class UserPublic(BaseModel):
    """User projection returned to clients; never includes the password."""

    id: str = Field(alias="_id")
    user_name: str
    email: str
    role: Optional[Role] = None

    model_config = {"populate_by_name": True}
