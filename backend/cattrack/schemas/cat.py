"""
CatTrack Backend — Cat Request/Response Schemas
================================================

What:  API contract for the cats endpoints.

Request bodies:
    CatCreate       POST /api/v1/cats          (owner comes from the token)
    CatUpdate       PUT  /api/v1/cats/{id}     (partial, owner-only)
    CatOwnerUpdate  PUT  /api/v1/cats/admin/{id}

Responses use CatDocument from `cattrack.models.cat` directly, so the `owner`
and `location` shapes in the API are exactly the stored shapes.
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from cattrack.models.cat import GeoPoint, OwnerSnapshot


def _not_in_future(value: date) -> date:
    if value > datetime.now(timezone.utc).date():
        raise ValueError("birthdate cannot be in the future")
    return value


class CatCreate(BaseModel):
    cat_name: str = Field(min_length=2, max_length=100)
    weight: float = Field(gt=0)
    filename: str = Field(min_length=1, max_length=255)
    birthdate: date
    location: Optional[GeoPoint] = None

    @field_validator("birthdate")
    @classmethod
    def validate_birthdate(cls, v: date) -> date:
        return _not_in_future(v)


class CatUpdate(BaseModel):
    """Owner edit. Only the fields present in the body are changed."""

    cat_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    weight: Optional[float] = Field(default=None, gt=0)
    filename: Optional[str] = Field(default=None, min_length=1, max_length=255)
    birthdate: Optional[date] = None
    location: Optional[GeoPoint] = None

    @field_validator("birthdate")
    @classmethod
    def validate_birthdate(cls, v: Optional[date]) -> Optional[date]:
        if v is None:
            return v
        return _not_in_future(v)


class CatOwnerUpdate(BaseModel):
    """New owner snapshot, written as-is into the cat's `owner` field."""

    owner: OwnerSnapshot
