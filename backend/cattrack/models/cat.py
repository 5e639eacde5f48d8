"""
CatTrack Backend — Cat Document Model
======================================

What:  The stored shape of a cat, its embedded owner snapshot and GeoJSON point.
How:   Pydantic models with `_id` aliased to `id`; `to_document()` produces the
       dict that goes into the `cats` collection.
Who:   CatService reads and writes these.

Stored document (collection `cats`):
    {
        "_id": "<24-hex ObjectId string>",
        "cat_name": "Miso",
        "weight": 4.2,
        "filename": "miso.jpg",
        "birthdate": ISODate("2020-01-01T00:00:00Z"),
        "owner": {"_id": "<user id>", "user_name": "Alice", "email": "alice@example.com"},
        "location": {"type": "Point", "coordinates": [24.94, 60.17]}   # optional
    }

Owner snapshot:
    `owner` is a copy of the owning user's identity taken when the cat is
    written. It is NOT a reference: renaming the user or changing their email
    leaves existing cats untouched, and reads never join against `users`.
    Clients see the snapshot exactly as it was captured.

Location:
    GeoJSON order is [longitude, latitude]. Only single points are stored.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class OwnerSnapshot(BaseModel):
    """Denormalized copy of the owning user's identity fields."""

    id: str = Field(alias="_id")
    user_name: str
    email: str

    model_config = {"populate_by_name": True}


class GeoPoint(BaseModel):
    """GeoJSON point: {"type": "Point", "coordinates": [lon, lat]}."""

    type: Literal["Point"] = "Point"
    coordinates: List[float]

    @field_validator("coordinates")
    @classmethod
    def validate_coordinates(cls, v: List[float]) -> List[float]:
        if len(v) != 2:
            raise ValueError("coordinates must be [longitude, latitude]")
        lon, lat = v
        if not -180 <= lon <= 180:
            raise ValueError(f"longitude {lon} out of range [-180, 180]")
        if not -90 <= lat <= 90:
            raise ValueError(f"latitude {lat} out of range [-90, 90]")
        return v

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> "GeoPoint":
        return cls(coordinates=[lon, lat])


class CatDocument(BaseModel):
    """A cat as stored."""

    id: str = Field(alias="_id")
    cat_name: str
    weight: float
    filename: str
    birthdate: datetime
    owner: OwnerSnapshot
    location: Optional[GeoPoint] = None

    model_config = {"populate_by_name": True}

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def birthdate_to_storage(value: date) -> datetime:
    """Dates are stored as midnight UTC datetimes (BSON has no date-only type)."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc)
