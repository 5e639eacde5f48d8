"""
CatTrack Backend — Geo Query Builder
=====================================

What:  Turns a latitude/longitude bounding box into a `$geoWithin` query.
How:   Builds a closed five-vertex polygon ring and wraps it in the MongoDB
       containment predicate over the `location` field.
Who:   CatService.list_in_box.

Ring order (GeoJSON positions are [lon, lat]):

    (minLon,maxLat) ──────── (maxLon,maxLat)
          │                        │
          │                        │
    (minLon,minLat) ──────── (maxLon,minLat)

    start → up the west edge → across the north edge → down the east edge →
    back along the south edge to the start.

The builder does not check that min <= max. An inverted box yields an
inverted or degenerate polygon and whatever the store makes of it.
Containment, including how points on an edge are treated, is the store's.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

Position = List[float]


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def ring(self) -> List[Position]:
        return bounding_box_ring(self.min_lat, self.max_lat, self.min_lon, self.max_lon)

    def query(self, field: str = "location") -> Dict[str, Any]:
        return within_polygon_query(self.ring(), field=field)


def bounding_box_ring(
    min_lat: float,
    max_lat: float,
    min_lon: float,
    max_lon: float,
) -> List[Position]:
    """Closed ring: four corners plus the first corner repeated."""
    return [
        [min_lon, min_lat],
        [min_lon, max_lat],
        [max_lon, max_lat],
        [max_lon, min_lat],
        [min_lon, min_lat],
    ]


def within_polygon_query(ring: List[Position], field: str = "location") -> Dict[str, Any]:
    return {
        field: {
            "$geoWithin": {
                "$geometry": {
                    "type": "Polygon",
                    "coordinates": [ring],
                },
            },
        },
    }


def within_box_query(
    min_lat: float,
    max_lat: float,
    min_lon: float,
    max_lon: float,
) -> Dict[str, Any]:
    return BoundingBox(min_lat, max_lat, min_lon, max_lon).query()
