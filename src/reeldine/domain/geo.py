"""Geospatial primitives."""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A GeoJSON point; coordinates are stored as [longitude, latitude]."""

    lng: float
    lat: float

    @classmethod
    def from_geojson(cls, raw: object) -> "GeoPoint | None":
        """Parse a GeoJSON Point mapping, returning None when malformed."""
        if not isinstance(raw, dict):
            return None
        coordinates = raw.get("coordinates")
        if not isinstance(coordinates, list | tuple) or len(coordinates) != 2:
            return None
        try:
            return cls(lng=float(coordinates[0]), lat=float(coordinates[1]))
        except (TypeError, ValueError):
            return None

    def to_geojson(self) -> dict[str, object]:
        """Return the GeoJSON representation."""
        return {"type": "Point", "coordinates": [self.lng, self.lat]}


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_location_valid(lat: float, lng: float) -> bool:
    """Return True when the coordinates fall within supported bounds."""
    return -90 <= lat <= 90 and -180 <= lng <= 180  # noqa: PLR2004
