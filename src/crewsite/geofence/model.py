from __future__ import annotations

import math
from dataclasses import dataclass

from ..common.validators import require_positive
from ..core.constants import DEFAULT_RADIUS_METERS, MAX_LATITUDE, MAX_LONGITUDE, MIN_LATITUDE, MIN_LONGITUDE
from ..core.exceptions import InvalidCoordinate


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class Coordinate:
    """Value type: a WGS84 latitude/longitude pair in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        validate_coordinate(self.latitude, self.longitude)

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: dict) -> "Coordinate":
        return cls(latitude=data["latitude"], longitude=data["longitude"])


def validate_coordinate(latitude, longitude) -> None:
    if not _is_number(latitude) or not _is_number(longitude):
        raise InvalidCoordinate(latitude, longitude, "not a number")
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinate(latitude, longitude, "not finite")
    if not MIN_LATITUDE <= latitude <= MAX_LATITUDE:
        raise InvalidCoordinate(latitude, longitude, "latitude must be within [-90, 90]")
    if not MIN_LONGITUDE <= longitude <= MAX_LONGITUDE:
        raise InvalidCoordinate(latitude, longitude, "longitude must be within [-180, 180]")


def require_coordinate(value) -> Coordinate:
    if not isinstance(value, Coordinate):
        raise InvalidCoordinate(getattr(value, "latitude", value), getattr(value, "longitude", None), "not a Coordinate")
    # object.__setattr__ can still bypass the frozen check.
    validate_coordinate(value.latitude, value.longitude)
    return value


@dataclass(frozen=True)
class SiteGeofence:
    """Circular boundary around a job site. Read-only to the core."""

    site_id: str
    center: Coordinate
    radius_meters: float
    name: str = ""

    def __post_init__(self):
        require_positive(self.radius_meters, "radius_meters")

    @classmethod
    def with_default_radius(cls, site_id: str, center: Coordinate, *, name: str = "") -> "SiteGeofence":
        return cls(site_id=site_id, center=center, radius_meters=DEFAULT_RADIUS_METERS, name=name)


@dataclass(frozen=True)
class GeofenceResult:
    within_radius: bool
    distance_meters: float
