"""Great-circle distance and geofence classification.

Pure functions: no I/O, no rounding. Distances are in meters.
"""

from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt

from ..core.constants import EARTH_RADIUS_METERS
from .model import Coordinate, GeofenceResult, SiteGeofence, require_coordinate


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between ``a`` and ``b``."""
    a = require_coordinate(a)
    b = require_coordinate(b)

    phi1, phi2 = radians(a.latitude), radians(b.latitude)
    d_phi = radians(b.latitude - a.latitude)
    d_lambda = radians(b.longitude - a.longitude)

    h = sin(d_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(d_lambda / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def evaluate(point: Coordinate, fence: SiteGeofence) -> GeofenceResult:
    """Classify ``point`` against ``fence``; the boundary counts as inside."""
    distance = distance_meters(point, fence.center)
    return GeofenceResult(within_radius=distance <= fence.radius_meters, distance_meters=distance)
