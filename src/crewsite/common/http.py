"""Request parsing and error mapping shared by the Flask controllers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from flask import jsonify

from ..core.exceptions import (
    DomainError,
    LocationUnavailable,
    NoOpenShift,
    NotFoundError,
    PermissionDenied,
    ShiftAlreadyOpen,
    ShiftStillOpen,
    UnknownWorker,
    ValidationError,
)
from ..geofence.model import Coordinate
from .datetime_utils import parse_iso_date, parse_iso_datetime, to_naive_local


def parse_coordinate(data: dict, prefix: str = "") -> Coordinate:
    # Clients report a failed device fix instead of sending coordinates.
    failure = data.get(f"{prefix}location_error")
    if failure == "permission_denied":
        raise PermissionDenied("Location permission was denied on the device")
    if failure:
        raise LocationUnavailable(f"Device location unavailable: {failure}")

    # Coordinate validates the range; only presence is checked here.
    lat = data.get(f"{prefix}latitude")
    lng = data.get(f"{prefix}longitude")
    if lat is None or lng is None:
        raise ValidationError("latitude and longitude are required")
    return Coordinate(latitude=lat, longitude=lng)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    try:
        parsed = parse_iso_datetime(value)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}") from None
    return to_naive_local(parsed)


def parse_day(value: Optional[str], field_name: str) -> date:
    if not value:
        raise ValidationError(f"Missing {field_name} parameter")
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name} date (expected YYYY-MM-DD): {value!r}") from None


def parse_id_list(value, field_name: str) -> Optional[list[str]]:
    """JSON list of ids, or None when absent. A bare string is rejected."""
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ValidationError(f"{field_name} must be a list of ids")
    return [v.strip() for v in value]


def status_for(exc: DomainError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (ShiftAlreadyOpen, NoOpenShift, ShiftStillOpen)):
        return 409
    if isinstance(exc, UnknownWorker):
        return 422
    return 400


def error_response(exc: DomainError):
    body = {"success": False, "error": type(exc).__name__, "message": str(exc)}
    for attr in ("worker_id", "site_id", "record_id"):
        if getattr(exc, attr, None) is not None:
            body[attr] = getattr(exc, attr)
    if isinstance(exc, UnknownWorker):
        body["missing_worker_ids"] = list(exc.missing_worker_ids)
    return jsonify(body), status_for(exc)
