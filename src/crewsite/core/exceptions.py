from __future__ import annotations

from typing import Iterable, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidCoordinate(ValidationError):
    """Raised when a latitude/longitude pair is outside the valid ranges."""

    def __init__(self, latitude, longitude, reason: str = "out of range"):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"Invalid coordinate ({latitude!r}, {longitude!r}): {reason}")


class InvalidTimestamp(ValidationError):
    """Raised when a clock-out time precedes the clock-in time."""

    def __init__(self, record_id: str, clock_in_at, at):
        self.record_id = record_id
        self.clock_in_at = clock_in_at
        self.at = at
        super().__init__(f"Clock-out {at.isoformat()} precedes clock-in {clock_in_at.isoformat()} for record {record_id}")


class ShiftAlreadyOpen(DomainError):
    def __init__(self, worker_id: str, site_id: str, record_id: Optional[str] = None):
        self.worker_id = worker_id
        self.site_id = site_id
        self.record_id = record_id
        suffix = f" (record {record_id})" if record_id else ""
        super().__init__(f"Worker {worker_id} already has an open shift at site {site_id}{suffix}")


class NoOpenShift(DomainError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record {record_id} is already closed")


class ShiftStillOpen(DomainError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record {record_id} has not been clocked out yet")


class UnknownWorker(DomainError):
    """Raised when payroll references a worker without a pay profile."""

    def __init__(self, worker_ids: Iterable[str]):
        self.missing_worker_ids = tuple(worker_ids)
        super().__init__(f"No pay profile for worker(s): {', '.join(self.missing_worker_ids)}")


class NotFoundError(DomainError):
    """Raised when a referenced document does not exist."""


class RecordNotFound(NotFoundError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Attendance record {record_id} not found")


class SiteNotFound(NotFoundError):
    def __init__(self, site_id: str):
        self.site_id = site_id
        super().__init__(f"Site {site_id} not found")


class LocationError(DomainError):
    """Raised by location adapters when no position can be obtained."""


class LocationUnavailable(LocationError):
    pass


class PermissionDenied(LocationError):
    pass


class DocumentExists(Exception):
    """Raised by a document store when a conditional create hits an existing path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Document already exists at {path}")


class DocumentConflict(Exception):
    """Raised by a document store when a conditional update or delete finds unexpected contents."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Document at {path} does not match the expected fields")
