from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence, Union

from ..common.datetime_utils import hours_between, now_local, period_bound, to_naive_local
from ..core.enums import ShiftState, VerificationStatus
from ..core.exceptions import InvalidTimestamp, NoOpenShift, RecordNotFound, ShiftAlreadyOpen, ShiftStillOpen, ValidationError
from ..geofence.evaluator import evaluate
from ..geofence.model import Coordinate, GeofenceResult, SiteGeofence, require_coordinate
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusDecision:
    status: VerificationStatus
    note: Optional[str] = None


def derive_status(result: GeofenceResult, fence: SiteGeofence) -> StatusDecision:
    if result.within_radius:
        return StatusDecision(status=VerificationStatus.VERIFIED)
    return StatusDecision(
        status=VerificationStatus.OUT_OF_RANGE,
        note=f"{result.distance_meters:.0f} m from site center (allowed {fence.radius_meters:.0f} m)",
    )


def open_shift(
    *,
    record_id: str,
    worker_id: str,
    site_id: str,
    at: datetime,
    location: Coordinate,
    fence: SiteGeofence,
    photo_url: Optional[str] = None,
) -> AttendanceRecord:
    """NO_OPEN_SHIFT -> OPEN. Status is decided here and never again."""
    if fence.site_id != site_id:
        raise ValidationError(f"Geofence belongs to site {fence.site_id}, not {site_id}")

    result = evaluate(location, fence)
    decision = derive_status(result, fence)
    return AttendanceRecord(
        id=record_id,
        worker_id=worker_id,
        site_id=site_id,
        clock_in_at=at,
        clock_in_location=location,
        verification_status=decision.status,
        distance_at_clock_in_meters=result.distance_meters,
        photo_url=photo_url,
        note=decision.note,
    )


def close_shift(record: AttendanceRecord, *, at: datetime, location: Coordinate) -> AttendanceRecord:
    """OPEN -> NO_OPEN_SHIFT. Only clock-out fields change."""
    if not record.is_open:
        raise NoOpenShift(record.id)
    if at < record.clock_in_at:
        raise InvalidTimestamp(record.id, record.clock_in_at, at)
    return record.closed(at=at, location=require_coordinate(location))


def hours_worked(record: AttendanceRecord) -> float:
    if record.clock_out_at is None:
        raise ShiftStillOpen(record.id)
    return hours_between(record.clock_in_at, record.clock_out_at)


def shift_state(open_record: Optional[AttendanceRecord]) -> ShiftState:
    if open_record is not None and open_record.is_open:
        return ShiftState.OPEN
    return ShiftState.NO_OPEN_SHIFT


_STATUS_LABELS = {
    VerificationStatus.VERIFIED: "Verified",
    VerificationStatus.OUT_OF_RANGE: "Out of range",
    VerificationStatus.PENDING: "Pending review",
}


class AttendanceLedger:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._attendance = attendance
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)
        self._clock = clock or now_local

    def clock_in(
        self,
        worker_id: str,
        site_id: str,
        *,
        location: Coordinate,
        fence: SiteGeofence,
        at: datetime | None = None,
        photo_url: str | None = None,
    ) -> AttendanceRecord:
        at = to_naive_local(at or self._clock())

        existing = self._attendance.get_open(worker_id, site_id)
        if existing:
            raise ShiftAlreadyOpen(worker_id, site_id, existing.id)

        record = open_shift(
            record_id=self._new_id(),
            worker_id=worker_id,
            site_id=site_id,
            at=at,
            location=location,
            fence=fence,
            photo_url=photo_url,
        )
        saved = self._attendance.create_open(record)
        logger.info(
            "clock-in worker=%s site=%s record=%s status=%s distance=%.1fm",
            worker_id, site_id, saved.id, saved.verification_status.value, saved.distance_at_clock_in_meters,
        )
        return saved

    def clock_out(self, record_id: str, *, location: Coordinate, at: datetime | None = None) -> AttendanceRecord:
        at = to_naive_local(at or self._clock())

        record = self._attendance.get(record_id)
        if not record:
            raise RecordNotFound(record_id)

        closed = close_shift(record, at=at, location=location)
        saved = self._attendance.save_clock_out(closed)
        logger.info("clock-out worker=%s site=%s record=%s hours=%.2f", saved.worker_id, saved.site_id, saved.id, hours_worked(saved))
        return saved

    def get_open_shift(self, worker_id: str, site_id: str) -> Optional[AttendanceRecord]:
        return self._attendance.get_open(worker_id, site_id)

    def shift_state(self, worker_id: str, site_id: str) -> ShiftState:
        return shift_state(self._attendance.get_open(worker_id, site_id))

    def history(
        self,
        worker_id: str,
        start: Union[date, datetime],
        end: Union[date, datetime],
    ) -> Sequence[AttendanceRecord]:
        return self.crew_records([worker_id], start, end)

    def crew_records(
        self,
        worker_ids: Iterable[str],
        start: Union[date, datetime],
        end: Union[date, datetime],
    ) -> Sequence[AttendanceRecord]:
        records = self._attendance.list_for_workers(
            list(worker_ids),
            start=period_bound(start, end=False),
            end=period_bound(end, end=True),
        )
        return sorted(records, key=lambda r: (r.clock_in_at, r.id))

    def history_rows(self, worker_id: str, start: Union[date, datetime], end: Union[date, datetime]) -> list[dict]:
        return [self._to_ui(r) for r in reversed(self.history(worker_id, start, end))]

    def _to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "id": r.id,
            "site_id": r.site_id,
            "date": r.shift_date.strftime("%Y-%m-%d"),
            "clock_in": r.clock_in_at.strftime("%H:%M:%S"),
            "clock_out": r.clock_out_at.strftime("%H:%M:%S") if r.clock_out_at else "-",
            "hours": f"{hours_worked(r):.2f}" if not r.is_open else "-",
            "status": _STATUS_LABELS.get(r.verification_status, r.verification_status.value),
            "distance_m": round(r.distance_at_clock_in_meters),
        }
