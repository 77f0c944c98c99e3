from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Persistence port for attendance records.

    Implementations must make ``create_open`` atomic per (worker, site): two
    concurrent clock-ins may not both leave an open record behind.
    """

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open(self, worker_id: str, site_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_open(self, record: AttendanceRecord) -> AttendanceRecord:
        """Persist a freshly opened record; raise ShiftAlreadyOpen on conflict."""

        raise NotImplementedError

    def save_clock_out(self, record: AttendanceRecord) -> AttendanceRecord:
        """Persist clock-out fields; raise NoOpenShift if the stored record is already closed."""

        raise NotImplementedError

    def list_for_workers(
        self,
        worker_ids: Optional[Iterable[str]],
        *,
        start: datetime,
        end: datetime,
        closed_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        """Records whose clock-in falls in [start, end], oldest first.

        ``worker_ids=None`` means every worker.
        """

        raise NotImplementedError
