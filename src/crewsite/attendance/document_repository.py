from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.exceptions import DocumentConflict, DocumentExists, NoOpenShift, RecordNotFound, ShiftAlreadyOpen
from ..store import paths
from ..store.document_store import DocumentStore, Filter, OrderBy
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


class DocumentAttendanceRepository:
    """AttendanceRepository over a DocumentStore.

    An open shift also owns a lock document at ``openShifts/{worker}__{site}``.
    It is claimed with the store's conditional create, so a racing second
    clock-in fails instead of leaving two open records.
    """

    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        doc = self._store.get(paths.attendance_record(record_id))
        return AttendanceRecord.from_document(doc) if doc else None

    def get_open(self, worker_id: str, site_id: str) -> Optional[AttendanceRecord]:
        lock = self._store.get(paths.open_shift_lock(worker_id, site_id))
        return self._lock_holder(lock) if lock else None

    def _lock_holder(self, lock: dict) -> Optional[AttendanceRecord]:
        record = self.get(lock["record_id"])
        if record is None or not record.is_open:
            # Lock left behind by an interrupted clock-out.
            logger.warning(
                "stale open-shift lock worker=%s site=%s record=%s",
                lock.get("worker_id"), lock.get("site_id"), lock["record_id"],
            )
            return None
        return record

    def create_open(self, record: AttendanceRecord) -> AttendanceRecord:
        # The record is written before the lock so a lock never points at a missing record.
        record_path = paths.attendance_record(record.id)
        self._store.put(record_path, record.to_document())

        lock_path = paths.open_shift_lock(record.worker_id, record.site_id)
        lock = {"record_id": record.id, "worker_id": record.worker_id, "site_id": record.site_id}
        try:
            try:
                self._store.create(lock_path, lock)
            except DocumentExists:
                self._replace_stale_lock(record, lock_path, lock)
        except ShiftAlreadyOpen:
            self._store.delete(record_path)
            raise
        return record

    def _replace_stale_lock(self, record: AttendanceRecord, lock_path: str, lock: dict) -> None:
        current = self._store.get(lock_path)
        if current is not None:
            holder = self._lock_holder(current)
            if holder is not None:
                raise ShiftAlreadyOpen(record.worker_id, record.site_id, holder.id)
            try:
                self._store.delete(lock_path, expect=current)
            except DocumentConflict:
                # Another clock-in got there first; the create below decides.
                logger.info("open-shift lock changed while replacing it worker=%s site=%s", record.worker_id, record.site_id)

        try:
            self._store.create(lock_path, lock)
        except DocumentExists:
            raise ShiftAlreadyOpen(record.worker_id, record.site_id) from None

    def save_clock_out(self, record: AttendanceRecord) -> AttendanceRecord:
        path = paths.attendance_record(record.id)
        if self._store.get(path) is None:
            raise RecordNotFound(record.id)

        doc = record.to_document()
        try:
            self._store.update(
                path,
                {"clock_out_at": doc["clock_out_at"], "clock_out_location": doc["clock_out_location"]},
                expect={"clock_out_at": None},
            )
        except DocumentConflict:
            raise NoOpenShift(record.id) from None

        lock_path = paths.open_shift_lock(record.worker_id, record.site_id)
        try:
            self._store.delete(lock_path, expect={"record_id": record.id})
        except DocumentConflict:
            # The lock is gone or belongs to a newer shift.
            logger.warning("open-shift lock not held by record=%s; left in place", record.id)
        return record

    def list_for_workers(
        self,
        worker_ids: Optional[Iterable[str]],
        *,
        start: datetime,
        end: datetime,
        closed_only: bool = False,
    ) -> Sequence[AttendanceRecord]:
        filters = []
        if worker_ids is not None:
            filters.append(Filter("worker_id", "in", list(worker_ids)))
        if closed_only:
            filters.append(Filter("clock_out_at", "!=", None))

        docs = self._store.query(paths.ATTENDANCE, filters, [OrderBy("clock_in_at")])
        records = [AttendanceRecord.from_document(d) for d in docs]
        # ISO strings only compare correctly within one offset, so bound on parsed values.
        return [r for r in records if start <= r.clock_in_at <= end]
