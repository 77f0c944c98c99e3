from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Union

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, period_bound
from ..store import paths
from ..store.document_store import DocumentStore
from ..workers.repository import PayProfileRepository
from .aggregator import aggregate
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollBatch

logger = logging.getLogger(__name__)


def _iso(value: Union[date, datetime]) -> str:
    return value.isoformat()


class PayrollService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: PayProfileRepository,
        store: DocumentStore,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._store = store
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock or now_local

    def build_batch(
        self,
        start: Union[date, datetime],
        end: Union[date, datetime],
        *,
        worker_ids: Optional[Iterable[str]] = None,
    ) -> PayrollBatch:
        requested = list(dict.fromkeys(worker_ids)) if worker_ids is not None else None
        records = self._attendance.list_for_workers(
            requested,
            start=period_bound(start, end=False),
            end=period_bound(end, end=True),
            closed_only=True,
        )

        order = requested if requested is not None else sorted({r.worker_id for r in records})
        # Unknown ids are left out of the mapping so the aggregator fails the batch.
        profiles = self._profiles.profiles_for(order)
        return aggregate(records, profiles, start, end, calculator=self._calculator)

    def save_batch(self, manager_id: str, batch: PayrollBatch) -> str:
        summary_id = uuid.uuid4().hex
        self._store.put(paths.payroll_summary(manager_id, summary_id), self.to_document(batch, manager_id=manager_id))
        logger.info("payroll summary saved manager=%s summary=%s total=%.2f", manager_id, summary_id, batch.grand_total_pay)
        return summary_id

    def to_document(self, batch: PayrollBatch, *, manager_id: str) -> dict:
        return {
            "manager_id": manager_id,
            "period_start": _iso(batch.period_start),
            "period_end": _iso(batch.period_end),
            "created_at": self._clock().isoformat(),
            "exported_at": None,
            "grand_total_hours": batch.grand_total_hours,
            "grand_total_pay": batch.grand_total_pay,
            "entries": [
                {
                    "worker_id": e.worker_id,
                    "display_name": e.display_name,
                    "hourly_rate": e.hourly_rate,
                    "total_hours": e.total_hours,
                    "total_pay": e.total_pay,
                    "line_items": [
                        {
                            "record_id": i.record_id,
                            "site_id": i.site_id,
                            "shift_date": i.shift_date.isoformat(),
                            "hours_worked": i.hours_worked,
                            "verified": i.verified,
                            "subtotal": i.subtotal,
                        }
                        for i in e.line_items
                    ],
                }
                for e in batch.entries
            ],
        }

    @staticmethod
    def summarize(batch: PayrollBatch) -> dict:
        return {
            "period_start": _iso(batch.period_start),
            "period_end": _iso(batch.period_end),
            "total_people": len(batch.entries),
            "total_hours": batch.grand_total_hours,
            "total_pay": batch.grand_total_pay,
            "entries": [
                {
                    "worker_id": e.worker_id,
                    "name": e.display_name,
                    "rate": e.hourly_rate,
                    "hours": e.total_hours,
                    "verified_hours": e.verified_hours,
                    "pay": e.total_pay,
                    "shifts": len(e.line_items),
                }
                for e in batch.entries
            ],
        }
