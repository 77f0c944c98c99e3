"""Attendance records -> payroll batch.

Rules:
- only closed shifts whose clock-in falls inside [period_start, period_end] are paid;
- every paid worker must have a pay profile, otherwise the whole batch fails;
- line items are chronological, entries follow the profiles mapping order;
- rounding happens once, on output, never on partial sums.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Mapping, Optional, Union

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import period_bound
from ..core.exceptions import UnknownWorker, ValidationError
from ..workers.model import WorkerPayProfile
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollBatch, PayrollEntry, PayrollLineItem

logger = logging.getLogger(__name__)


def select_payable(
    records: Iterable[AttendanceRecord],
    period_start: Union[date, datetime],
    period_end: Union[date, datetime],
) -> list[AttendanceRecord]:
    start = period_bound(period_start, end=False)
    end = period_bound(period_end, end=True)
    if start > end:
        raise ValidationError(f"Payroll period start {start.isoformat()} is after end {end.isoformat()}")

    payable = []
    for r in records:
        if not start <= r.clock_in_at <= end:
            continue
        if r.is_open:
            logger.debug("skipping open shift record=%s worker=%s", r.id, r.worker_id)
            continue
        payable.append(r)
    return payable


def aggregate(
    records: Iterable[AttendanceRecord],
    profiles: Mapping[str, WorkerPayProfile],
    period_start: Union[date, datetime],
    period_end: Union[date, datetime],
    *,
    calculator: Optional[PayrollCalculator] = None,
) -> PayrollBatch:
    calculator = calculator or StandardPayrollCalculator()
    payable = select_payable(records, period_start, period_end)

    missing = sorted({r.worker_id for r in payable if r.worker_id not in profiles})
    if missing:
        raise UnknownWorker(missing)

    by_worker: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for r in payable:
        by_worker[r.worker_id].append(r)

    entries = []
    for worker_id, profile in profiles.items():
        worker_records = by_worker.get(worker_id)
        if not worker_records:
            continue

        items = [
            PayrollLineItem(
                record_id=r.id,
                worker_id=worker_id,
                site_id=r.site_id,
                shift_date=r.shift_date,
                clock_in_at=r.clock_in_at,
                hours_worked=calculator.hours_for(r),
                hourly_rate=profile.hourly_rate,
                verified=r.verified,
            )
            for r in worker_records
        ]
        items.sort(key=lambda item: (item.clock_in_at, item.record_id))

        entries.append(
            PayrollEntry(
                worker_id=worker_id,
                display_name=profile.display_name,
                hourly_rate=profile.hourly_rate,
                line_items=tuple(items),
            )
        )

    batch = PayrollBatch(period_start=period_start, period_end=period_end, entries=tuple(entries))
    logger.info(
        "payroll aggregated period=%s..%s entries=%d hours=%.2f pay=%.2f",
        period_start, period_end, len(batch.entries), batch.grand_total_hours, batch.grand_total_pay,
    )
    return batch
