from __future__ import annotations

from .base import PayrollCalculator
from ...attendance.ledger import hours_worked
from ...attendance.model import AttendanceRecord


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: exact clock-out minus clock-in, in hours, unrounded."""

    def hours_for(self, record: AttendanceRecord) -> float:
        return hours_worked(record)
