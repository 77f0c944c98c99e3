from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceRecord


class PayrollCalculator(ABC):
    """Payable hours for one closed shift.

    The aggregator multiplies the result by the worker's rate; a calculator
    must not round.
    """

    @abstractmethod
    def hours_for(self, record: AttendanceRecord) -> float:
        raise NotImplementedError
