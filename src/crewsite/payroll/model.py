from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from ..common.money import round_money


@dataclass(frozen=True)
class PayrollLineItem:
    """One completed shift inside a worker's payroll entry."""

    record_id: str
    worker_id: str
    site_id: str
    shift_date: date
    clock_in_at: datetime
    hours_worked: float
    hourly_rate: float
    verified: bool

    @property
    def exact_subtotal(self) -> float:
        return self.hours_worked * self.hourly_rate

    @property
    def subtotal(self) -> float:
        return round_money(self.exact_subtotal)


@dataclass(frozen=True)
class PayrollEntry:
    """Per-worker payroll. Totals are always derived from the line items."""

    worker_id: str
    display_name: str
    hourly_rate: float
    line_items: tuple[PayrollLineItem, ...] = ()

    @property
    def exact_total_hours(self) -> float:
        return sum(item.hours_worked for item in self.line_items)

    @property
    def exact_total_pay(self) -> float:
        return sum(item.exact_subtotal for item in self.line_items)

    @property
    def total_hours(self) -> float:
        return round_money(self.exact_total_hours)

    @property
    def total_pay(self) -> float:
        return round_money(self.exact_total_pay)

    @property
    def verified_hours(self) -> float:
        return round_money(sum(item.hours_worked for item in self.line_items if item.verified))


@dataclass(frozen=True)
class PayrollBatch:
    period_start: Union[date, datetime]
    period_end: Union[date, datetime]
    entries: tuple[PayrollEntry, ...] = field(default_factory=tuple)

    @property
    def grand_total_hours(self) -> float:
        return round_money(sum(e.exact_total_hours for e in self.entries))

    @property
    def grand_total_pay(self) -> float:
        return round_money(sum(e.exact_total_pay for e in self.entries))

    def get_entry(self, worker_id: str) -> Optional[PayrollEntry]:
        for entry in self.entries:
            if entry.worker_id == worker_id:
                return entry
        return None
