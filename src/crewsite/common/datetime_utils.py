from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

from ..core.constants import SECONDS_PER_HOUR


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


def to_naive_local(value: datetime) -> datetime:
    """Offset-bearing datetimes become naive local time; naive ones pass through.

    The core only ever compares naive local datetimes.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_HOUR


def period_bound(value: Union[date, datetime], *, end: bool) -> datetime:
    """Widen a date to the first/last instant of that day; datetimes pass through."""
    if isinstance(value, datetime):
        return to_naive_local(value)
    return datetime.combine(value, time.max if end else time.min)
