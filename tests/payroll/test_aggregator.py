from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from crewsite.attendance.model import AttendanceRecord
from crewsite.core.enums import VerificationStatus
from crewsite.core.exceptions import UnknownWorker, ValidationError
from crewsite.geofence.model import Coordinate
from crewsite.payroll.aggregator import aggregate
from crewsite.payroll.calculator.base import PayrollCalculator
from crewsite.workers.model import WorkerPayProfile

HERE = Coordinate(49.2827, -123.1207)


def make_record(record_id, worker_id, start, hours, *, site_id="site-a", status=VerificationStatus.VERIFIED):
    return AttendanceRecord(
        id=record_id,
        worker_id=worker_id,
        site_id=site_id,
        clock_in_at=start,
        clock_in_location=HERE,
        clock_out_at=start + timedelta(hours=hours) if hours is not None else None,
        clock_out_location=HERE if hours is not None else None,
        verification_status=status,
        distance_at_clock_in_meters=5.0,
    )


def profiles(*items):
    return {p.worker_id: p for p in items}


ANA = WorkerPayProfile(worker_id="w-ana", display_name="Ana", hourly_rate=25.00)
BO = WorkerPayProfile(worker_id="w-bo", display_name="Bo", hourly_rate=30.00)


def test_three_shifts_total_hours_and_pay():
    records = [
        make_record("r1", "w-ana", datetime(2026, 3, 2, 8, 0), 8.0),
        make_record("r2", "w-ana", datetime(2026, 3, 3, 8, 0), 7.5),
        make_record("r3", "w-ana", datetime(2026, 3, 4, 8, 0), 9.0),
    ]

    batch = aggregate(records, profiles(ANA), date(2026, 3, 1), date(2026, 3, 7))
    entry = batch.get_entry("w-ana")

    assert entry.total_hours == 24.5
    assert entry.total_pay == 612.50
    assert [i.subtotal for i in entry.line_items] == [200.0, 187.5, 225.0]
    assert batch.grand_total_hours == 24.5
    assert batch.grand_total_pay == 612.50


def test_totals_use_unrounded_subtotals():
    # Three 20-minute shifts at 10.00: each subtotal shows 3.33 but the total is 10.00.
    rate = WorkerPayProfile(worker_id="w-ana", display_name="Ana", hourly_rate=10.0)
    records = [make_record(f"r{n}", "w-ana", datetime(2026, 3, 2 + n, 8, 0), 1 / 3) for n in range(3)]

    entry = aggregate(records, profiles(rate), date(2026, 3, 1), date(2026, 3, 31)).get_entry("w-ana")

    assert [i.subtotal for i in entry.line_items] == [3.33, 3.33, 3.33]
    assert entry.total_pay == 10.00
    assert entry.total_hours == 1.0


def test_missing_profile_fails_whole_batch():
    records = [
        make_record("r1", "w-ana", datetime(2026, 3, 2, 8, 0), 8.0),
        make_record("r2", "w-ghost", datetime(2026, 3, 2, 8, 0), 8.0),
    ]

    with pytest.raises(UnknownWorker) as exc:
        aggregate(records, profiles(ANA), date(2026, 3, 1), date(2026, 3, 7))

    assert exc.value.missing_worker_ids == ("w-ghost",)


def test_open_and_out_of_period_records_are_excluded():
    records = [
        make_record("open", "w-ana", datetime(2026, 3, 2, 8, 0), None),
        make_record("before", "w-ana", datetime(2026, 2, 28, 23, 0), 2.0),
        make_record("after", "w-ana", datetime(2026, 3, 8, 0, 0), 2.0),
        make_record("first-instant", "w-ana", datetime(2026, 3, 1, 0, 0), 1.0),
        make_record("last-day", "w-ana", datetime(2026, 3, 7, 23, 0), 4.0),
    ]

    entry = aggregate(records, profiles(ANA), date(2026, 3, 1), date(2026, 3, 7)).get_entry("w-ana")

    assert [i.record_id for i in entry.line_items] == ["first-instant", "last-day"]
    # Hours crossing midnight stay on the clock-in date.
    assert entry.line_items[1].shift_date == date(2026, 3, 7)
    assert entry.total_hours == 5.0


def test_unknown_worker_outside_period_is_ignored():
    records = [make_record("r1", "w-ghost", datetime(2026, 1, 1, 8, 0), 8.0)]
    batch = aggregate(records, profiles(ANA), date(2026, 3, 1), date(2026, 3, 7))
    assert batch.entries == ()


def test_inclusive_datetime_bounds():
    start = datetime(2026, 3, 2, 8, 0)
    end = datetime(2026, 3, 2, 12, 0)
    records = [make_record("a", "w-ana", start, 1.0), make_record("b", "w-ana", end, 1.0)]

    entry = aggregate(records, profiles(ANA), start, end).get_entry("w-ana")

    assert len(entry.line_items) == 2


def test_line_items_chronological_and_entries_follow_profile_order():
    records = [
        make_record("bo-1", "w-bo", datetime(2026, 3, 2, 7, 0), 4.0, site_id="site-b"),
        make_record("ana-2", "w-ana", datetime(2026, 3, 3, 8, 0), 2.0, site_id="site-a"),
        make_record("ana-1", "w-ana", datetime(2026, 3, 2, 13, 0), 3.0, site_id="site-b"),
        make_record("ana-0", "w-ana", datetime(2026, 3, 2, 6, 0), 1.0, site_id="site-a"),
    ]

    batch = aggregate(records, profiles(BO, ANA), date(2026, 3, 1), date(2026, 3, 7))

    assert [e.worker_id for e in batch.entries] == ["w-bo", "w-ana"]
    ana = batch.get_entry("w-ana")
    assert [i.record_id for i in ana.line_items] == ["ana-0", "ana-1", "ana-2"]
    assert [(i.site_id, i.shift_date) for i in ana.line_items] == [
        ("site-a", date(2026, 3, 2)),
        ("site-b", date(2026, 3, 2)),
        ("site-a", date(2026, 3, 3)),
    ]
    assert batch.grand_total_hours == 10.0
    assert batch.grand_total_pay == 4 * 30 + 6 * 25


def test_line_items_interleave_sites_by_clock_in():
    records = [
        make_record("r-b-pm", "w-ana", datetime(2026, 3, 2, 13, 0), 3.0, site_id="site-b"),
        make_record("r-a-am", "w-ana", datetime(2026, 3, 2, 7, 0), 4.0, site_id="site-a"),
        make_record("r-b-am", "w-ana", datetime(2026, 3, 2, 11, 30), 1.0, site_id="site-b"),
        make_record("r-a-next", "w-ana", datetime(2026, 3, 3, 7, 0), 4.0, site_id="site-a"),
    ]

    entry = aggregate(records, profiles(ANA), date(2026, 3, 1), date(2026, 3, 7)).get_entry("w-ana")

    assert [(i.record_id, i.site_id) for i in entry.line_items] == [
        ("r-a-am", "site-a"),
        ("r-b-am", "site-b"),
        ("r-b-pm", "site-b"),
        ("r-a-next", "site-a"),
    ]
    assert entry.total_hours == 12.0


def test_workers_without_records_are_omitted():
    records = [make_record("r1", "w-bo", datetime(2026, 3, 2, 8, 0), 1.0)]
    batch = aggregate(records, profiles(ANA, BO), date(2026, 3, 1), date(2026, 3, 7))
    assert [e.worker_id for e in batch.entries] == ["w-bo"]


def test_verified_flag_carried_to_line_items():
    records = [
        make_record("r1", "w-ana", datetime(2026, 3, 2, 8, 0), 8.0),
        make_record("r2", "w-ana", datetime(2026, 3, 3, 8, 0), 8.0, status=VerificationStatus.OUT_OF_RANGE),
    ]
    entry = aggregate(records, profiles(ANA), date(2026, 3, 1), date(2026, 3, 7)).get_entry("w-ana")

    assert [i.verified for i in entry.line_items] == [True, False]
    assert entry.verified_hours == 8.0


def test_reversed_period_rejected():
    with pytest.raises(ValidationError):
        aggregate([], {}, date(2026, 3, 7), date(2026, 3, 1))


def test_custom_calculator_is_used():
    class HalfHours(PayrollCalculator):
        def hours_for(self, record):
            return 0.5

    records = [make_record("r1", "w-ana", datetime(2026, 3, 2, 8, 0), 8.0)]
    entry = aggregate(records, profiles(ANA), date(2026, 3, 1), date(2026, 3, 7), calculator=HalfHours()).get_entry("w-ana")

    assert entry.total_pay == 12.5
