from __future__ import annotations

import csv
import io
from datetime import date, datetime

from openpyxl import load_workbook

from crewsite.export.formatter import (
    DETAIL_COLUMNS,
    SUMMARY_COLUMNS,
    to_delimited_table,
    to_workbook,
    write_workbook,
)
from crewsite.payroll.model import PayrollBatch, PayrollEntry, PayrollLineItem


def _item(record_id, worker_id, site_id, day, hours, rate, verified=True):
    return PayrollLineItem(
        record_id=record_id,
        worker_id=worker_id,
        site_id=site_id,
        shift_date=date(2026, 3, day),
        clock_in_at=datetime(2026, 3, day, 9, 0),
        hours_worked=hours,
        hourly_rate=rate,
        verified=verified,
    )


def _batch(*entries):
    return PayrollBatch(period_start=date(2026, 3, 1), period_end=date(2026, 3, 7), entries=tuple(entries))


def test_single_line_csv_round_trips():
    entry = PayrollEntry("w-ana", "Ana", 25.0, (_item("r1", "w-ana", "cambie-marine", 2, 8.5, 25.0),))

    rows = list(csv.reader(io.StringIO(to_delimited_table(_batch(entry)))))

    assert rows[0] == DETAIL_COLUMNS
    assert rows[1] == ["w-ana", "cambie-marine", "2026-03-02", "8.50", "25.00", "Yes", "212.50"]
    assert len(rows) == 2


def test_csv_quotes_delimiters_and_quotes():
    entry = PayrollEntry(
        'w "ana"',
        "Ana",
        25.0,
        (_item("r1", 'w "ana"', "Cambie, Marine", 2, 1.0, 25.0, verified=False),),
    )

    text = to_delimited_table(_batch(entry))

    assert '"w ""ana""","Cambie, Marine",2026-03-02,1.00,25.00,No,25.00\r\n' in text
    assert list(csv.reader(io.StringIO(text)))[1][:2] == ['w "ana"', "Cambie, Marine"]


def test_csv_empty_batch_has_header_only():
    assert to_delimited_table(_batch()) == ",".join(DETAIL_COLUMNS) + "\r\n"


def test_csv_rows_follow_entry_then_line_order():
    bo = PayrollEntry("w-bo", "Bo", 30.0, (_item("b1", "w-bo", "s", 2, 1.0, 30.0),))
    ana = PayrollEntry("w-ana", "Ana", 25.0, (_item("a1", "w-ana", "s", 2, 1.0, 25.0), _item("a2", "w-ana", "s", 3, 2.0, 25.0)))

    rows = list(csv.reader(io.StringIO(to_delimited_table(_batch(bo, ana)))))[1:]

    assert [(r[0], r[2]) for r in rows] == [("w-bo", "2026-03-02"), ("w-ana", "2026-03-02"), ("w-ana", "2026-03-03")]


def test_workbook_sheets_use_entry_totals():
    items = tuple(_item(f"r{n}", "w-ana", "s", 2 + n, 1 / 3, 10.0) for n in range(3))
    entry = PayrollEntry("w-ana", "Ana", 10.0, items)

    wb = to_workbook(_batch(entry))

    assert list(wb.summary.columns) == SUMMARY_COLUMNS
    assert list(wb.detail.columns) == DETAIL_COLUMNS
    assert wb.summary.to_dict("records") == [{"Worker": "w-ana", "Rate": 10.0, "Total Hours": 1.0, "Total Pay": 10.0}]
    assert list(wb.detail["Subtotal"]) == [3.33, 3.33, 3.33]
    assert list(wb.detail["Hours"]) == [0.33, 0.33, 0.33]


def test_write_workbook_produces_two_formatted_sheets():
    entry = PayrollEntry("w-ana", "Ana", 25.0, (_item("r1", "w-ana", "s", 2, 8.5, 25.0),))

    data = write_workbook(to_workbook(_batch(entry)))
    book = load_workbook(io.BytesIO(data))

    assert book.sheetnames == ["Summary", "Details"]
    summary = book["Summary"]
    assert [c.value for c in summary[1]] == SUMMARY_COLUMNS
    assert [c.value for c in summary[2]] == ["w-ana", 25, 8.5, 212.5]
    assert summary["D2"].number_format == "0.00"
    details = book["Details"]
    assert [c.value for c in details[2]] == ["w-ana", "s", "2026-03-02", 8.5, 25, "Yes", 212.5]
    assert details["G2"].number_format == "0.00"
