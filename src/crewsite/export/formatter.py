"""Payroll batch -> CSV text / two-sheet workbook.

Shapes already-computed numbers only. Column order, two-decimal formatting and
CSV quoting are a compatibility contract with existing exports.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass

import pandas as pd

from ..common.money import format_money, round_money
from ..payroll.model import PayrollBatch, PayrollLineItem

DETAIL_COLUMNS = ["Worker", "Site", "Date", "Hours", "Rate", "Verified", "Subtotal"]
SUMMARY_COLUMNS = ["Worker", "Rate", "Total Hours", "Total Pay"]

SUMMARY_SHEET = "Summary"
DETAIL_SHEET = "Details"

_NUMBER_FORMAT = "0.00"


@dataclass(frozen=True)
class PayrollWorkbook:
    summary: pd.DataFrame
    detail: pd.DataFrame


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _iter_line_items(batch: PayrollBatch):
    for entry in batch.entries:
        for item in entry.line_items:
            yield item


def _detail_text_row(item: PayrollLineItem) -> list[str]:
    return [
        item.worker_id,
        item.site_id,
        item.shift_date.strftime("%Y-%m-%d"),
        format_money(item.hours_worked),
        format_money(item.hourly_rate),
        _yes_no(item.verified),
        format_money(item.subtotal),
    ]


def to_delimited_table(batch: PayrollBatch) -> str:
    """One header row plus one row per line item, in entry order."""
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(DETAIL_COLUMNS)
    for item in _iter_line_items(batch):
        writer.writerow(_detail_text_row(item))
    return out.getvalue()


def to_workbook(batch: PayrollBatch) -> PayrollWorkbook:
    summary = pd.DataFrame(
        [[e.worker_id, round_money(e.hourly_rate), e.total_hours, e.total_pay] for e in batch.entries],
        columns=SUMMARY_COLUMNS,
    )
    detail = pd.DataFrame(
        [
            [
                item.worker_id,
                item.site_id,
                item.shift_date.strftime("%Y-%m-%d"),
                round_money(item.hours_worked),
                round_money(item.hourly_rate),
                _yes_no(item.verified),
                item.subtotal,
            ]
            for item in _iter_line_items(batch)
        ],
        columns=DETAIL_COLUMNS,
    )
    return PayrollWorkbook(summary=summary, detail=detail)


def write_workbook(workbook: PayrollWorkbook) -> bytes:
    """Serialize to .xlsx bytes (sheets "Summary" and "Details")."""
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        for name, frame, numeric in (
            (SUMMARY_SHEET, workbook.summary, ("Rate", "Total Hours", "Total Pay")),
            (DETAIL_SHEET, workbook.detail, ("Hours", "Rate", "Subtotal")),
        ):
            frame.to_excel(writer, sheet_name=name, index=False)
            sheet = writer.sheets[name]
            for col_idx, column in enumerate(frame.columns, start=1):
                if column not in numeric:
                    continue
                for (cell,) in sheet.iter_rows(min_row=2, min_col=col_idx, max_col=col_idx):
                    cell.number_format = _NUMBER_FORMAT
    return out.getvalue()
