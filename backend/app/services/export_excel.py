"""Excel exports of customer and city balances using openpyxl."""
from __future__ import annotations

import io
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from backend.app.services.balances import (
    ZERO,
    CitySummary,
    CustomerSummary,
    collection_rate,
)
from backend.app.services.export_i18n import t

# ── Shared styling constants ────────────────────────────────────────────────

_HEADER_FONT = Font(name="Calibri", bold=True, color="FFFFFF", size=11)
_HEADER_FILL = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
_TOTAL_FONT = Font(name="Calibri", bold=True, size=11)
_TOTAL_BORDER = Border(
    top=Side(style="thin"),
    bottom=Side(style="double"),
)
_CURRENCY_FMT = "#,##0.00"
_PERCENT_FMT = '0.0"%"'
_RIGHT = Alignment(horizontal="right")
_LEFT = Alignment(horizontal="left")


def _auto_width(ws: Any) -> None:
    """Auto-fit column widths based on content."""
    for col_idx in range(1, ws.max_column + 1):
        max_len = 0
        col_letter = get_column_letter(col_idx)
        for row in ws.iter_rows(min_col=col_idx, max_col=col_idx, values_only=False):
            cell = row[0]
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(max_len + 4, 40)


def _write_header_row(ws: Any, row: int, values: list[str]) -> None:
    for col, val in enumerate(values, 1):
        cell = ws.cell(row=row, column=col, value=val)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _RIGHT if col > 2 else _LEFT


def _write_title(ws: Any, title: str, subtitle: str) -> int:
    """Write report title and subtitle, return next available row."""
    ws.cell(row=1, column=1, value=title).font = Font(name="Calibri", bold=True, size=14)
    ws.cell(row=2, column=1, value=subtitle).font = Font(name="Calibri", size=10, italic=True)
    return 4


def _write_amounts(
    ws: Any, row: int, amounts: list[Decimal], rate: Decimal, bold: bool = False
) -> None:
    for offset, amount in enumerate(amounts):
        c = ws.cell(row=row, column=3 + offset, value=float(amount))
        c.number_format = _CURRENCY_FMT
        c.alignment = _RIGHT
        if bold:
            c.font = _TOTAL_FONT
            c.border = _TOTAL_BORDER
    c = ws.cell(row=row, column=3 + len(amounts), value=float(rate))
    c.number_format = _PERCENT_FMT
    c.alignment = _RIGHT
    if bold:
        c.font = _TOTAL_FONT
        c.border = _TOTAL_BORDER


def _to_workbook(ws: Any, wb: Workbook) -> io.BytesIO:
    """Finalize workbook and return as BytesIO."""
    _auto_width(ws)
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


def _balances_sheet(
    title: str,
    subtitle: str,
    headers: list[str],
    rows: list[tuple[str, list[str], CustomerSummary | CitySummary]],
    totals_label: str,
) -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]

    row = _write_title(ws, title, subtitle)
    _write_header_row(ws, row, headers)
    row += 1

    total_receivables = ZERO
    total_paid = ZERO
    for name, related, summary in rows:
        ws.cell(row=row, column=1, value=name)
        ws.cell(row=row, column=2, value=", ".join(related))
        _write_amounts(
            ws,
            row,
            [summary.total_receivables, summary.total_paid, summary.outstanding_balance],
            summary.collection_rate,
        )
        total_receivables += summary.total_receivables
        total_paid += summary.total_paid
        row += 1

    ws.cell(row=row, column=1, value=totals_label).font = _TOTAL_FONT
    _write_amounts(
        ws,
        row,
        [total_receivables, total_paid, total_receivables - total_paid],
        collection_rate(total_paid, total_receivables),
        bold=True,
    )
    return _to_workbook(ws, wb)


def _subtitle(lang: str, currency: str, generated: date | None) -> str:
    generated = generated or date.today()
    return f"{t(lang, 'currency')}: {currency}  |  {t(lang, 'generated')}: {generated.isoformat()}"


def _amount_headers(lang: str) -> list[str]:
    return [
        t(lang, "total_receivables"),
        t(lang, "total_paid"),
        t(lang, "outstanding"),
        t(lang, "collection_rate"),
    ]


# ── Customer balances ────────────────────────────────────────────────────


def export_customer_balances_excel(
    summaries: Sequence[CustomerSummary],
    currency: str,
    lang: str = "en",
    generated: date | None = None,
) -> io.BytesIO:
    return _balances_sheet(
        t(lang, "customer_balances"),
        _subtitle(lang, currency, generated),
        [t(lang, "customer"), t(lang, "cities"), *_amount_headers(lang)],
        [(s.name, s.cities, s) for s in summaries],
        t(lang, "totals"),
    )


# ── City balances ────────────────────────────────────────────────────────


def export_city_balances_excel(
    summaries: Sequence[CitySummary],
    currency: str,
    lang: str = "en",
    generated: date | None = None,
) -> io.BytesIO:
    return _balances_sheet(
        t(lang, "city_balances"),
        _subtitle(lang, currency, generated),
        [t(lang, "city"), t(lang, "customers"), *_amount_headers(lang)],
        [(s.city, s.customers, s) for s in summaries],
        t(lang, "totals"),
    )
