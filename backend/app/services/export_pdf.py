"""PDF exports of customer and city balances using fpdf2.

The built-in Helvetica font only covers latin-1, so PDF labels are always
English and other characters in names are replaced.
"""
from __future__ import annotations

import io
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from backend.app.services.balances import (
    ZERO,
    CitySummary,
    CustomerSummary,
    collection_rate,
)
from backend.app.services.export_i18n import t

# ── Shared helpers ──────────────────────────────────────────────────────────

_COL_BG = (31, 78, 121)   # dark blue header
_LINE_H = 7
_FONT = "Helvetica"
_LANG = "en"
_WIDTHS = [60, 75, 38, 34, 34, 30]


def _new_pdf(title: str, subtitle: str) -> FPDF:
    """Create a landscape PDF with title and subtitle."""
    pdf = FPDF(orientation="L")
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.set_font(_FONT, "B", 16)
    pdf.cell(0, 10, _safe_text(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(_FONT, "", 9)
    pdf.cell(0, 6, _safe_text(subtitle), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)
    return pdf


def _header_row(pdf: FPDF, headers: list[str], widths: list[int]) -> None:
    pdf.set_fill_color(*_COL_BG)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font(_FONT, "B", 9)
    for i, (h, w) in enumerate(zip(headers, widths)):
        align = "R" if i > 1 else "L"
        pdf.cell(w, _LINE_H, _safe_text(h), border=1, fill=True, align=align)
    pdf.ln()
    pdf.set_text_color(0, 0, 0)


def _data_row(pdf: FPDF, values: list[str], widths: list[int], bold: bool = False) -> None:
    pdf.set_font(_FONT, "B" if bold else "", 8)
    for i, (v, w) in enumerate(zip(values, widths)):
        align = "R" if i > 1 else "L"
        pdf.cell(w, _LINE_H, _safe_text(v), border="B", align=align)
    pdf.ln()


def _fmt(value: Decimal) -> str:
    return f"{value:,.2f}"


def _pct(value: Decimal) -> str:
    return f"{value:.1f}%"


def _truncate(text: str, limit: int = 45) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def _safe_text(text: str) -> str:
    """Replace non-latin-1 characters for PDF built-in fonts."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _to_bytes(pdf: FPDF) -> io.BytesIO:
    buf = io.BytesIO(bytes(pdf.output()))
    buf.seek(0)
    return buf


def _balances_pdf(
    title: str,
    currency: str,
    generated: date | None,
    headers: list[str],
    rows: list[tuple[str, list[str], CustomerSummary | CitySummary]],
) -> io.BytesIO:
    generated = generated or date.today()
    pdf = _new_pdf(
        title,
        f"{t(_LANG, 'currency')}: {currency}  |  {t(_LANG, 'generated')}: {generated.isoformat()}",
    )
    _header_row(pdf, headers, _WIDTHS)

    total_receivables = ZERO
    total_paid = ZERO
    for name, related, summary in rows:
        _data_row(
            pdf,
            [
                _truncate(name, 35),
                _truncate(", ".join(related)),
                _fmt(summary.total_receivables),
                _fmt(summary.total_paid),
                _fmt(summary.outstanding_balance),
                _pct(summary.collection_rate),
            ],
            _WIDTHS,
        )
        total_receivables += summary.total_receivables
        total_paid += summary.total_paid

    _data_row(
        pdf,
        [
            t(_LANG, "totals"),
            "",
            _fmt(total_receivables),
            _fmt(total_paid),
            _fmt(total_receivables - total_paid),
            _pct(collection_rate(total_paid, total_receivables)),
        ],
        _WIDTHS,
        bold=True,
    )
    return _to_bytes(pdf)


def _amount_headers() -> list[str]:
    return [
        t(_LANG, "total_receivables"),
        t(_LANG, "total_paid"),
        t(_LANG, "outstanding"),
        t(_LANG, "collection_rate"),
    ]


# ── Customer balances ────────────────────────────────────────────────────


def export_customer_balances_pdf(
    summaries: Sequence[CustomerSummary],
    currency: str,
    generated: date | None = None,
) -> io.BytesIO:
    return _balances_pdf(
        t(_LANG, "customer_balances"),
        currency,
        generated,
        [t(_LANG, "customer"), t(_LANG, "cities"), *_amount_headers()],
        [(s.name, s.cities, s) for s in summaries],
    )


# ── City balances ────────────────────────────────────────────────────────


def export_city_balances_pdf(
    summaries: Sequence[CitySummary],
    currency: str,
    generated: date | None = None,
) -> io.BytesIO:
    return _balances_pdf(
        t(_LANG, "city_balances"),
        currency,
        generated,
        [t(_LANG, "city"), t(_LANG, "customers"), *_amount_headers()],
        [(s.city, s.customers, s) for s in summaries],
    )
