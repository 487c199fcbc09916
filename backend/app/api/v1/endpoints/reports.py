from __future__ import annotations

import datetime as dt
import io

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.database import get_db
from backend.app.schemas.common import DataResponse
from backend.app.schemas.summary import DashboardOut, FilterOptionsOut, ReportOut
from backend.app.services.balances import summarize_all_cities, summarize_all_customers
from backend.app.services.export_excel import (
    export_city_balances_excel,
    export_customer_balances_excel,
)
from backend.app.services.export_pdf import (
    export_city_balances_pdf,
    export_customer_balances_pdf,
)
from backend.app.services.payments import list_payments, payment_types
from backend.app.services.receivables import list_receivables
from backend.app.services.reports import (
    build_dashboard,
    build_report,
    default_report_window,
    filter_options,
)

router = APIRouter()


@router.get("/summary", response_model=DataResponse[ReportOut])
def report_summary(
    from_date: dt.date | None = Query(None),
    to_date: dt.date | None = Query(None),
    customer: str | None = Query(None),
    city: str | None = Query(None),
    db: Session = Depends(get_db),
) -> dict:
    """Totals, trends and rankings for a date window.

    Without either bound the window is the current year to date.
    """
    if from_date is None and to_date is None:
        from_date, to_date = default_report_window()
    report = build_report(
        list_receivables(db),
        list_payments(db),
        from_date=from_date,
        to_date=to_date,
        customer=customer or None,
        city=city or None,
    )
    return {"data": report}


@router.get("/dashboard", response_model=DataResponse[DashboardOut])
def dashboard(db: Session = Depends(get_db)) -> dict:
    return {
        "data": build_dashboard(
            list_receivables(db),
            list_payments(db),
            activity_limit=settings.RECENT_ACTIVITY_LIMIT,
        )
    }


@router.get("/filters", response_model=DataResponse[FilterOptionsOut])
def report_filters(db: Session = Depends(get_db)) -> dict:
    return {"data": filter_options(list_receivables(db), payment_types(db))}


# ── Export helpers ────────────────────────────────────────────────────────

_XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_PDF_MIME = "application/pdf"


def _export_response(buf: io.BytesIO, media_type: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        buf,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ── Customer balances exports ────────────────────────────────────────────


@router.get("/customers/export/excel")
def customer_balances_export_excel(
    lang: str = Query("en"),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    summaries = summarize_all_customers(list_receivables(db), list_payments(db))
    buf = export_customer_balances_excel(summaries, settings.CURRENCY_CODE, lang=lang)
    return _export_response(buf, _XLSX_MIME, "customer-balances.xlsx")


@router.get("/customers/export/pdf")
def customer_balances_export_pdf(db: Session = Depends(get_db)) -> StreamingResponse:
    summaries = summarize_all_customers(list_receivables(db), list_payments(db))
    buf = export_customer_balances_pdf(summaries, settings.CURRENCY_CODE)
    return _export_response(buf, _PDF_MIME, "customer-balances.pdf")


# ── City balances exports ────────────────────────────────────────────────


@router.get("/cities/export/excel")
def city_balances_export_excel(
    lang: str = Query("en"),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    summaries = summarize_all_cities(list_receivables(db), list_payments(db))
    buf = export_city_balances_excel(summaries, settings.CURRENCY_CODE, lang=lang)
    return _export_response(buf, _XLSX_MIME, "city-balances.xlsx")


@router.get("/cities/export/pdf")
def city_balances_export_pdf(db: Session = Depends(get_db)) -> StreamingResponse:
    summaries = summarize_all_cities(list_receivables(db), list_payments(db))
    buf = export_city_balances_pdf(summaries, settings.CURRENCY_CODE)
    return _export_response(buf, _PDF_MIME, "city-balances.pdf")
