from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from backend.app.schemas.receivable import PaymentOut, ReceivableOut
from backend.app.services.balances import PaymentStatus


class ReceivableBalanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    receivable: ReceivableOut
    paid_amount: Decimal
    remaining: Decimal
    status: PaymentStatus


class ReceivableDetailOut(ReceivableBalanceOut):
    payments: list[PaymentOut]


class CustomerSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    total_receivables: Decimal
    total_paid: Decimal
    outstanding_balance: Decimal
    collection_rate: Decimal
    cities: list[str]
    receivables: list[ReceivableOut]
    payments: list[PaymentOut]


class CitySummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    city: str
    total_receivables: Decimal
    total_paid: Decimal
    outstanding_balance: Decimal
    collection_rate: Decimal
    customers: list[str]
    receivables: list[ReceivableOut]
    payments: list[PaymentOut]


# ─── Reports ─────────────────────────────────────────────────────────────────


class ReportTotalsOut(BaseModel):
    total_receivables: Decimal
    total_paid: Decimal
    outstanding_balance: Decimal
    collection_rate: Decimal
    receivable_count: int
    payment_count: int


class MonthlyTrendOut(BaseModel):
    month: str
    receivables: Decimal
    payments: Decimal
    outstanding: Decimal


class PaymentTypeShareOut(BaseModel):
    payment_type: str
    amount: Decimal
    percentage: Decimal


class DailyPaymentOut(BaseModel):
    date: dt.date
    amount: Decimal


class PerformanceRowOut(BaseModel):
    """One customer or city in a ranking."""

    name: str
    receivables: Decimal
    payments: Decimal
    outstanding: Decimal
    collection_rate: Decimal


class ReportOut(BaseModel):
    from_date: dt.date | None
    to_date: dt.date | None
    customer: str | None
    city: str | None
    summary: ReportTotalsOut
    monthly_trend: list[MonthlyTrendOut]
    payment_types: list[PaymentTypeShareOut]
    daily_payments: list[DailyPaymentOut]
    customer_performance: list[PerformanceRowOut]
    city_analysis: list[PerformanceRowOut]


class ActivityOut(BaseModel):
    kind: str
    id: str
    date: dt.date | None
    amount: Decimal
    customer_name: str | None
    city: str | None
    payment_type: str | None


class DashboardOut(BaseModel):
    summary: ReportTotalsOut
    city_breakdown: list[PerformanceRowOut]
    recent_activity: list[ActivityOut]


class FilterOptionsOut(BaseModel):
    customers: list[str]
    cities: list[str]
    payment_types: list[str]
