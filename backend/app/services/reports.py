"""Report and dashboard figures computed from fetched receivables and payments."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from backend.app.services.balances import (
    HUNDRED,
    ZERO,
    CitySummary,
    CustomerSummary,
    coerce_amount,
    collection_rate,
    field_value,
    record_key,
    summarize_all_cities,
    summarize_all_customers,
)

TREND_MONTHS = 6
TOP_PAYMENT_TYPES = 5
RECENT_PAYMENT_DAYS = 7
TOP_RANKED = 10
UNKNOWN_PAYMENT_TYPE = "Unknown"


def as_date(value: Any) -> date | None:
    """Parse a record date; anything unparsable is ``None``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def default_report_window(today: date | None = None) -> tuple[date, date]:
    """Start of the current year through today."""
    today = today or date.today()
    return today.replace(month=1, day=1), today


def _in_range(value: Any, from_date: date | None, to_date: date | None) -> bool:
    if from_date is None and to_date is None:
        return True
    d = as_date(value)
    if d is None:
        return False
    if from_date is not None and d < from_date:
        return False
    if to_date is not None and d > to_date:
        return False
    return True


def filter_for_report(
    receivables: Sequence[Any],
    payments: Sequence[Any],
    from_date: date | None = None,
    to_date: date | None = None,
    customer: str | None = None,
    city: str | None = None,
) -> tuple[list[Any], list[Any]]:
    """Apply report filters.

    Receivables are filtered on their own date. When a customer or city is
    selected, payments are those belonging to any receivable of that
    customer/city, whatever the receivable's date; payments are then
    filtered on ``payment_date``.
    """
    selected = [
        r
        for r in receivables
        if (not customer or field_value(r, "customer_name") == customer)
        and (not city or field_value(r, "city") == city)
    ]
    filtered_receivables = [
        r for r in selected if _in_range(field_value(r, "date"), from_date, to_date)
    ]

    if customer or city:
        ids = {record_key(field_value(r, "id")) for r in selected}
        candidates = [
            p for p in payments if record_key(field_value(p, "receivable_id")) in ids
        ]
    else:
        candidates = list(payments)
    filtered_payments = [
        p
        for p in candidates
        if _in_range(field_value(p, "payment_date"), from_date, to_date)
    ]
    return filtered_receivables, filtered_payments


def totals(receivables: Iterable[Any], payments: Iterable[Any]) -> dict[str, Any]:
    receivables = list(receivables)
    payments = list(payments)
    total_receivables = sum(
        (coerce_amount(field_value(r, "amount")) for r in receivables), ZERO
    )
    total_paid = sum(
        (coerce_amount(field_value(p, "payment_amount")) for p in payments), ZERO
    )
    return {
        "total_receivables": total_receivables,
        "total_paid": total_paid,
        "outstanding_balance": total_receivables - total_paid,
        "collection_rate": collection_rate(total_paid, total_receivables),
        "receivable_count": len(receivables),
        "payment_count": len(payments),
    }


def monthly_trend(
    receivables: Iterable[Any], payments: Iterable[Any], months: int = TREND_MONTHS
) -> list[dict[str, Any]]:
    """Receivables vs payments per ``YYYY-MM``, oldest first, last *months* only."""
    buckets: dict[str, dict[str, Decimal]] = {}

    def _bucket(value: Any) -> dict[str, Decimal] | None:
        d = as_date(value)
        if d is None:
            return None
        key = f"{d.year:04d}-{d.month:02d}"
        return buckets.setdefault(key, {"receivables": ZERO, "payments": ZERO})

    for r in receivables:
        b = _bucket(field_value(r, "date"))
        if b is not None:
            b["receivables"] += coerce_amount(field_value(r, "amount"))
    for p in payments:
        b = _bucket(field_value(p, "payment_date"))
        if b is not None:
            b["payments"] += coerce_amount(field_value(p, "payment_amount"))

    rows = [
        {
            "month": month,
            "receivables": data["receivables"],
            "payments": data["payments"],
            "outstanding": data["receivables"] - data["payments"],
        }
        for month, data in sorted(buckets.items())
    ]
    return rows[-months:] if months > 0 else []


def payment_type_breakdown(
    payments: Iterable[Any], limit: int = TOP_PAYMENT_TYPES
) -> list[dict[str, Any]]:
    by_type: dict[str, Decimal] = {}
    total = ZERO
    for p in payments:
        amount = coerce_amount(field_value(p, "payment_amount"))
        payment_type = field_value(p, "payment_type") or UNKNOWN_PAYMENT_TYPE
        by_type[payment_type] = by_type.get(payment_type, ZERO) + amount
        total += amount

    rows = [
        {
            "payment_type": payment_type,
            "amount": amount,
            "percentage": amount / total * HUNDRED if total > ZERO else ZERO,
        }
        for payment_type, amount in by_type.items()
    ]
    rows.sort(key=lambda row: row["amount"], reverse=True)
    return rows[:limit]


def daily_payments(
    payments: Iterable[Any], days: int = RECENT_PAYMENT_DAYS
) -> list[dict[str, Any]]:
    """Totals for the most recent *days* distinct payment dates, newest first."""
    by_day: dict[date, Decimal] = {}
    for p in payments:
        d = as_date(field_value(p, "payment_date"))
        if d is None:
            continue
        by_day[d] = by_day.get(d, ZERO) + coerce_amount(field_value(p, "payment_amount"))
    return [
        {"date": d, "amount": amount}
        for d, amount in sorted(by_day.items(), reverse=True)[:days]
    ]


def _performance_row(name: str, summary: CustomerSummary | CitySummary) -> dict[str, Any]:
    return {
        "name": name,
        "receivables": summary.total_receivables,
        "payments": summary.total_paid,
        "outstanding": summary.outstanding_balance,
        "collection_rate": summary.collection_rate,
    }


def customer_performance(
    receivables: Sequence[Any], payments: Sequence[Any], limit: int | None = TOP_RANKED
) -> list[dict[str, Any]]:
    rows = [
        _performance_row(s.name, s)
        for s in summarize_all_customers(receivables, payments)
    ]
    rows.sort(key=lambda row: row["receivables"], reverse=True)
    return rows if limit is None else rows[:limit]


def city_analysis(
    receivables: Sequence[Any], payments: Sequence[Any], limit: int | None = TOP_RANKED
) -> list[dict[str, Any]]:
    rows = [
        _performance_row(s.city, s) for s in summarize_all_cities(receivables, payments)
    ]
    rows.sort(key=lambda row: row["receivables"], reverse=True)
    return rows if limit is None else rows[:limit]


def build_report(
    receivables: Sequence[Any],
    payments: Sequence[Any],
    from_date: date | None = None,
    to_date: date | None = None,
    customer: str | None = None,
    city: str | None = None,
) -> dict[str, Any]:
    rs, ps = filter_for_report(receivables, payments, from_date, to_date, customer, city)
    return {
        "from_date": from_date,
        "to_date": to_date,
        "customer": customer,
        "city": city,
        "summary": totals(rs, ps),
        "monthly_trend": monthly_trend(rs, ps),
        "payment_types": payment_type_breakdown(ps),
        "daily_payments": daily_payments(ps),
        "customer_performance": customer_performance(rs, ps),
        "city_analysis": city_analysis(rs, ps),
    }


def recent_activity(
    receivables: Iterable[Any], payments: Iterable[Any], limit: int
) -> list[dict[str, Any]]:
    """Receivables and payments merged, newest first."""
    items: list[dict[str, Any]] = []
    for r in receivables:
        items.append(
            {
                "kind": "receivable",
                "id": record_key(field_value(r, "id")) or "",
                "date": as_date(field_value(r, "date")),
                "amount": coerce_amount(field_value(r, "amount")),
                "customer_name": field_value(r, "customer_name"),
                "city": field_value(r, "city"),
                "payment_type": None,
            }
        )
    for p in payments:
        receivable = field_value(p, "receivable")
        items.append(
            {
                "kind": "payment",
                "id": record_key(field_value(p, "id")) or "",
                "date": as_date(field_value(p, "payment_date")),
                "amount": coerce_amount(field_value(p, "payment_amount")),
                "customer_name": field_value(receivable, "customer_name")
                if receivable is not None
                else None,
                "city": field_value(receivable, "city") if receivable is not None else None,
                "payment_type": field_value(p, "payment_type"),
            }
        )
    # Undated items sort last
    items.sort(key=lambda item: item["date"] or date.min, reverse=True)
    return items[:limit]


def build_dashboard(
    receivables: Sequence[Any], payments: Sequence[Any], activity_limit: int
) -> dict[str, Any]:
    return {
        "summary": totals(receivables, payments),
        "city_breakdown": city_analysis(receivables, payments, limit=None),
        "recent_activity": recent_activity(receivables, payments, activity_limit),
    }


def filter_options(
    receivables: Iterable[Any], payment_types: Iterable[str]
) -> dict[str, list[str]]:
    customers: set[str] = set()
    cities: set[str] = set()
    for r in receivables:
        name = field_value(r, "customer_name")
        if name:
            customers.add(name)
        city = field_value(r, "city")
        if city:
            cities.add(city)
    return {
        "customers": sorted(customers),
        "cities": sorted(cities),
        "payment_types": sorted({t for t in payment_types if t}),
    }
