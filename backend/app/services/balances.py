"""Receivable/payment balance aggregation.

Pure functions over already-fetched collections. Records can be ORM rows or
plain mappings (JSON objects from the API); fields are read by name from
either. Nothing here raises on malformed amounts: they count as zero.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class PaymentStatus(str, enum.Enum):
    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"


@dataclass(frozen=True)
class ReceivableBalance:
    receivable: Any
    paid_amount: Decimal
    remaining: Decimal
    status: PaymentStatus


@dataclass(frozen=True)
class CustomerSummary:
    """Everything owed and paid under one ``customer_name``.

    ``outstanding_balance`` is not clamped: overpayment makes it negative.
    """

    name: str
    receivables: list[Any] = field(default_factory=list)
    payments: list[Any] = field(default_factory=list)
    total_receivables: Decimal = ZERO
    total_paid: Decimal = ZERO
    outstanding_balance: Decimal = ZERO
    cities: list[str] = field(default_factory=list)

    @property
    def collection_rate(self) -> Decimal:
        return collection_rate(self.total_paid, self.total_receivables)


@dataclass(frozen=True)
class CitySummary:
    city: str
    receivables: list[Any] = field(default_factory=list)
    payments: list[Any] = field(default_factory=list)
    total_receivables: Decimal = ZERO
    total_paid: Decimal = ZERO
    outstanding_balance: Decimal = ZERO
    customers: list[str] = field(default_factory=list)

    @property
    def collection_rate(self) -> Decimal:
        return collection_rate(self.total_paid, self.total_receivables)


# ── Field access ─────────────────────────────────────────────────────────────


def field_value(record: Any, name: str) -> Any:
    """Read *name* from a mapping or an attribute-bearing object."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def record_key(value: Any) -> str | None:
    """Identifiers compare by string form, so UUIDs match their JSON strings."""
    if value is None:
        return None
    return str(value)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def coerce_amount(value: Any) -> Decimal:
    """Return *value* as a Decimal, treating anything absent or malformed as zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            logger.debug("Treating malformed amount %r as zero", value)
            return ZERO
    else:
        logger.debug("Treating non-numeric amount %r as zero", value)
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


# ── Per-receivable ───────────────────────────────────────────────────────────


def paid_amount_for_receivable(receivable_id: Any, payments: Iterable[Any]) -> Decimal:
    key = record_key(receivable_id)
    total = ZERO
    for payment in payments:
        if record_key(field_value(payment, "receivable_id")) == key:
            total += coerce_amount(field_value(payment, "payment_amount"))
    return total


def remaining_for_receivable(receivable: Any, paid_amount: Any) -> Decimal:
    """Raw ``amount - paid``; negative under overpayment."""
    return coerce_amount(field_value(receivable, "amount")) - coerce_amount(paid_amount)


def status_for_receivable(receivable: Any, paid_amount: Any) -> PaymentStatus:
    """Classify a receivable as Paid, Partial or Unpaid.

    Paid covers exact payment and overpayment alike. A receivable whose
    amount is missing or not positive is reported Unpaid.
    """
    amount = coerce_amount(field_value(receivable, "amount"))
    paid = coerce_amount(paid_amount)
    if amount <= ZERO:
        return PaymentStatus.UNPAID
    remaining = amount - paid
    if remaining <= ZERO:
        return PaymentStatus.PAID
    if paid > ZERO:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def _paid_by_receivable(payments: Iterable[Any]) -> dict[str | None, Decimal]:
    totals: dict[str | None, Decimal] = {}
    for payment in payments:
        key = record_key(field_value(payment, "receivable_id"))
        totals[key] = totals.get(key, ZERO) + coerce_amount(
            field_value(payment, "payment_amount")
        )
    return totals


def receivable_balances(
    receivables: Iterable[Any], payments: Iterable[Any]
) -> list[ReceivableBalance]:
    """Paid, remaining and status for every receivable, in input order."""
    paid_totals = _paid_by_receivable(payments)
    balances: list[ReceivableBalance] = []
    for receivable in receivables:
        paid = paid_totals.get(record_key(field_value(receivable, "id")), ZERO)
        balances.append(
            ReceivableBalance(
                receivable=receivable,
                paid_amount=paid,
                remaining=remaining_for_receivable(receivable, paid),
                status=status_for_receivable(receivable, paid),
            )
        )
    return balances


# ── Grouped summaries ────────────────────────────────────────────────────────


@dataclass
class _Group:
    key: str
    receivables: list[Any] = field(default_factory=list)
    payments: list[Any] = field(default_factory=list)
    total_receivables: Decimal = ZERO
    total_paid: Decimal = ZERO
    labels: set[str] = field(default_factory=set)


def _group_by(
    receivables: Iterable[Any],
    payments: Iterable[Any],
    key_field: str,
    label_field: str,
    skip_empty_key: bool,
) -> list[_Group]:
    """Single pass grouping; groups keep first-seen order of the receivables."""
    groups: dict[str, _Group] = {}
    owner: dict[str | None, _Group] = {}

    for receivable in receivables:
        key = _text(field_value(receivable, key_field))
        if skip_empty_key and not key:
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = _Group(key=key)
        group.receivables.append(receivable)
        group.total_receivables += coerce_amount(field_value(receivable, "amount"))
        label = _text(field_value(receivable, label_field))
        if label:
            group.labels.add(label)
        owner.setdefault(record_key(field_value(receivable, "id")), group)

    for payment in payments:
        group = owner.get(record_key(field_value(payment, "receivable_id")))
        if group is None:
            continue
        group.payments.append(payment)
        group.total_paid += coerce_amount(field_value(payment, "payment_amount"))

    return list(groups.values())


def _customer_summary(group: _Group) -> CustomerSummary:
    return CustomerSummary(
        name=group.key,
        receivables=group.receivables,
        payments=group.payments,
        total_receivables=group.total_receivables,
        total_paid=group.total_paid,
        outstanding_balance=group.total_receivables - group.total_paid,
        cities=sorted(group.labels),
    )


def _city_summary(group: _Group) -> CitySummary:
    return CitySummary(
        city=group.key,
        receivables=group.receivables,
        payments=group.payments,
        total_receivables=group.total_receivables,
        total_paid=group.total_paid,
        outstanding_balance=group.total_receivables - group.total_paid,
        customers=sorted(group.labels),
    )


def summarize_customer(
    customer_name: str, receivables: Iterable[Any], payments: Iterable[Any]
) -> CustomerSummary:
    """Summary for one customer, matched on the exact name string."""
    name = _text(customer_name)
    matching = [r for r in receivables if _text(field_value(r, "customer_name")) == name]
    groups = _group_by(matching, payments, "customer_name", "city", skip_empty_key=False)
    if not groups:
        return CustomerSummary(name=name)
    return _customer_summary(groups[0])


def summarize_all_customers(
    receivables: Iterable[Any], payments: Iterable[Any]
) -> list[CustomerSummary]:
    """One summary per distinct ``customer_name``, in first-seen order.

    Grouping is case and whitespace sensitive: "Acme" and "acme " are two
    customers.
    """
    groups = _group_by(receivables, payments, "customer_name", "city", skip_empty_key=False)
    return [_customer_summary(group) for group in groups]


def summarize_city(
    city: str, receivables: Iterable[Any], payments: Iterable[Any]
) -> CitySummary:
    name = _text(city)
    if not name:
        return CitySummary(city=name)
    matching = [r for r in receivables if _text(field_value(r, "city")) == name]
    groups = _group_by(matching, payments, "city", "customer_name", skip_empty_key=True)
    if not groups:
        return CitySummary(city=name)
    return _city_summary(groups[0])


def summarize_all_cities(
    receivables: Iterable[Any], payments: Iterable[Any]
) -> list[CitySummary]:
    """One summary per city; receivables without a city are left out."""
    groups = _group_by(receivables, payments, "city", "customer_name", skip_empty_key=True)
    return [_city_summary(group) for group in groups]


def collection_rate(total_paid: Any, total_receivables: Any) -> Decimal:
    """Percentage collected. Zero when nothing is receivable; may exceed 100."""
    receivable = coerce_amount(total_receivables)
    if receivable <= ZERO:
        return ZERO
    return coerce_amount(total_paid) / receivable * HUNDRED
