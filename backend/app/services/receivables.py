from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.models.receivable import Payment, Receivable
from backend.app.schemas.receivable import ReceivableCreate, ReceivableUpdate
from backend.app.services.balances import (
    PaymentStatus,
    ReceivableBalance,
    receivable_balances,
)

logger = logging.getLogger(__name__)

# Offered by the receivable form; any city is accepted
CITY_SUGGESTIONS: tuple[str, ...] = (
    "Yangon",
    "Mandalay",
    "Naypyidaw",
    "Bago",
    "Mawlamyine",
    "Pathein",
    "Meiktila",
    "Myitkyina",
    "Lashio",
    "Taunggyi",
)


def list_receivables(
    db: Session,
    customer: str | None = None,
    search: str | None = None,
    city: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    status: PaymentStatus | None = None,
) -> list[Receivable]:
    """Receivables newest first.

    ``customer`` matches the exact name; ``search`` is a case-insensitive
    substring of the name. ``status`` is computed from the payments.
    """
    query = db.query(Receivable)
    if customer:
        query = query.filter(Receivable.customer_name == customer)
    if search:
        query = query.filter(
            Receivable.customer_name.icontains(search, autoescape=True)
        )
    if city:
        query = query.filter(Receivable.city == city)
    if date_from:
        query = query.filter(Receivable.date >= date_from)
    if date_to:
        query = query.filter(Receivable.date <= date_to)
    receivables = query.order_by(Receivable.date.desc(), Receivable.created_at.desc()).all()

    if status is None:
        return receivables
    balances = receivable_balances(receivables, _payments_for(db, receivables))
    return [b.receivable for b in balances if b.status == status]


def _payments_for(db: Session, receivables: list[Receivable]) -> list[Payment]:
    ids = [r.id for r in receivables]
    if not ids:
        return []
    return db.query(Payment).filter(Payment.receivable_id.in_(ids)).all()


def get_receivable(db: Session, receivable_id: UUID) -> Receivable:
    receivable = db.query(Receivable).filter(Receivable.id == receivable_id).first()
    if not receivable:
        raise LookupError("Receivable not found")
    return receivable


def get_receivable_balance(db: Session, receivable_id: UUID) -> ReceivableBalance:
    receivable = get_receivable(db, receivable_id)
    return receivable_balances([receivable], receivable.payments)[0]


def create_receivable(db: Session, payload: ReceivableCreate) -> Receivable:
    receivable = Receivable(**payload.model_dump())
    db.add(receivable)
    db.commit()
    db.refresh(receivable)
    logger.info(
        "Created receivable %s for %r (%s)",
        receivable.id,
        receivable.customer_name,
        receivable.amount,
    )
    return receivable


def update_receivable(
    db: Session, receivable_id: UUID, payload: ReceivableUpdate
) -> Receivable:
    receivable = get_receivable(db, receivable_id)
    for field, value in payload.model_dump().items():
        setattr(receivable, field, value)
    db.commit()
    db.refresh(receivable)
    logger.info("Updated receivable %s", receivable.id)
    return receivable


def delete_receivable(db: Session, receivable_id: UUID) -> None:
    """Delete a receivable together with its payments."""
    receivable = get_receivable(db, receivable_id)
    payment_count = len(receivable.payments)
    db.delete(receivable)
    db.commit()
    logger.info(
        "Deleted receivable %s and %d payment(s)", receivable_id, payment_count
    )
