from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.models.receivable import Payment, Receivable
from backend.app.schemas.receivable import PaymentCreate, PaymentUpdate
from backend.app.services.receivables import get_receivable

logger = logging.getLogger(__name__)

# Offered by the payment form; custom labels are accepted too
PAYMENT_TYPE_SUGGESTIONS: tuple[str, ...] = (
    "Cash",
    "KPay",
    "Banking",
    "Wave Money",
    "CB Pay",
    "Other",
)


def list_payments(
    db: Session,
    receivable_id: UUID | None = None,
    customer: str | None = None,
    payment_type: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[Payment]:
    """Payments newest first.

    ``customer`` is a case-insensitive substring of the owning receivable's
    customer name.
    """
    query = db.query(Payment)
    if receivable_id:
        query = query.filter(Payment.receivable_id == receivable_id)
    if customer:
        query = query.join(Receivable, Payment.receivable_id == Receivable.id).filter(
            Receivable.customer_name.icontains(customer, autoescape=True)
        )
    if payment_type:
        query = query.filter(Payment.payment_type == payment_type)
    if date_from:
        query = query.filter(Payment.payment_date >= date_from)
    if date_to:
        query = query.filter(Payment.payment_date <= date_to)
    return query.order_by(Payment.payment_date.desc(), Payment.created_at.desc()).all()


def get_payment(db: Session, payment_id: UUID) -> Payment:
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise LookupError("Payment not found")
    return payment


def create_payment(db: Session, payload: PaymentCreate) -> Payment:
    # Overpayment is allowed; only the receivable's existence is checked
    get_receivable(db, payload.receivable_id)
    payment = Payment(**payload.model_dump())
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(
        "Recorded payment %s of %s against receivable %s",
        payment.id,
        payment.payment_amount,
        payment.receivable_id,
    )
    return payment


def update_payment(db: Session, payment_id: UUID, payload: PaymentUpdate) -> Payment:
    payment = get_payment(db, payment_id)
    get_receivable(db, payload.receivable_id)
    for field, value in payload.model_dump().items():
        setattr(payment, field, value)
    db.commit()
    db.refresh(payment)
    logger.info("Updated payment %s", payment.id)
    return payment


def delete_payment(db: Session, payment_id: UUID) -> None:
    payment = get_payment(db, payment_id)
    db.delete(payment)
    db.commit()
    logger.info("Deleted payment %s", payment_id)


def payment_types(db: Session) -> list[str]:
    """Suggested payment types merged with every type already recorded."""
    used = {row[0] for row in db.query(Payment.payment_type).distinct().all()}
    return sorted(set(PAYMENT_TYPE_SUGGESTIONS) | {t for t in used if t})
