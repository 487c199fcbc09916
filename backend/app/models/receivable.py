from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base


class Receivable(Base):
    """Money owed by a customer.

    Customers are not a table of their own: they are derived by grouping
    receivables on the exact ``customer_name`` string.
    """

    __tablename__ = "receivables"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    city: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    payments: Mapped[list[Payment]] = relationship(
        back_populates="receivable", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_receivables_customer_name", "customer_name"),
        Index("ix_receivables_city", "city"),
        Index("ix_receivables_date", "date"),
    )


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    receivable_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("receivables.id", ondelete="CASCADE"), nullable=False
    )
    payment_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2), nullable=False
    )
    payment_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # Open set: the UI offers suggestions but any label is accepted
    payment_type: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    receivable: Mapped[Receivable] = relationship(back_populates="payments")

    __table_args__ = (
        Index("ix_payments_receivable", "receivable_id"),
        Index("ix_payments_payment_date", "payment_date"),
    )
