from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from backend.app.schemas.common import (
    check_date_range,
    clean_text,
    positive_amount,
    required_value,
)


# ─── Receivable CRUD ──────────────────────────────────────────────────────────


class ReceivableCreate(BaseModel):
    date: dt.date
    customer_name: str
    amount: Decimal
    city: str
    description: str | None = None

    @field_validator("customer_name", mode="before")
    @classmethod
    def clean_customer_name(cls, v: Any) -> str | None:
        return clean_text(v, 100)

    @field_validator("city", mode="before")
    @classmethod
    def clean_city(cls, v: Any) -> str | None:
        return clean_text(v, 50)

    @field_validator("description", mode="before")
    @classmethod
    def clean_description(cls, v: Any) -> str | None:
        return clean_text(v, 500, required=False)

    @field_validator("amount", mode="before")
    @classmethod
    def amount_positive(cls, v: Any) -> Decimal:
        return positive_amount(v, "Amount must be a positive number")

    @field_validator("date", mode="before")
    @classmethod
    def date_present(cls, v: Any) -> Any:
        return required_value(v)

    @field_validator("date")
    @classmethod
    def date_in_range(cls, v: dt.date) -> dt.date:
        return check_date_range(v)


class ReceivableUpdate(ReceivableCreate):
    """Full-record replacement; same rules as creation."""


class ReceivableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_name: str
    amount: Decimal
    date: dt.date
    city: str
    description: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


# ─── Payments ────────────────────────────────────────────────────────────────


class PaymentCreate(BaseModel):
    receivable_id: UUID
    payment_date: dt.date
    payment_amount: Decimal
    payment_type: str
    notes: str | None = None

    @field_validator("receivable_id", mode="before")
    @classmethod
    def receivable_id_present(cls, v: Any) -> Any:
        return required_value(v)

    @field_validator("payment_type", mode="before")
    @classmethod
    def clean_payment_type(cls, v: Any) -> str | None:
        return clean_text(v, 50)

    @field_validator("notes", mode="before")
    @classmethod
    def clean_notes(cls, v: Any) -> str | None:
        return clean_text(v, 500, required=False)

    @field_validator("payment_amount", mode="before")
    @classmethod
    def payment_amount_positive(cls, v: Any) -> Decimal:
        return positive_amount(v, "Payment amount must be a positive number")

    @field_validator("payment_date", mode="before")
    @classmethod
    def date_present(cls, v: Any) -> Any:
        return required_value(v)

    @field_validator("payment_date")
    @classmethod
    def date_in_range(cls, v: dt.date) -> dt.date:
        return check_date_range(v)


class PaymentUpdate(PaymentCreate):
    pass


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    receivable_id: UUID
    payment_amount: Decimal
    payment_date: dt.date
    payment_type: str
    notes: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
