from __future__ import annotations

import datetime as dt
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic_core import PydanticCustomError

T = TypeVar("T")

MAX_AMOUNT = Decimal("999999999.99")
MIN_DATE = dt.date(1900, 1, 1)
CENTS = Decimal("0.01")


class DataResponse(BaseModel, Generic[T]):
    """Success envelope: ``{"data": ...}``."""

    data: T


class MessageResponse(BaseModel):
    message: str


def missing_field() -> PydanticCustomError:
    # Same error type pydantic uses for absent fields, so blanks are reported alike
    return PydanticCustomError("missing", "Field required")


def clean_text(value: Any, max_length: int, required: bool = True) -> str | None:
    """Trim a text field; blank counts as missing when *required*."""
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise missing_field()
        return None
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", "Input should be a valid string")
    text = value.strip()
    if len(text) > max_length:
        raise PydanticCustomError(
            "text_too_long",
            "Text exceeds maximum length of {max_length} characters",
            {"max_length": max_length},
        )
    return text


def positive_amount(value: Any, message: str) -> Decimal:
    """Accept only JSON numbers above zero, rounded to cents."""
    if value is None:
        raise missing_field()
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise PydanticCustomError("positive_number", message)
    amount = Decimal(str(value))
    if not amount.is_finite() or amount <= 0:
        raise PydanticCustomError("positive_number", message)
    if amount > MAX_AMOUNT:
        raise PydanticCustomError(
            "amount_too_large", "Amount exceeds maximum allowed value"
        )
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def required_value(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise missing_field()
    return value.strip() if isinstance(value, str) else value


def check_date_range(value: dt.date) -> dt.date:
    if value > dt.date.today():
        raise PydanticCustomError("date_in_future", "Date cannot be in the future")
    if value < MIN_DATE:
        raise PydanticCustomError("date_too_old", "Date is too far in the past")
    return value
