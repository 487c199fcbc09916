"""Shared test fixtures.

Every test gets a fresh schema on an in-memory SQLite database; the app's
``get_db`` dependency is overridden to use the test session.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import datetime as dt  # noqa: E402
from collections.abc import Callable, Generator  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from backend.app.core.database import Base, SessionLocal, engine, get_db  # noqa: E402
from backend.app.main import app  # noqa: E402
from backend.app.middleware.rate_limit import write_limiter  # noqa: E402
from backend.app.models.receivable import Payment, Receivable  # noqa: E402


# ─── DB session on a fresh schema ─────────────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_write_limiter() -> Generator[None, None, None]:
    write_limiter.reset()
    yield
    write_limiter.reset()


# ─── Record factories ────────────────────────────────────────────────────────


@pytest.fixture()
def make_receivable(db: Session) -> Callable[..., Receivable]:
    """Insert a receivable directly, bypassing the API."""

    def _make(
        customer_name: str = "U Aung Ko",
        amount: str = "100000",
        city: str = "Yangon",
        date: dt.date | None = None,
        description: str | None = None,
    ) -> Receivable:
        receivable = Receivable(
            customer_name=customer_name,
            amount=Decimal(amount),
            city=city,
            date=date or dt.date(2024, 1, 15),
            description=description,
        )
        db.add(receivable)
        db.commit()
        db.refresh(receivable)
        return receivable

    return _make


@pytest.fixture()
def make_payment(db: Session) -> Callable[..., Payment]:
    def _make(
        receivable: Receivable,
        payment_amount: str = "50000",
        payment_type: str = "Cash",
        payment_date: dt.date | None = None,
        notes: str | None = None,
    ) -> Payment:
        payment = Payment(
            receivable_id=receivable.id,
            payment_amount=Decimal(payment_amount),
            payment_type=payment_type,
            payment_date=payment_date or dt.date(2024, 2, 1),
            notes=notes,
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    return _make


@pytest.fixture()
def receivable_payload() -> dict[str, Any]:
    return {
        "date": "2024-01-15",
        "customer_name": "U Aung Ko",
        "amount": 100000,
        "city": "Yangon",
        "description": "Rice delivery",
    }
