"""Seed an empty database with sample receivables and payments.

Usage:
    python -m backend.scripts.seed
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from backend.app.core.database import SessionLocal, init_db
from backend.app.models.receivable import Payment, Receivable

# (customer, city, amount, days ago, description)
RECEIVABLES: list[tuple[str, str, str, int, str | None]] = [
    ("U Aung Ko", "Yangon", "500000", 60, "Rice delivery"),
    ("U Aung Ko", "Mandalay", "250000", 20, "Cooking oil"),
    ("Daw Mya Mya", "Yangon", "180000", 45, None),
    ("Ko Zaw Min", "Mandalay", "320000", 30, "Construction materials"),
    ("Ma Hnin Wai", "Bago", "75000", 10, "Stationery"),
]

# (receivable index, amount, days ago, type)
PAYMENTS: list[tuple[int, str, int, str]] = [
    (0, "200000", 50, "KPay"),
    (0, "300000", 15, "Banking"),
    (1, "100000", 5, "Cash"),
    (3, "320000", 12, "Wave Money"),
]


def seed() -> None:
    init_db()
    db = SessionLocal()
    try:
        if db.query(Receivable).first():
            print("Database already has receivables; nothing to do.")
            return

        today = dt.date.today()
        created: list[Receivable] = []
        for customer, city, amount, days_ago, description in RECEIVABLES:
            receivable = Receivable(
                customer_name=customer,
                city=city,
                amount=Decimal(amount),
                date=today - dt.timedelta(days=days_ago),
                description=description,
            )
            db.add(receivable)
            created.append(receivable)
            print(f"Created receivable for {customer} ({city}): {amount}")
        db.flush()

        for index, amount, days_ago, payment_type in PAYMENTS:
            db.add(
                Payment(
                    receivable_id=created[index].id,
                    payment_amount=Decimal(amount),
                    payment_date=today - dt.timedelta(days=days_ago),
                    payment_type=payment_type,
                )
            )
            print(f"Recorded {payment_type} payment of {amount} for {created[index].customer_name}")

        db.commit()
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
