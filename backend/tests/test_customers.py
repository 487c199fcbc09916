"""Tests for the customer and city summary endpoints."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from backend.app.models.receivable import Payment, Receivable


@pytest.fixture()
def ledger(
    make_receivable: Callable[..., Receivable],
    make_payment: Callable[..., Payment],
) -> dict[str, Receivable]:
    aung_ygn = make_receivable("Aung", "100000", "Yangon", dt.date(2024, 3, 1))
    mya = make_receivable("Mya", "50000", "Yangon", dt.date(2024, 2, 1))
    aung_mdy = make_receivable("Aung", "20000", "Mandalay", dt.date(2024, 1, 1))
    make_payment(aung_ygn, "40000")
    make_payment(aung_ygn, "60000")
    make_payment(mya, "70000")
    return {"aung_ygn": aung_ygn, "mya": mya, "aung_mdy": aung_mdy}


class TestCustomerSummaries:
    def test_all_customers_in_first_seen_order(
        self, client: TestClient, ledger: dict[str, Receivable]
    ) -> None:
        data = client.get("/api/v1/customers/").json()["data"]
        assert [c["name"] for c in data] == ["Aung", "Mya"]

        aung = data[0]
        assert Decimal(aung["total_receivables"]) == Decimal("120000")
        assert Decimal(aung["total_paid"]) == Decimal("100000")
        assert Decimal(aung["outstanding_balance"]) == Decimal("20000")
        assert aung["cities"] == ["Mandalay", "Yangon"]
        assert len(aung["receivables"]) == 2
        assert len(aung["payments"]) == 2

    def test_overpaid_customer_goes_negative(
        self, client: TestClient, ledger: dict[str, Receivable]
    ) -> None:
        mya = client.get("/api/v1/customers/Mya").json()["data"]
        assert Decimal(mya["outstanding_balance"]) == Decimal("-20000")
        assert Decimal(mya["collection_rate"]) == Decimal("140")

    def test_unknown_customer_is_404(
        self, client: TestClient, ledger: dict[str, Receivable]
    ) -> None:
        resp = client.get("/api/v1/customers/mya")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Customer not found"}

    def test_name_with_slash(
        self,
        client: TestClient,
        make_receivable: Callable[..., Receivable],
        make_payment: Callable[..., Payment],
    ) -> None:
        trading = make_receivable("A/B Trading", "1000", "Yangon")
        make_payment(trading, "400")

        resp = client.get("/api/v1/customers/A%2FB%20Trading")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["name"] == "A/B Trading"
        assert data["cities"] == ["Yangon"]
        assert Decimal(data["total_receivables"]) == Decimal("1000")
        assert Decimal(data["outstanding_balance"]) == Decimal("600")

    def test_empty_database(self, client: TestClient) -> None:
        assert client.get("/api/v1/customers/").json() == {"data": []}


class TestCitySummaries:
    def test_all_cities(self, client: TestClient, ledger: dict[str, Receivable]) -> None:
        data = client.get("/api/v1/cities/").json()["data"]
        assert [c["city"] for c in data] == ["Yangon", "Mandalay"]

        yangon = data[0]
        assert yangon["customers"] == ["Aung", "Mya"]
        assert Decimal(yangon["total_receivables"]) == Decimal("150000")
        assert Decimal(yangon["total_paid"]) == Decimal("170000")
        assert Decimal(yangon["outstanding_balance"]) == Decimal("-20000")

    def test_single_city(self, client: TestClient, ledger: dict[str, Receivable]) -> None:
        data = client.get("/api/v1/cities/Mandalay").json()["data"]
        assert data["customers"] == ["Aung"]
        assert Decimal(data["total_paid"]) == Decimal("0")
        assert Decimal(data["collection_rate"]) == Decimal("0")

    def test_city_with_slash(
        self, client: TestClient, make_receivable: Callable[..., Receivable]
    ) -> None:
        make_receivable("Aung", "500", "Yangon/North")
        make_receivable("Mya", "300", "Yangon")

        resp = client.get("/api/v1/cities/Yangon%2FNorth")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["city"] == "Yangon/North"
        assert data["customers"] == ["Aung"]
        assert Decimal(data["total_receivables"]) == Decimal("500")

    def test_unknown_city_is_404(self, client: TestClient, ledger: dict[str, Receivable]) -> None:
        resp = client.get("/api/v1/cities/Bago")
        assert resp.status_code == 404
        assert resp.json() == {"error": "City not found"}
