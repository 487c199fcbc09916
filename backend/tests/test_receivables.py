"""Tests for receivable CRUD endpoints and request validation."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from backend.app.models.receivable import Payment, Receivable

URL = "/api/v1/receivables/"


# ─── Create ──────────────────────────────────────────────────────────────────


class TestCreateReceivable:
    def test_create_returns_data_envelope(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        resp = client.post(URL, json=receivable_payload)
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["customer_name"] == "U Aung Ko"
        assert Decimal(data["amount"]) == Decimal("100000")
        assert data["date"] == "2024-01-15"
        assert data["city"] == "Yangon"
        assert data["id"]

    def test_text_is_trimmed_and_amount_rounded(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        payload = {**receivable_payload, "customer_name": "  Daw Mya  ", "amount": 10.005}
        data = client.post(URL, json=payload).json()["data"]
        assert data["customer_name"] == "Daw Mya"
        assert Decimal(data["amount"]) == Decimal("10.01")

    def test_missing_fields_are_listed(self, client: TestClient) -> None:
        resp = client.post(URL, json={"date": "2024-01-15", "amount": 5})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing required fields: customer_name, city"

    def test_blank_strings_count_as_missing(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        resp = client.post(URL, json={**receivable_payload, "customer_name": "   "})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing required fields: customer_name"

    @pytest.mark.parametrize("amount", [0, -10, "100", "abc", True])
    def test_amount_must_be_positive_number(
        self, client: TestClient, receivable_payload: dict[str, Any], amount: object
    ) -> None:
        resp = client.post(URL, json={**receivable_payload, "amount": amount})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Amount must be a positive number"

    def test_amount_upper_bound(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        resp = client.post(URL, json={**receivable_payload, "amount": 1_000_000_000})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Amount exceeds maximum allowed value"

    def test_future_date_rejected(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        tomorrow = (dt.date.today() + dt.timedelta(days=1)).isoformat()
        resp = client.post(URL, json={**receivable_payload, "date": tomorrow})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Date cannot be in the future"

    def test_ancient_date_rejected(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        resp = client.post(URL, json={**receivable_payload, "date": "1899-12-31"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Date is too far in the past"

    def test_name_too_long(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        resp = client.post(URL, json={**receivable_payload, "customer_name": "x" * 101})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Text exceeds maximum length of 100 characters"
        assert resp.json()["details"][0]["field"] == "customer_name"


# ─── Read / list ─────────────────────────────────────────────────────────────


class TestListReceivables:
    def test_newest_first(self, client: TestClient, make_receivable: Callable[..., Receivable]) -> None:
        make_receivable(customer_name="Old", date=dt.date(2023, 5, 1))
        make_receivable(customer_name="New", date=dt.date(2024, 5, 1))

        names = [r["customer_name"] for r in client.get(URL).json()["data"]]
        assert names == ["New", "Old"]

    def test_customer_filter_is_exact(
        self, client: TestClient, make_receivable: Callable[..., Receivable]
    ) -> None:
        make_receivable(customer_name="Aung")
        make_receivable(customer_name="Aung Ko")

        data = client.get(URL, params={"customer": "Aung"}).json()["data"]
        assert [r["customer_name"] for r in data] == ["Aung"]

    def test_search_is_case_insensitive_substring(
        self, client: TestClient, make_receivable: Callable[..., Receivable]
    ) -> None:
        make_receivable(customer_name="Aung", date=dt.date(2024, 1, 2))
        make_receivable(customer_name="Daw Aung Mya", date=dt.date(2024, 1, 1))
        make_receivable(customer_name="Zaw")

        data = client.get(URL, params={"search": "aung"}).json()["data"]
        assert [r["customer_name"] for r in data] == ["Aung", "Daw Aung Mya"]

    def test_search_matches_wildcards_literally(
        self, client: TestClient, make_receivable: Callable[..., Receivable]
    ) -> None:
        make_receivable(customer_name="100% Rice")
        make_receivable(customer_name="1000 Rice")
        make_receivable(customer_name="A_B Co")
        make_receivable(customer_name="AXB Co")

        percent = client.get(URL, params={"search": "100%"}).json()["data"]
        assert [r["customer_name"] for r in percent] == ["100% Rice"]

        underscore = client.get(URL, params={"search": "a_b"}).json()["data"]
        assert [r["customer_name"] for r in underscore] == ["A_B Co"]

    def test_city_and_date_filters(
        self, client: TestClient, make_receivable: Callable[..., Receivable]
    ) -> None:
        make_receivable(city="Yangon", date=dt.date(2024, 1, 10))
        make_receivable(city="Yangon", date=dt.date(2024, 3, 10))
        make_receivable(city="Mandalay", date=dt.date(2024, 1, 10))

        data = client.get(
            URL, params={"city": "Yangon", "date_from": "2024-01-01", "date_to": "2024-01-31"}
        ).json()["data"]
        assert len(data) == 1
        assert data[0]["date"] == "2024-01-10"

    def test_status_filter(
        self,
        client: TestClient,
        make_receivable: Callable[..., Receivable],
        make_payment: Callable[..., Payment],
    ) -> None:
        paid = make_receivable(customer_name="Paid", amount="100")
        partial = make_receivable(customer_name="Partial", amount="100")
        make_receivable(customer_name="Unpaid", amount="100")
        make_payment(paid, payment_amount="100")
        make_payment(partial, payment_amount="40")

        for status in ("Paid", "Partial", "Unpaid"):
            data = client.get(URL, params={"status": status}).json()["data"]
            assert [r["customer_name"] for r in data] == [status]

    def test_invalid_status_is_400(self, client: TestClient) -> None:
        resp = client.get(URL, params={"status": "Overdue"})
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_get_unknown_is_404(self, client: TestClient) -> None:
        resp = client.get(f"{URL}00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Receivable not found"}

    def test_balance(
        self,
        client: TestClient,
        make_receivable: Callable[..., Receivable],
        make_payment: Callable[..., Payment],
    ) -> None:
        receivable = make_receivable(amount="100000")
        make_payment(receivable, payment_amount="30000", payment_date=dt.date(2024, 2, 1))
        make_payment(receivable, payment_amount="10000", payment_date=dt.date(2024, 3, 1))

        data = client.get(f"{URL}{receivable.id}/balance").json()["data"]
        assert Decimal(data["paid_amount"]) == Decimal("40000")
        assert Decimal(data["remaining"]) == Decimal("60000")
        assert data["status"] == "Partial"
        assert [p["payment_date"] for p in data["payments"]] == ["2024-03-01", "2024-02-01"]


# ─── Update / delete ─────────────────────────────────────────────────────────


class TestUpdateDeleteReceivable:
    def test_put_replaces_record(
        self,
        client: TestClient,
        make_receivable: Callable[..., Receivable],
        receivable_payload: dict[str, Any],
    ) -> None:
        receivable = make_receivable(description="old")
        payload = {**receivable_payload, "amount": 250.5, "city": "Mandalay", "description": None}

        resp = client.put(f"{URL}{receivable.id}", json=payload)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert Decimal(data["amount"]) == Decimal("250.50")
        assert data["city"] == "Mandalay"
        assert data["description"] is None

    def test_put_validates_like_create(
        self,
        client: TestClient,
        make_receivable: Callable[..., Receivable],
        receivable_payload: dict[str, Any],
    ) -> None:
        receivable = make_receivable()
        resp = client.put(f"{URL}{receivable.id}", json={**receivable_payload, "amount": -1})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Amount must be a positive number"

    def test_put_unknown_is_404(
        self, client: TestClient, receivable_payload: dict[str, Any]
    ) -> None:
        resp = client.put(f"{URL}00000000-0000-0000-0000-000000000000", json=receivable_payload)
        assert resp.status_code == 404

    def test_delete_cascades_payments(
        self,
        client: TestClient,
        make_receivable: Callable[..., Receivable],
        make_payment: Callable[..., Payment],
    ) -> None:
        receivable = make_receivable()
        make_payment(receivable)

        resp = client.delete(f"{URL}{receivable.id}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Receivable deleted successfully"}
        assert client.get(f"{URL}{receivable.id}").status_code == 404
        assert client.get("/api/v1/payments/").json()["data"] == []

    def test_delete_unknown_is_404(self, client: TestClient) -> None:
        resp = client.delete(f"{URL}00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
