"""Tests for app-level wiring: health, request ids and the error envelope."""
from __future__ import annotations

from fastapi.testclient import TestClient

from backend.app.main import validation_message


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_request_id_is_echoed(client: TestClient) -> None:
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"


def test_request_id_is_generated(client: TestClient) -> None:
    assert client.get("/health").headers["X-Request-ID"]


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_missing_body(client: TestClient) -> None:
    resp = client.post("/api/v1/receivables/")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Request body is required"


def test_validation_message_prefers_missing_fields() -> None:
    errors = [
        {"type": "positive_number", "loc": ("body", "amount"), "msg": "Amount must be a positive number"},
        {"type": "missing", "loc": ("body", "city"), "msg": "Field required"},
    ]
    assert validation_message(errors) == "Missing required fields: city"


def test_validation_message_falls_back_to_first_error() -> None:
    errors = [{"type": "date_from_datetime_parsing", "loc": ("query", "date_from"), "msg": "Input should be a valid date"}]
    assert validation_message(errors) == "Input should be a valid date"
    assert validation_message([]) == "Invalid request"
