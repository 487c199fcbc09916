"""HTTP client for the receivables REST API.

Customer summaries are aggregated locally from the fetched receivables and
payments, so the client works against any server exposing the CRUD routes.
"""

from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

import httpx

from backend.app.services.balances import (
    CustomerSummary,
    summarize_all_customers,
    summarize_customer,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
DEFAULT_TIMEOUT = 30.0


class BookkeepingApiError(Exception):
    """Error envelope or 4xx/5xx status returned by the API."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


class BookkeepingClient:
    """Synchronous client; pass ``client`` to reuse an existing ``httpx.Client``."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> BookkeepingClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ─── Transport ────────────────────────────────────────────────────────

    @staticmethod
    def _handle_response(resp: httpx.Response) -> Any:
        """Return the ``data`` (or ``message``) member of a success body.

        Any 4xx/5xx status, or a body carrying ``error``, raises
        :class:`BookkeepingApiError`.
        """
        try:
            body = resp.json()
        except ValueError:
            if resp.status_code >= 400:
                raise BookkeepingApiError(
                    resp.status_code, resp.text or f"HTTP {resp.status_code}"
                )
            raise BookkeepingApiError(
                resp.status_code,
                f"Non-JSON response: {resp.text[:200] if resp.text else '(empty)'}",
            )

        if isinstance(body, dict) and body.get("error"):
            raise BookkeepingApiError(resp.status_code, str(body["error"]))
        if resp.status_code >= 400:
            detail = body.get("detail") if isinstance(body, dict) else None
            raise BookkeepingApiError(
                resp.status_code, str(detail or f"HTTP {resp.status_code}")
            )
        if isinstance(body, dict):
            if "data" in body:
                return body["data"]
            if "message" in body:
                return body["message"]
        return body

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        if params:
            params = {k: str(v) for k, v in params.items() if v is not None}
        logger.debug("%s %s%s", method, API_PREFIX, path)
        resp = self._client.request(
            method,
            f"{API_PREFIX}{path}",
            params=params or None,
            json=_jsonable(json) if json is not None else None,
        )
        return self._handle_response(resp)

    # ─── Receivables ──────────────────────────────────────────────────────

    def list_receivables(self, customer: str | None = None) -> list[dict[str, Any]]:
        return self._request("GET", "/receivables/", params={"customer": customer})

    def get_receivable(self, receivable_id: UUID | str) -> dict[str, Any]:
        return self._request("GET", f"/receivables/{receivable_id}")

    def create_receivable(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/receivables/", json=payload)

    def update_receivable(
        self, receivable_id: UUID | str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        return self._request("PUT", f"/receivables/{receivable_id}", json=payload)

    def delete_receivable(self, receivable_id: UUID | str) -> str:
        return self._request("DELETE", f"/receivables/{receivable_id}")

    # ─── Payments ─────────────────────────────────────────────────────────

    def list_payments(self) -> list[dict[str, Any]]:
        return self._request("GET", "/payments/")

    def payments_for_receivable(self, receivable_id: UUID | str) -> list[dict[str, Any]]:
        return self._request("GET", "/payments/", params={"receivable_id": receivable_id})

    def get_payment(self, payment_id: UUID | str) -> dict[str, Any]:
        return self._request("GET", f"/payments/{payment_id}")

    def create_payment(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/payments/", json=payload)

    def update_payment(
        self, payment_id: UUID | str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        return self._request("PUT", f"/payments/{payment_id}", json=payload)

    def delete_payment(self, payment_id: UUID | str) -> str:
        return self._request("DELETE", f"/payments/{payment_id}")

    # ─── Summaries ────────────────────────────────────────────────────────

    def customer_summary(self, customer_name: str) -> CustomerSummary:
        receivables = self.list_receivables(customer=customer_name)
        return summarize_customer(customer_name, receivables, self.list_payments())

    def all_customer_summaries(self) -> list[CustomerSummary]:
        return summarize_all_customers(self.list_receivables(), self.list_payments())
