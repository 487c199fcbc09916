from __future__ import annotations

from fastapi import Request

from backend.app.middleware.rate_limit import write_limiter


def rate_limit_writes(request: Request) -> None:
    """Throttle create/update/delete calls per client address."""
    client = request.client.host if request.client else "unknown"
    write_limiter.check(client)
