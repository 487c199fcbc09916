"""In-memory sliding-window rate limiter for write endpoints.

State lives in the process; each replica counts its own requests.
"""

from __future__ import annotations

import time

from fastapi import HTTPException, status

from backend.app.core.config import settings


class InMemoryRateLimiter:
    """Sliding-window in-memory rate limiter keyed by an arbitrary string."""

    def __init__(self, window_seconds: int = 60, max_attempts: int = 100) -> None:
        self._window = window_seconds
        self._max = max_attempts
        self._attempts: dict[str, list[float]] = {}

    def _prune(self, now: float) -> None:
        """Drop expired timestamps, and keys left with none."""
        for key in list(self._attempts):
            kept = [t for t in self._attempts[key] if now - t < self._window]
            if kept:
                self._attempts[key] = kept
            else:
                del self._attempts[key]

    def check(self, key: str) -> None:
        """Raise HTTP 429 if *key* has exceeded *max_attempts* in the window."""
        now = time.monotonic()
        self._prune(now)
        attempts = self._attempts.get(key, [])
        if len(attempts) >= self._max:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later.",
            )
        attempts.append(now)
        self._attempts[key] = attempts

    def reset(self) -> None:
        self._attempts.clear()


write_limiter = InMemoryRateLimiter(
    window_seconds=settings.WRITE_RATE_WINDOW_SECONDS,
    max_attempts=settings.WRITE_RATE_LIMIT,
)
