"""Per-client sliding-window rate limiting for the calculation endpoint."""

from __future__ import annotations

import time
from collections import deque

from fastapi import HTTPException, Request, status

from app.config import settings


class RateLimiter:
    """Sliding-window limiter keyed by client address.

    ``X-Forwarded-For`` is only honoured when *trust_forwarded_for* is set,
    i.e. when the service sits behind a proxy that overwrites the header.
    Clients whose window has emptied are dropped from the table.
    """

    def __init__(
        self,
        max_requests: int = 5,
        window_seconds: int = 60,
        trust_forwarded_for: bool = False,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.trust_forwarded_for = trust_forwarded_for
        self._requests: dict[str, deque[float]] = {}
        self._last_sweep = 0.0

    def client_key(self, request: Request) -> str:
        if self.trust_forwarded_for:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _expire(self, key: str, cutoff: float) -> None:
        stamps = self._requests.get(key)
        if stamps is None:
            return
        while stamps and stamps[0] <= cutoff:
            stamps.popleft()
        if not stamps:
            del self._requests[key]

    def _sweep(self, now: float) -> None:
        # At most once per window, drop every client that has gone quiet.
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        cutoff = now - self.window_seconds
        for key in list(self._requests):
            self._expire(key, cutoff)

    def check(self, request: Request) -> None:
        """Record a request, raising 429 once the client exceeds its budget."""
        now = time.monotonic()
        key = self.client_key(request)
        self._sweep(now)
        self._expire(key, now - self.window_seconds)

        stamps = self._requests.get(key, ())
        if len(stamps) >= self.max_requests:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Rate limit exceeded. Max {self.max_requests} requests per {self.window_seconds}s.",
                headers={"Retry-After": str(self.window_seconds)},
            )

        self._requests.setdefault(key, deque()).append(now)

    @property
    def tracked_clients(self) -> int:
        return len(self._requests)

    def reset(self) -> None:
        self._requests.clear()
        self._last_sweep = 0.0


calc_limiter = RateLimiter(
    max_requests=settings.calc_rate_limit,
    window_seconds=settings.calc_rate_window_seconds,
    trust_forwarded_for=settings.trust_forwarded_for,
)
