"""Per-client fixed-window rate limiting for the API routes."""

from __future__ import annotations

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from garden.core.errors import RateLimitExceededError

logger = logging.getLogger(__name__)

LIMITED_PREFIXES = ("/analyze", "/monthly-summary", "/api/")


def _client_key(request: Request, trust_forwarded: bool) -> str:
    if trust_forwarded:
        # The rightmost hop is the one our own proxy appended.
        hops = [h.strip() for h in request.headers.get("X-Forwarded-For", "").split(",") if h.strip()]
        if hops:
            return hops[-1]
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Count requests per client address per minute; answer 429 past `rpm`."""

    def __init__(
        self,
        app,
        rpm: int = 30,
        trust_forwarded: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(app)
        self.rpm = max(int(rpm), 0)
        self.trust_forwarded = trust_forwarded
        self._clock = clock
        self._window = -1
        self._counts: dict[str, int] = {}

    async def dispatch(self, request: Request, call_next):
        if self.rpm == 0 or not request.url.path.startswith(LIMITED_PREFIXES):
            return await call_next(request)

        now = self._clock()
        window = int(now // 60)
        if window != self._window:
            # Previous minutes can never be hit again.
            self._window = window
            self._counts = {}

        key = _client_key(request, self.trust_forwarded)
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count
        if count > self.rpm:
            retry_after = max(int((window + 1) * 60 - now), 1)
            logger.warning("Rate limit hit for %s on %s", key, request.url.path)
            exc = RateLimitExceededError(limit=self.rpm, retry_after=retry_after)
            return JSONResponse(
                status_code=exc.http_status,
                content=exc.to_dict(),
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
