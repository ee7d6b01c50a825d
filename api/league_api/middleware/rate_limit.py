"""Per-client sliding-window rate limiting."""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Callable, Deque

from fastapi import Request
from starlette.responses import JSONResponse

from ..config import settings

EXEMPT_PATHS = frozenset({"/healthz"})


class RateLimitMiddleware:
    """Sliding window limiter keyed on the acting user, falling back to client IP."""

    def __init__(self, app: Callable) -> None:
        self.app = app
        self._requests: dict[str, Deque[float]] = defaultdict(deque)

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or scope.get("path") in EXEMPT_PATHS:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        client_key = request.headers.get("x-user-id") or (
            request.client.host if request.client else "unknown"
        )
        now = time.monotonic()
        window = settings.rate_limit_window_seconds

        request_times = self._requests[client_key]
        while request_times and request_times[0] <= now - window:
            request_times.popleft()

        if len(request_times) >= settings.rate_limit_requests:
            retry_after = max(1, int(window - (now - request_times[0])))
            response = JSONResponse(
                {"success": False, "error": "Rate limit exceeded"},
                status_code=429,
                headers={"Retry-After": str(retry_after)},
            )
            await response(scope, receive, send)
            return

        request_times.append(now)
        await self.app(scope, receive, send)
