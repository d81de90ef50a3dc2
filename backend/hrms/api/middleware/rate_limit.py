"""
Rate Limit Middleware

Fixed-window request throttling per client address. Over-limit requests
get the standard 429 error envelope.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from ...config.settings import settings
from ...domain.errors import RateLimitError
from ...utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


EXEMPT_PATHS = {"/", "/health"}


class FixedWindowRateLimiter:
    """Counts requests per key in fixed windows of `window_seconds`"""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        # key -> (window start, count)
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> Tuple[bool, int, int]:
        """
        Record one request for `key`

        Returns:
            (allowed, remaining, seconds until the window resets)
        """
        now = self._clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)

        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0

        count += 1
        self._windows[key] = (start, count)

        reset_in = max(0, int(start + self.window_seconds - now))
        remaining = max(0, self.max_requests - count)
        return count <= self.max_requests, remaining, reset_in

    def _sweep(self, now: float) -> None:
        """Forget keys whose window has ended; runs at most once per window"""
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Applies a FixedWindowRateLimiter to every non-health request"""

    def __init__(self, app, limiter: Optional[FixedWindowRateLimiter] = None):
        super().__init__(app)
        self.limiter = limiter or FixedWindowRateLimiter(
            settings.rate_limit_max_requests,
            settings.rate_limit_window_seconds
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        allowed, remaining, reset_in = self.limiter.hit(client)
        headers = {
            "RateLimit-Limit": str(self.limiter.max_requests),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(reset_in),
        }

        if not allowed:
            error = RateLimitError(
                "Too many requests. Please try again later.",
                details={"retry_after_seconds": reset_in}
            )
            logger.warning(f"Rate limit exceeded for {client}", extra={"error_code": error.error_code})
            headers["Retry-After"] = str(reset_in)
            headers["X-Correlation-Id"] = get_correlation_id() or ""
            return JSONResponse(status_code=error.http_status, content=error.to_dict(), headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
