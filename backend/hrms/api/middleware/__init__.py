"""
API Middleware Module

Modules:
    - correlation: Request correlation ID middleware
    - rate_limit: Fixed-window per-client rate limiting
    - error_handlers: Exception handlers producing the error envelope
"""

from .correlation import CorrelationIdMiddleware
from .rate_limit import RateLimitMiddleware, FixedWindowRateLimiter
from .error_handlers import register_error_handlers

__all__ = [
    "CorrelationIdMiddleware",
    "RateLimitMiddleware",
    "FixedWindowRateLimiter",
    "register_error_handlers",
]
