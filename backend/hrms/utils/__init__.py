"""Utility modules: logging, identifiers and time helpers"""
from .logger import get_logger, setup_logging, get_correlation_id, set_correlation_id
from .time import utc_now, ensure_utc, parse_iso, days_until

__all__ = [
    "get_logger",
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "utc_now",
    "ensure_utc",
    "parse_iso",
    "days_until",
]
