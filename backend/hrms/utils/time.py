"""Time Utilities - UTC timestamps, ISO parsing and payroll formatting"""
from datetime import datetime, timezone
from typing import Optional, Union
from dateutil import parser as date_parser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC; None passes through"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_iso(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO 8601 date or datetime into an aware UTC datetime

    Accepts "2024-07-01", "2024-07-01T09:30:00Z" and offsets such as
    "+05:00". Datetimes are passed through ensure_utc.

    Raises:
        ValueError: if the string is not ISO 8601
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(date_parser.isoparse(value)).astimezone(timezone.utc)


def days_until(value: Union[str, datetime], now: Optional[datetime] = None) -> int:
    """Whole calendar days from `now` to `value`; negative once passed"""
    target = parse_iso(value).date()
    return (target - (now or utc_now()).date()).days


def month_name(dt: datetime) -> str:
    """Full English month name, e.g. 'January'"""
    return dt.strftime("%B")


def clock_time(dt: datetime) -> str:
    """12-hour clock time, e.g. '3:07:45 PM'"""
    return dt.strftime("%I:%M:%S %p").lstrip("0")
