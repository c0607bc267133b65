"""Human-readable date labels for cards and timelines."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from .timestamps import coerce_timestamp_ms, ms_to_datetime, now_ms

MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def _as_datetime(value: Any) -> Optional[datetime]:
    millis = coerce_timestamp_ms(value)
    if not millis:
        return None
    return ms_to_datetime(millis)


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_date_ddmmyyyy(value: Any) -> str:
    """``"01/03/2024"``; unparseable strings are returned unchanged."""

    if not value:
        return ""
    dt = _as_datetime(value)
    if dt is None:
        return value if isinstance(value, str) else ""
    return dt.strftime("%d/%m/%Y")


def format_date_long_ordinal(value: Any) -> str:
    """``"1st March 2024"``."""

    if not value:
        return ""
    dt = _as_datetime(value)
    if dt is None:
        return value if isinstance(value, str) else ""
    return f"{_ordinal(dt.day)} {MONTH_NAMES[dt.month - 1]} {dt.year}"


def format_updated_at(value: Any, now: Optional[datetime] = None) -> str:
    millis = coerce_timestamp_ms(value)
    if not millis:
        return ""
    diff = now_ms(now) - millis
    if diff < MS_PER_HOUR:
        minutes = diff // 60_000
        return "Updated just now" if minutes <= 1 else f"Updated {minutes}m ago"
    if diff < MS_PER_DAY:
        return f"Updated {diff // MS_PER_HOUR}h ago"
    if diff < 7 * MS_PER_DAY:
        return f"Updated {diff // MS_PER_DAY}d ago"
    dt = ms_to_datetime(millis)
    return f"Updated {dt.strftime('%b')} {dt.day}"


def time_ago(value: Any, now: Optional[datetime] = None) -> str:
    millis = coerce_timestamp_ms(value)
    if not millis:
        return "Unknown"
    diff = (now_ms(now) - millis) // 1000
    if diff < 60:
        return "Updated just now"
    if diff < 3600:
        return f"Updated {diff // 60} min ago"
    if diff < 86400:
        return f"Updated {diff // 3600} hours ago"
    if diff < 172800:
        return "Updated yesterday"
    return f"Updated {diff // 86400} days ago"


__all__ = [
    "format_date_ddmmyyyy",
    "format_date_long_ordinal",
    "format_updated_at",
    "time_ago",
]
