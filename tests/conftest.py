"""Shared fixed clock and timestamp builders."""

from datetime import datetime, timedelta, timezone

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def hours_ago(hours: float) -> str:
    return (NOW - timedelta(hours=hours)).isoformat()


def days_ago(days: float) -> str:
    return (NOW - timedelta(days=days)).isoformat()
