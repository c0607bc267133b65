"""Timestamp coercion for content records.

Timestamps reach us in several shapes depending on which client wrote the
record. :func:`classify_timestamp` maps a raw value onto the closed
:data:`RawTimestamp` union and :func:`coerce_timestamp_ms` turns any member
into epoch milliseconds. Zero means "absent or unparseable"; it sorts as the
oldest possible value.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Optional, Union

from dateutil import parser as dtparse

from .fields import resolve_first

LOGGER = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Default for free-form parsing; a result still in year 1 had no year of its own.
_NO_YEAR = datetime(1, 1, 1)

# Zero-argument conversion methods exposed by database timestamp wrappers.
CONVERSION_METHODS = ("to_datetime", "to_date", "toDate", "ToDatetime")


@dataclass(frozen=True)
class Epoch:
    """Numeric epoch, in milliseconds."""

    millis: float


@dataclass(frozen=True)
class Iso:
    """ISO-8601 or otherwise parseable date string."""

    text: str


@dataclass(frozen=True)
class SecondsWrapper:
    """Database timestamp exposing ``seconds`` (and maybe ``nanoseconds``)."""

    seconds: float
    nanoseconds: float = 0


@dataclass(frozen=True)
class Convertible:
    """Database timestamp exposing a conversion method."""

    convert: Callable[[], Any]


@dataclass(frozen=True)
class Instant:
    """A native ``datetime`` or ``date``."""

    value: date


RawTimestamp = Union[Epoch, Iso, SecondsWrapper, Convertible, Instant]


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def classify_timestamp(value: Any) -> Optional[RawTimestamp]:
    """Map ``value`` onto :data:`RawTimestamp`, or ``None`` if it is not one."""

    if isinstance(value, (datetime, date)):
        return Instant(value)
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return Epoch(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return Iso(value)
    for name in CONVERSION_METHODS:
        method = getattr(value, name, None)
        if callable(method):
            return Convertible(method)
    seconds = resolve_first(value, "timestamp.seconds", predicate=_is_number)
    if seconds is not None:
        nanos = resolve_first(value, "timestamp.nanoseconds", predicate=_is_number, default=0)
        return SecondsWrapper(seconds=seconds, nanoseconds=nanos)
    return None


def datetime_to_ms(value: date) -> int:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)


def _parse_text(text: str) -> int:
    text = text.strip()
    if not text:
        return 0
    try:
        return datetime_to_ms(dtparse.isoparse(text))
    except (ValueError, OverflowError):
        pass
    try:
        parsed = dtparse.parse(text, default=_NO_YEAR)
    except (ValueError, OverflowError) as exc:
        LOGGER.debug("Unparseable timestamp %r: %s", text, exc)
        return 0
    # Missing fields would otherwise come from today's date.
    if parsed.year == _NO_YEAR.year:
        LOGGER.debug("Timestamp without a year %r", text)
        return 0
    return datetime_to_ms(parsed)


def _to_ms(raw: RawTimestamp) -> int:
    if isinstance(raw, Instant):
        return datetime_to_ms(raw.value)
    if isinstance(raw, Epoch):
        return int(raw.millis)
    if isinstance(raw, Iso):
        return _parse_text(raw.text)
    if isinstance(raw, SecondsWrapper):
        return int(round(raw.seconds * 1000 + raw.nanoseconds / 1_000_000))
    if isinstance(raw, Convertible):
        try:
            converted = raw.convert()
        except Exception as exc:  # third-party wrapper types raise anything
            LOGGER.debug("Timestamp conversion failed: %r", exc)
            return 0
        inner = classify_timestamp(converted)
        # A conversion that yields another wrapper is not followed.
        if inner is None or isinstance(inner, Convertible):
            return 0
        return _to_ms(inner)
    raise TypeError(f"not a RawTimestamp: {raw!r}")


def coerce_timestamp_ms(value: Any) -> int:
    """Return ``value`` as epoch milliseconds; 0 when absent or unparseable."""

    raw = classify_timestamp(value)
    if raw is None:
        return 0
    try:
        millis = _to_ms(raw)
    except OverflowError:
        return 0
    return millis if millis > 0 else 0


def ms_to_datetime(millis: int) -> datetime:
    return EPOCH + timedelta(milliseconds=millis)


def ms_to_iso(millis: int) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    if millis <= 0:
        return ""
    try:
        dt = ms_to_datetime(millis)
    except OverflowError:
        return ""
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def timestamp_to_iso(value: Any) -> str:
    return ms_to_iso(coerce_timestamp_ms(value))


def now_ms(now: Optional[datetime] = None) -> int:
    if now is None:
        now = datetime.now(timezone.utc)
    return datetime_to_ms(now)


__all__ = [
    "CONVERSION_METHODS",
    "Convertible",
    "Epoch",
    "Instant",
    "Iso",
    "RawTimestamp",
    "SecondsWrapper",
    "classify_timestamp",
    "coerce_timestamp_ms",
    "datetime_to_ms",
    "ms_to_datetime",
    "ms_to_iso",
    "now_ms",
    "timestamp_to_iso",
]
