from __future__ import annotations

from datetime import date, datetime, timezone
import re
from typing import Any

_EPOCH_MILLIS_PATTERN = re.compile(r"[+-]?\d+(\.\d+)?")


def ensure_utc(value: datetime) -> datetime:
    # Naive values (e.g. read back from sqlite) are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"Instant {value.isoformat()} is outside the supported range") from exc


def _from_epoch_millis(value: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def coerce_instant(value: Any) -> datetime | None:
    """Read an instant from a datetime, date, epoch milliseconds or ISO-8601 string.

    Returns an aware UTC datetime, or None when the value does not describe an
    instant.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        try:
            return ensure_utc(value)
        except ValueError:
            return None
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return _from_epoch_millis(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if _EPOCH_MILLIS_PATTERN.fullmatch(text):
        return _from_epoch_millis(float(text))
    if text[-1] in "Zz":
        text = f"{text[:-1]}+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def format_instant(value: datetime) -> str:
    """Render an instant as UTC ISO-8601 with millisecond precision."""
    utc_value = ensure_utc(value)
    return f"{utc_value.strftime('%Y-%m-%dT%H:%M:%S')}.{utc_value.microsecond // 1000:03d}Z"
