"""Canonical identity keys for schedule events.

Two descriptions of the same event produce the same key regardless of how
their instants are represented (datetime, date, epoch milliseconds or an
ISO-8601 string) or how their text fields are spaced. Building a key never
raises: an instant that cannot be read falls back to its raw text.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
import json
import logging
from typing import Any

from app.models.event import EventType
from app.schemas.scope import Scope
from app.services.instants import coerce_instant, format_instant

logger = logging.getLogger(__name__)

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "start_time": ("start_time", "startTime", "start"),
    "end_time": ("end_time", "endTime", "end"),
}


def _read(event: Any, name: str) -> Any:
    for candidate in _FIELD_ALIASES.get(name, (name,)):
        if isinstance(event, Mapping):
            value = event.get(candidate)
        else:
            value = getattr(event, candidate, None)
        if value is not None:
            return value
    return None


def normalize_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return " ".join(str(value).split())


def normalize_type(value: Any) -> str:
    return normalize_text(value).lower() or EventType.study.value


def normalize_timestamp(value: Any) -> str:
    instant = coerce_instant(value)
    if instant is None:
        logger.debug("Unparseable timestamp %r, fingerprinting raw text", value)
        return normalize_text(value)
    return format_instant(instant)


def fingerprint(scope: Scope, event: Any) -> str:
    parts = [
        scope.key,
        normalize_text(_read(event, "title")),
        normalize_type(_read(event, "type")),
        normalize_timestamp(_read(event, "start_time")),
        normalize_timestamp(_read(event, "end_time")),
        normalize_text(_read(event, "location")),
        normalize_text(_read(event, "description")),
    ]
    # A JSON array keeps separators inside titles from colliding across fields.
    return json.dumps(parts, ensure_ascii=False, separators=(",", ":"))


def fingerprint_set(scope: Scope, events: Iterable[Any]) -> frozenset[str]:
    return frozenset(fingerprint(scope, event) for event in events)
