from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from app.models.event import EventType
from app.schemas.imports import ParsedEvent, RejectedParsedEvent, ValidParsedEvent
from app.services.fingerprint import normalize_text
from app.services.instants import coerce_instant

_START_KEYS = ("start_time", "startTime", "start")
_END_KEYS = ("end_time", "endTime", "end")
_EVENT_TYPES = {item.value for item in EventType}


def _first_present(entry: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_snapshot_entry(index: int, entry: Any) -> ParsedEvent:
    if isinstance(entry, BaseModel):
        entry = entry.model_dump()
    if not isinstance(entry, Mapping):
        return RejectedParsedEvent(index=index, reason="Entry is not an object")

    title = normalize_text(entry.get("title"))
    if not title:
        return RejectedParsedEvent(index=index, reason="Missing title")

    raw_type = normalize_text(entry.get("type")).lower()
    if raw_type and raw_type not in _EVENT_TYPES:
        return RejectedParsedEvent(index=index, reason=f"Unknown event type '{raw_type}'", title=title)

    start_time = coerce_instant(_first_present(entry, _START_KEYS))
    if start_time is None:
        return RejectedParsedEvent(index=index, reason="Missing or invalid start time", title=title)
    end_time = coerce_instant(_first_present(entry, _END_KEYS))
    if end_time is None:
        return RejectedParsedEvent(index=index, reason="Missing or invalid end time", title=title)
    if end_time <= start_time:
        return RejectedParsedEvent(index=index, reason="End time must be after start time", title=title)

    return ValidParsedEvent(
        title=title,
        type=EventType(raw_type) if raw_type else EventType.study,
        start_time=start_time,
        end_time=end_time,
        location=_optional_text(entry.get("location")),
        description=_optional_text(entry.get("description")),
    )


def partition_snapshot(entries: Iterable[Any]) -> tuple[list[ValidParsedEvent], list[RejectedParsedEvent]]:
    valid: list[ValidParsedEvent] = []
    rejected: list[RejectedParsedEvent] = []
    for index, entry in enumerate(entries):
        parsed = parse_snapshot_entry(index, entry)
        if isinstance(parsed, ValidParsedEvent):
            valid.append(parsed)
        else:
            rejected.append(parsed)
    return valid, rejected
