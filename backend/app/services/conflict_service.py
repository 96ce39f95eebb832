from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.models.event import EventType
from app.schemas.conflict import ConflictPairType
from app.services.instants import ensure_utc

STUDY_PRIORITY_RESOLUTION = "Study event takes priority. Personal event should be moved or skipped."
MANUAL_RESOLUTION = "Both events have same priority. Manual resolution required."


@dataclass(frozen=True)
class ConflictPair:
    event1: Any
    event2: Any
    pair_type: ConflictPairType
    priority: str | None
    resolution: str

    @property
    def id(self) -> str:
        return f"{self.event1.id}-{self.event2.id}"


@dataclass(frozen=True)
class _Interval:
    start: datetime
    end: datetime
    event: Any


def _event_type(event: Any) -> EventType:
    value = event.type
    if isinstance(value, EventType):
        return value
    return EventType(str(value).strip().lower())


def classify_pair(first: Any, second: Any) -> ConflictPair | None:
    """Classify an overlapping pair; study/study overlaps are not reported."""
    first_type = _event_type(first)
    second_type = _event_type(second)

    if first_type == EventType.study and second_type == EventType.study:
        # The institutional feed is trusted to be internally consistent.
        return None

    if first_type == EventType.personal and second_type == EventType.personal:
        return ConflictPair(
            event1=first,
            event2=second,
            pair_type=ConflictPairType.personal_personal,
            priority=None,
            resolution=MANUAL_RESOLUTION,
        )

    study = first if first_type == EventType.study else second
    return ConflictPair(
        event1=first,
        event2=second,
        pair_type=ConflictPairType.study_personal,
        priority=str(study.id),
        resolution=STUDY_PRIORITY_RESOLUTION,
    )


def detect_conflicts(events: Iterable[Any]) -> list[ConflictPair]:
    """Return every overlapping pair in `events` in sweep discovery order.

    Events are swept by start time (ties broken by id). Intervals are
    closed-open, so an event ending exactly when another starts does not
    conflict with it. Each pair is emitted once as (earlier, later).
    """
    ordered = sorted(
        (
            _Interval(start=ensure_utc(event.start_time), end=ensure_utc(event.end_time), event=event)
            for event in events
        ),
        key=lambda interval: (interval.start, str(interval.event.id)),
    )

    conflicts: list[ConflictPair] = []
    active: list[_Interval] = []
    for current in ordered:
        active = [previous for previous in active if previous.end > current.start]
        for previous in active:
            pair = classify_pair(previous.event, current.event)
            if pair is not None:
                conflicts.append(pair)
        active.append(current)
    return conflicts
