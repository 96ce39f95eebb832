from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from app.models.event import EventType
from app.schemas.event import EventOut
from app.schemas.scope import SharedScope


class ValidParsedEvent(BaseModel):
    """A snapshot entry that passed validation; instants are UTC."""

    model_config = ConfigDict(frozen=True)

    title: str
    type: EventType = EventType.study
    start_time: datetime
    end_time: datetime
    location: str | None = None
    description: str | None = None


class RejectedParsedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    reason: str
    title: str | None = None


ParsedEvent = Union[ValidParsedEvent, RejectedParsedEvent]


class ScheduleImportRequest(BaseModel):
    # Entries stay loosely typed here; they are validated one by one so a
    # single bad entry does not reject the whole snapshot.
    events: list[Any] = Field(default_factory=list, max_length=20000)


class PersonalImportRequest(ScheduleImportRequest):
    owner_id: str = Field(min_length=1, max_length=36)


class ReconcileStatus(str, Enum):
    unchanged = "unchanged"
    updated = "updated"


class ReconcileOut(BaseModel):
    status: ReconcileStatus
    scope: SharedScope
    received: int
    accepted: int
    rejected_count: int
    rejected: list[RejectedParsedEvent]
    events: list[EventOut]

    model_config = {"from_attributes": True}


class PersonalImportOut(BaseModel):
    imported: int
    rejected_count: int
    rejected: list[RejectedParsedEvent]
    events: list[EventOut]
