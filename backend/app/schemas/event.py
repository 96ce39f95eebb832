from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.event import EventSource, EventType
from app.services.instants import ensure_utc


def _normalize_title(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Title cannot be empty")
    return trimmed


def _normalize_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class EventBase(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    type: EventType
    start_time: datetime
    end_time: datetime
    location: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: str) -> str:
        return _normalize_title(value)

    @field_validator("location", "description")
    @classmethod
    def normalize_optional_text(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_instant(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def validate_interval(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class EventCreate(EventBase):
    owner_id: str = Field(min_length=1, max_length=36)


class EventUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    type: EventType | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def normalize_title(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _normalize_title(value)

    @field_validator("location", "description")
    @classmethod
    def normalize_optional_text(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_instant(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        return ensure_utc(value)


class EventSnapshot(EventBase):
    """A caller-supplied event for stateless conflict detection."""

    id: str = Field(min_length=1, max_length=100)


class EventOut(BaseModel):
    id: str
    owner_user_id: str | None
    program: str | None
    year: str | None
    title: str
    type: EventType
    start_time: datetime
    end_time: datetime
    location: str | None
    description: str | None
    source: EventSource

    model_config = {"from_attributes": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_instant(cls, value: datetime) -> datetime:
        return ensure_utc(value)
