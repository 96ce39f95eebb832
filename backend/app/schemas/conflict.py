from datetime import datetime
from enum import Enum

from pydantic import BaseModel, field_validator

from app.models.event import EventType
from app.schemas.event import EventSnapshot
from app.services.instants import ensure_utc


class ConflictPairType(str, Enum):
    study_personal = "study_personal"
    personal_personal = "personal_personal"


class ConflictEventOut(BaseModel):
    id: str
    title: str
    type: EventType
    start_time: datetime
    end_time: datetime
    location: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_instant(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ConflictPairOut(BaseModel):
    id: str
    event1: ConflictEventOut
    event2: ConflictEventOut
    pair_type: ConflictPairType
    priority: str | None
    resolution: str

    model_config = {"from_attributes": True}


class ConflictDetectRequest(BaseModel):
    events: list[EventSnapshot]
