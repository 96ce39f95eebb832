import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class EventType(str, Enum):
    study = "study"
    personal = "personal"


class EventSource(str, Enum):
    manual = "manual"
    imported = "imported"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (Index("ix_events_program_year", "program", "year"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # NULL owner marks a cohort-wide (shared) event.
    owner_user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    program: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[str | None] = mapped_column(String(20), nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[EventType] = mapped_column(
        SAEnum(EventType, name="event_type"), nullable=False, default=EventType.study
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[EventSource] = mapped_column(
        SAEnum(EventSource, name="event_source"), nullable=False, default=EventSource.manual
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
