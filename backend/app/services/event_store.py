from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Protocol

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import EventStoreError
from app.models.event import Event, EventSource, EventType
from app.schemas.imports import ValidParsedEvent
from app.schemas.scope import PersonalScope, Scope, SharedScope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventDraft:
    scope: Scope
    source: EventSource
    title: str
    type: EventType
    start_time: datetime
    end_time: datetime
    location: str | None = None
    description: str | None = None

    @classmethod
    def from_parsed(cls, scope: Scope, parsed: ValidParsedEvent, *, source: EventSource) -> "EventDraft":
        return cls(
            scope=scope,
            source=source,
            title=parsed.title,
            type=parsed.type,
            start_time=parsed.start_time,
            end_time=parsed.end_time,
            location=parsed.location,
            description=parsed.description,
        )


class EventStore(Protocol):
    def query_by_scope(self, scope: Scope) -> list[Event]: ...

    def delete_imported(self, scope: Scope) -> int: ...

    def insert_batch(self, drafts: Sequence[EventDraft]) -> list[Event]: ...

    def query_for_viewer(self, owner_id: str, shared_scope: SharedScope | None = None) -> list[Event]: ...


def _scope_clause(scope: Scope):
    if isinstance(scope, PersonalScope):
        return Event.owner_user_id == scope.owner_id
    return and_(
        Event.owner_user_id.is_(None),
        Event.program == scope.program,
        Event.year == scope.year,
    )


def _to_record(draft: EventDraft) -> Event:
    owner_user_id = None
    program = None
    year = None
    if isinstance(draft.scope, PersonalScope):
        owner_user_id = draft.scope.owner_id
    else:
        program = draft.scope.program
        year = draft.scope.year
    return Event(
        owner_user_id=owner_user_id,
        program=program,
        year=year,
        title=draft.title,
        type=draft.type,
        start_time=draft.start_time,
        end_time=draft.end_time,
        location=draft.location,
        description=draft.description,
        source=draft.source,
    )


class SqlEventStore:
    """Event store over one SQLAlchemy session.

    ``delete_imported`` only stages the deletion; ``insert_batch`` commits the
    unit of work, so a delete followed by an insert becomes visible to other
    sessions at once. Any failure rolls the session back.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("Event store %s failed", name)
            raise EventStoreError(name) from exc

    def query_by_scope(self, scope: Scope) -> list[Event]:
        with self._operation("query_by_scope"):
            statement = select(Event).where(_scope_clause(scope)).order_by(Event.start_time.asc(), Event.id.asc())
            return list(self._db.execute(statement).scalars())

    def query_for_viewer(self, owner_id: str, shared_scope: SharedScope | None = None) -> list[Event]:
        clause = _scope_clause(PersonalScope(owner_id=owner_id))
        if shared_scope is not None:
            clause = or_(clause, _scope_clause(shared_scope))
        with self._operation("query_for_viewer"):
            statement = select(Event).where(clause).order_by(Event.start_time.asc(), Event.id.asc())
            return list(self._db.execute(statement).scalars())

    def delete_imported(self, scope: Scope) -> int:
        with self._operation("delete_imported"):
            result = self._db.execute(
                delete(Event)
                .where(_scope_clause(scope), Event.source == EventSource.imported)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0

    def insert_batch(self, drafts: Sequence[EventDraft]) -> list[Event]:
        records = [_to_record(draft) for draft in drafts]
        with self._operation("insert_batch"):
            self._db.add_all(records)
            self._db.commit()
            for record in records:
                self._db.refresh(record)
        return records
