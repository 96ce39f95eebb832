from datetime import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_event_store
from app.core.exceptions import ResourceNotFoundError
from app.models.event import Event, EventSource
from app.schemas.event import EventCreate, EventOut, EventUpdate
from app.schemas.imports import PersonalImportOut, PersonalImportRequest
from app.schemas.scope import PersonalScope
from app.services.event_store import EventDraft, SqlEventStore
from app.services.instants import ensure_utc
from app.services.snapshot import partition_snapshot

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_event_or_404(db: Session, event_id: str) -> Event:
    # Cohort events belong to the imported feed and are not editable here.
    event = db.get(Event, event_id)
    if event is None or event.owner_user_id is None:
        raise ResourceNotFoundError("Event", event_id)
    return event


@router.get("/", response_model=list[EventOut])
def list_events(
    owner_id: str = Query(min_length=1, max_length=36),
    db: Session = Depends(get_db),
) -> list[EventOut]:
    statement = (
        select(Event)
        .where(Event.owner_user_id == owner_id)
        .order_by(Event.start_time.asc(), Event.id.asc())
    )
    return list(db.execute(statement).scalars())


@router.get("/range", response_model=list[EventOut])
def list_events_in_range(
    start: datetime,
    end: datetime,
    owner_id: str = Query(min_length=1, max_length=36),
    db: Session = Depends(get_db),
) -> list[EventOut]:
    try:
        start = ensure_utc(start)
        end = ensure_utc(end)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if end <= start:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end must be after start")
    statement = (
        select(Event)
        .where(
            Event.owner_user_id == owner_id,
            Event.start_time < end,
            Event.end_time > start,
        )
        .order_by(Event.start_time.asc(), Event.id.asc())
    )
    return list(db.execute(statement).scalars())


@router.post("/import", response_model=PersonalImportOut, status_code=status.HTTP_201_CREATED)
def import_personal_events(
    payload: PersonalImportRequest,
    store: SqlEventStore = Depends(get_event_store),
) -> PersonalImportOut:
    scope = PersonalScope(owner_id=payload.owner_id)
    valid, rejected = partition_snapshot(payload.events)
    if rejected:
        logger.warning("Dropped %d of %d personal import entries for %s", len(rejected), len(payload.events), scope.key)
    stored = store.insert_batch(
        [EventDraft.from_parsed(scope, event, source=EventSource.imported) for event in valid]
    )
    return PersonalImportOut(
        imported=len(stored),
        rejected_count=len(rejected),
        rejected=rejected,
        events=[EventOut.model_validate(event) for event in stored],
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)) -> EventOut:
    return _get_event_or_404(db, event_id)


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db)) -> EventOut:
    event = Event(
        owner_user_id=payload.owner_id,
        title=payload.title,
        type=payload.type,
        start_time=payload.start_time,
        end_time=payload.end_time,
        location=payload.location,
        description=payload.description,
        source=EventSource.manual,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@router.put("/{event_id}", response_model=EventOut)
def update_event(event_id: str, payload: EventUpdate, db: Session = Depends(get_db)) -> EventOut:
    event = _get_event_or_404(db, event_id)

    data = payload.model_dump(exclude_unset=True)
    if "title" in data and data["title"] is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title cannot be empty")
    for key in ("type", "start_time", "end_time"):
        if key in data and data[key] is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{key} cannot be null")

    start_time = data.get("start_time", ensure_utc(event.start_time))
    end_time = data.get("end_time", ensure_utc(event.end_time))
    if end_time <= start_time:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event end time must be after start time",
        )

    for key, value in data.items():
        setattr(event, key, value)
    db.commit()
    db.refresh(event)
    return event


@router.delete("/{event_id}")
def delete_event(event_id: str, db: Session = Depends(get_db)) -> dict:
    event = _get_event_or_404(db, event_id)
    db.delete(event)
    db.commit()
    return {"success": True}
