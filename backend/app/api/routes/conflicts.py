from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_event_store
from app.schemas.conflict import ConflictDetectRequest, ConflictPairOut
from app.schemas.scope import SharedScope
from app.services.conflict_service import detect_conflicts
from app.services.event_store import SqlEventStore

router = APIRouter()


@router.get("/", response_model=list[ConflictPairOut])
def list_conflicts(
    owner_id: str = Query(min_length=1, max_length=36),
    program: str | None = Query(default=None, max_length=100),
    year: str | None = Query(default=None, max_length=20),
    store: SqlEventStore = Depends(get_event_store),
) -> list[ConflictPairOut]:
    program = (program or "").strip()
    year = (year or "").strip()
    if bool(program) != bool(year):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="program and year must be provided together",
        )
    shared_scope = SharedScope(program=program, year=year) if program else None
    events = store.query_for_viewer(owner_id, shared_scope)
    return [ConflictPairOut.model_validate(pair) for pair in detect_conflicts(events)]


@router.post("/detect", response_model=list[ConflictPairOut])
def detect_conflicts_for_events(payload: ConflictDetectRequest) -> list[ConflictPairOut]:
    return [ConflictPairOut.model_validate(pair) for pair in detect_conflicts(payload.events)]
