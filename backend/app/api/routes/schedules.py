from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from app.api.deps import get_event_store, get_import_reconciler
from app.schemas.event import EventOut
from app.schemas.imports import ReconcileOut, ScheduleImportRequest
from app.schemas.scope import SharedScope
from app.services.event_store import SqlEventStore
from app.services.import_reconciler import ImportReconciler

router = APIRouter()


def _shared_scope(program: str, year: str) -> SharedScope:
    try:
        return SharedScope(program=program, year=year)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="program and year must be non-empty",
        ) from exc


@router.get("/{program}/{year}/events", response_model=list[EventOut])
def list_shared_events(
    program: str,
    year: str,
    store: SqlEventStore = Depends(get_event_store),
) -> list[EventOut]:
    return store.query_by_scope(_shared_scope(program, year))


@router.post("/{program}/{year}/import", response_model=ReconcileOut)
def import_shared_schedule(
    program: str,
    year: str,
    payload: ScheduleImportRequest,
    reconciler: ImportReconciler = Depends(get_import_reconciler),
) -> ReconcileOut:
    result = reconciler.reconcile(_shared_scope(program, year), payload.events)
    return ReconcileOut.model_validate(result)
