from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.event_store import SqlEventStore
from app.services.import_locks import ImportLockRegistry
from app.services.import_reconciler import ImportReconciler


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_event_store(db: Session = Depends(get_db)) -> SqlEventStore:
    return SqlEventStore(db)


def get_import_locks(request: Request) -> ImportLockRegistry:
    return request.app.state.import_locks


def get_import_reconciler(
    store: SqlEventStore = Depends(get_event_store),
    locks: ImportLockRegistry = Depends(get_import_locks),
) -> ImportReconciler:
    return ImportReconciler(store, locks)
