"""Reconcile an external timetable snapshot into a cohort's shared schedule.

A reconcile for one (program, year) scope runs under that scope's import
lock: read the stored imported events, validate the snapshot entry by entry,
compare fingerprint sets and, only when they differ, replace the stored
imported events with the snapshot. A second reconcile for a scope that is
already importing fails fast with ``ImportBusyError``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging
from typing import Any

from app.core.exceptions import EventStoreError
from app.models.event import EventSource
from app.schemas.imports import ReconcileStatus, RejectedParsedEvent, ValidParsedEvent
from app.schemas.scope import SharedScope
from app.services.event_store import EventDraft, EventStore
from app.services.fingerprint import fingerprint, fingerprint_set
from app.services.import_locks import ImportLockRegistry
from app.services.snapshot import partition_snapshot

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    status: ReconcileStatus
    scope: SharedScope
    events: list[Any]
    received: int
    rejected: list[RejectedParsedEvent] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)

    @property
    def accepted(self) -> int:
        return self.received - self.rejected_count


def distinct_by_fingerprint(scope: SharedScope, events: Iterable[ValidParsedEvent]) -> dict[str, ValidParsedEvent]:
    distinct: dict[str, ValidParsedEvent] = {}
    for event in events:
        distinct.setdefault(fingerprint(scope, event), event)
    return distinct


def _is_imported(event: Any) -> bool:
    return EventSource(event.source) == EventSource.imported


class ImportReconciler:
    def __init__(self, store: EventStore, locks: ImportLockRegistry) -> None:
        self._store = store
        self._locks = locks

    def reconcile(self, scope: SharedScope, parsed_events: Iterable[Any]) -> ReconcileResult:
        entries = list(parsed_events)
        with self._locks.hold(scope.key):
            try:
                return self._reconcile_locked(scope, entries)
            except EventStoreError:
                logger.error("Schedule import for %s failed; stored schedule left as before", scope.key)
                raise

    def _reconcile_locked(self, scope: SharedScope, entries: list[Any]) -> ReconcileResult:
        existing = [event for event in self._store.query_by_scope(scope) if _is_imported(event)]

        valid, rejected = partition_snapshot(entries)
        if rejected:
            logger.warning(
                "Dropped %d of %d snapshot entries for %s",
                len(rejected),
                len(entries),
                scope.key,
            )

        incoming = distinct_by_fingerprint(scope, valid)
        if frozenset(incoming) == fingerprint_set(scope, existing):
            logger.info("Schedule for %s unchanged (%d events)", scope.key, len(existing))
            return ReconcileResult(
                status=ReconcileStatus.unchanged,
                scope=scope,
                events=existing,
                received=len(entries),
                rejected=rejected,
            )

        removed = self._store.delete_imported(scope)
        stored = self._store.insert_batch(
            [EventDraft.from_parsed(scope, event, source=EventSource.imported) for event in incoming.values()]
        )
        logger.info(
            "Schedule for %s updated: removed %d, stored %d events",
            scope.key,
            removed,
            len(stored),
        )
        return ReconcileResult(
            status=ReconcileStatus.updated,
            scope=scope,
            events=stored,
            received=len(entries),
            rejected=rejected,
        )
