from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from threading import Lock

from app.core.exceptions import ImportBusyError

logger = logging.getLogger(__name__)


class ImportLockRegistry:
    """Per-scope, non-blocking, in-memory import locks.

    A key is either held or free. Acquisition never waits: a caller that finds
    the key held gets ``False`` (or ``ImportBusyError`` from :meth:`hold`).
    """

    def __init__(self) -> None:
        self._held: set[str] = set()
        self._lock = Lock()

    def try_acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._held:
                return False
            self._held.add(key)
        return True

    def release(self, key: str) -> None:
        with self._lock:
            self._held.discard(key)

    def is_held(self, key: str) -> bool:
        with self._lock:
            return key in self._held

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        if not self.try_acquire(key):
            logger.info("Import lock for %s is already held", key)
            raise ImportBusyError(key)
        try:
            yield
        finally:
            self.release(key)

    def clear(self) -> None:
        with self._lock:
            self._held.clear()
