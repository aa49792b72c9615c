"""Holder of the latest scan snapshot."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from ..data.stores import KeyValueStore
from ..errors import PersistenceError
from ..models import Results

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "scan_snapshot"


@dataclass(slots=True, frozen=True)
class ScanSnapshot:
    """Results of one completed scan and the completion time in epoch nanoseconds."""

    results: Results
    completed_at: int


class ResultStore:
    """Single current :class:`ScanSnapshot`, replaced atomically on commit.

    Readers take a reference to the current snapshot object and never block on
    a commit; the results and timestamp they see always belong to the same scan.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._write_lock = threading.Lock()
        self._snapshot: ScanSnapshot | None = self._load()

    def _load(self) -> ScanSnapshot | None:
        payload = self._store.get(SNAPSHOT_KEY)
        if payload is None:
            return None
        try:
            return ScanSnapshot(
                results=Results.model_validate(payload["results"]),
                completed_at=int(payload["completed_at"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Stored scan snapshot is unreadable: {exc}") from exc

    def snapshot(self) -> ScanSnapshot | None:
        return self._snapshot

    def latest(self) -> Results | None:
        snapshot = self._snapshot
        return snapshot.results if snapshot is not None else None

    def last_scan_time(self) -> int | None:
        snapshot = self._snapshot
        return snapshot.completed_at if snapshot is not None else None

    def commit(self, results: Results, completed_at: int) -> ScanSnapshot:
        """Persist and publish a new snapshot; on failure the previous one stays current."""

        snapshot = ScanSnapshot(results=results, completed_at=int(completed_at))
        with self._write_lock:
            self._store.put(
                SNAPSHOT_KEY,
                {
                    "results": results.model_dump(mode="json"),
                    "completed_at": snapshot.completed_at,
                },
            )
            self._snapshot = snapshot
        return snapshot

    def clear(self) -> None:
        with self._write_lock:
            self._store.delete(SNAPSHOT_KEY)
            self._snapshot = None
        logger.info("Cleared cached scan results")
