"""Key/value storage interface backing the scanner's durable state."""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, Protocol


class KeyValueStore(Protocol):
    """Durable document storage with read-after-write consistency."""

    def get(self, key: str) -> Dict[str, Any] | None:
        """Return the document stored under ``key`` or ``None``."""

        raise NotImplementedError

    def put(self, key: str, value: Dict[str, Any]) -> None:
        """Replace the document under ``key``; raise :class:`PersistenceError` on failure."""

        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""

        raise NotImplementedError


class MemoryKeyValueStore:
    """In-process store; documents are deep-copied on the way in and out."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Dict[str, Any] | None:
        with self._lock:
            document = self._documents.get(key)
            return copy.deepcopy(document) if document is not None else None

    def put(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._documents[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._documents.pop(key, None)
