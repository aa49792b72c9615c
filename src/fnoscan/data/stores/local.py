"""Local persistence of scanner state as JSON documents."""

from __future__ import annotations

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict
from uuid import uuid4

from ...errors import PersistenceError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileKeyValueStore:
    """Read/write helper that persists each key as ``<root>/<key>.json``.

    Writes go to a temporary sibling file that is then renamed over the target,
    so readers observe either the previous document or the new one.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> Dict[str, Any] | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Failed to read {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise PersistenceError(f"{path} contained unexpected content")
        return payload

    def put(self, key: str, value: Dict[str, Any]) -> None:
        path = self.path_for(key)
        tmp_path = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
        with self._lock:
            try:
                tmp_path.write_text(
                    json.dumps(value, indent=2, sort_keys=True),
                    encoding="utf-8",
                )
                tmp_path.replace(path)
            except (OSError, TypeError, ValueError) as exc:
                tmp_path.unlink(missing_ok=True)
                logger.error("Failed to persist %s: %s", key, exc)
                raise PersistenceError(f"Failed to persist {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise PersistenceError(f"Failed to delete {key}: {exc}") from exc
