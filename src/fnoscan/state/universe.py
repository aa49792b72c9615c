"""Storage for the user-curated symbol universe."""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..data.stores import KeyValueStore
from ..data.universe import normalize_symbols
from ..errors import EmptyUniverse

logger = logging.getLogger(__name__)

UNIVERSE_KEY = "symbol_universe"


class SymbolUniverseStore:
    """Replace-in-place list of symbols to scan."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def save(self, symbols: Iterable[str]) -> List[str]:
        """Normalise and store ``symbols`` wholesale, returning what was stored."""

        normalized = normalize_symbols(symbols)
        if not normalized:
            raise EmptyUniverse()
        self._store.put(UNIVERSE_KEY, {"symbols": normalized})
        logger.info("Saved symbol universe with %d symbols", len(normalized))
        return normalized

    def list(self) -> List[str] | None:
        payload = self._store.get(UNIVERSE_KEY)
        if payload is None:
            return None
        return [str(symbol) for symbol in payload.get("symbols", [])]
