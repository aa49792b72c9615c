"""Index performance snapshot, polled independently of scans."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Sequence

from ..errors import MarketDataFetchError
from ..models import ConnectionStatus, IndexPerformance
from ..state import CredentialStore
from .providers.base import IndexQuoteClient

logger = logging.getLogger(__name__)

DEFAULT_INDEX_NAMES: tuple[str, ...] = (
    "NIFTY50",
    "BANKNIFTY",
    "NIFTYMIDSELECT",
    "SENSEX",
    "FINNIFTY",
    "NIFTYPVTBANK",
    "NIFTYPSUBANK",
    "NIFTYIT",
    "NIFTYPHARMA",
    "NIFTYFMCG",
    "NIFTYAUTO",
    "NIFTYMETAL",
    "NIFTYENERGY",
    "NIFTYREALTY",
)

INDEX_DISPLAY_NAMES: dict[str, str] = {
    "NIFTY50": "Nifty 50",
    "BANKNIFTY": "Bank Nifty",
    "NIFTYMIDSELECT": "Nifty Mid Select",
    "SENSEX": "Sensex",
    "FINNIFTY": "Fin Nifty",
    "NIFTYPVTBANK": "Nifty Pvt Bank",
    "NIFTYPSUBANK": "Nifty PSU Bank",
    "NIFTYIT": "Nifty IT",
    "NIFTYPHARMA": "Nifty Pharma",
    "NIFTYFMCG": "Nifty FMCG",
    "NIFTYAUTO": "Nifty Auto",
    "NIFTYMETAL": "Nifty Metal",
    "NIFTYENERGY": "Nifty Energy",
    "NIFTYREALTY": "Nifty Realty",
}


def display_name(name: str) -> str:
    return INDEX_DISPLAY_NAMES.get(name, name)


def sort_by_change(entries: Iterable[IndexPerformance]) -> List[IndexPerformance]:
    """Order by percent change, highest first; unavailable quotes go last."""

    return sorted(
        entries,
        key=lambda entry: (
            entry.change_percent is None,
            -(entry.change_percent or 0.0),
        ),
    )


class IndexPerformanceService:
    """Fetch percent changes for named indices.

    Every requested name yields one entry in request order. A quote that could
    not be retrieved, for any reason, leaves ``change_percent`` unset.
    """

    def __init__(self, credentials: CredentialStore, quotes: IndexQuoteClient) -> None:
        self.credentials = credentials
        self.quotes = quotes

    def fetch(self, names: Sequence[str]) -> List[IndexPerformance]:
        names = list(names)
        if not names:
            return []
        changes: Mapping[str, float | None] = {}
        credentials = self.credentials.current()
        if credentials is None or self.credentials.status() is not ConnectionStatus.CONNECTED:
            logger.info("Index quotes skipped: broker not connected")
        else:
            try:
                changes = self.quotes.fetch_index_changes(names, credentials)
            except MarketDataFetchError as exc:
                logger.warning("Index quotes unavailable: %s", exc.reason)
        return [IndexPerformance(name=name, change_percent=changes.get(name)) for name in names]


__all__ = [
    "DEFAULT_INDEX_NAMES",
    "INDEX_DISPLAY_NAMES",
    "IndexPerformanceService",
    "display_name",
    "sort_by_change",
]
