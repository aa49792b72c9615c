"""Scan execution and result presentation."""

from .orchestrator import ScanOrchestrator
from .ratelimit import ScanRateLimiter
from .view import DerivativeRow, ResultsView, SortDirection, SortKey, qualified_rows, sort_rows

__all__ = [
    "DerivativeRow",
    "ResultsView",
    "ScanOrchestrator",
    "ScanRateLimiter",
    "SortDirection",
    "SortKey",
    "qualified_rows",
    "sort_rows",
]
