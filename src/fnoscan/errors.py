"""Exception hierarchy for the scanner.

Messages carry stable substrings (``"No Fyers credentials"``, ``"credentials
expired"``, ``"Rate limit"``, ``"No symbol list"``) that dashboard clients match
on to route users to the right remediation.
"""

from __future__ import annotations

from math import ceil

from .models import ConnectionStatus


class ScannerError(Exception):
    """Base class for all scanner errors."""


class CredentialsUnavailable(ScannerError):
    """Broker credentials are missing or expired; the user must reconnect.

    Attributes:
        status: The connection status observed when the scan was requested.
    """

    def __init__(self, status: ConnectionStatus):
        if status is ConnectionStatus.EXPIRED:
            message = "Fyers credentials expired. Update the access token and expiry."
        else:
            message = "No Fyers credentials configured. Connect the broker account first."
        super().__init__(message)
        self.status = status


class NoSymbolUniverse(ScannerError):
    """No symbol list has been saved."""

    def __init__(self) -> None:
        super().__init__("No symbol list configured. Save at least one symbol to scan.")


class EmptyUniverse(ScannerError, ValueError):
    """A symbol list normalised down to nothing."""

    def __init__(self) -> None:
        super().__init__("Symbol list is empty after removing blanks and duplicates.")


class RateLimited(ScannerError):
    """A scan is already running or the cooldown window has not elapsed.

    Attributes:
        retry_after_seconds: Remaining wait before a new scan is admitted.
    """

    def __init__(self, retry_after_seconds: float, *, in_progress: bool = False):
        self.retry_after_seconds = max(0.0, float(retry_after_seconds))
        self.in_progress = in_progress
        wait = ceil(self.retry_after_seconds)
        if in_progress:
            message = "Rate limit: a scan is already in progress."
        else:
            message = f"Rate limit: wait {wait} seconds before running another scan."
        super().__init__(message)


class MarketDataFetchError(ScannerError):
    """Fetching broker data for one symbol failed."""

    def __init__(self, symbol: str, reason: str):
        super().__init__(f"[{symbol}] Market data fetch failed: {reason}")
        self.symbol = symbol
        self.reason = reason


class PersistenceError(ScannerError):
    """Durable storage rejected a write; no partial state was committed."""


__all__ = [
    "CredentialsUnavailable",
    "EmptyUniverse",
    "MarketDataFetchError",
    "NoSymbolUniverse",
    "PersistenceError",
    "RateLimited",
    "ScannerError",
]
