"""User-owned scanner state: credentials, symbol universe, and scan results."""

from .credentials import CredentialStore
from .results import ResultStore, ScanSnapshot
from .universe import SymbolUniverseStore

__all__ = ["CredentialStore", "ResultStore", "ScanSnapshot", "SymbolUniverseStore"]
