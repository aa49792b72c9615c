import threading
from types import SimpleNamespace
from typing import Dict, List, Sequence

import pytest
import requests

from fnoscan.clock import NANOS_PER_SECOND
from fnoscan.config import AppSettings
from fnoscan.data.providers.base import SymbolMarketData
from fnoscan.data.stores import MemoryKeyValueStore
from fnoscan.models import Candle, Credentials
from fnoscan.services import build_services

SESSION_START_NS = 1_718_000_100 * NANOS_PER_SECOND
FIVE_MINUTES_NS = 300 * NANOS_PER_SECOND


class FakeClock:
    def __init__(self, now_ns: int = 1_718_000_000 * NANOS_PER_SECOND, monotonic: float = 1_000.0):
        self._now_ns = now_ns
        self._monotonic = monotonic

    def now_ns(self) -> int:
        return self._now_ns

    def monotonic(self) -> float:
        return self._monotonic

    def advance(self, seconds: float) -> None:
        self._now_ns += int(seconds * NANOS_PER_SECOND)
        self._monotonic += seconds


class FakeMarketData:
    def __init__(self, data=None, index_changes=None):
        self.data: Dict[str, object] = dict(data or {})
        self.index_changes = index_changes if index_changes is not None else {}
        self.calls: List[str] = []
        self.index_calls: List[List[str]] = []
        self._lock = threading.Lock()

    def fetch_symbol_data(self, symbol: str, credentials: Credentials) -> SymbolMarketData:
        with self._lock:
            self.calls.append(symbol)
        value = self.data.get(symbol)
        if isinstance(value, Exception):
            raise value
        if value is None:
            return SymbolMarketData(candles=[])
        return value

    def fetch_index_changes(self, names: Sequence[str], credentials: Credentials):
        self.index_calls.append(list(names))
        if isinstance(self.index_changes, Exception):
            raise self.index_changes
        return {name: self.index_changes.get(name) for name in names}


class DummyResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self, payloads):
        self.payloads = payloads
        self.calls: list[SimpleNamespace] = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(SimpleNamespace(
            url=url, params=params, headers=headers, timeout=timeout))
        payload = self.payloads.get(url)
        if payload is None:  # pragma: no cover
            raise AssertionError(f"Unexpected endpoint in dummy session: {url}")
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, DummyResponse):
            return payload
        return DummyResponse(payload)

    def close(self):  # pragma: no cover
        return None


def make_candles(bars, start_ns: int = SESSION_START_NS) -> List[Candle]:
    """Build candles from ``(low, high)`` pairs, five minutes apart."""

    candles = []
    for index, (low, high) in enumerate(bars):
        mid = (low + high) / 2
        candles.append(
            Candle(
                time=start_ns + index * FIVE_MINUTES_NS,
                open=mid,
                high=high,
                low=low,
                close=mid,
                volume=1_000,
            )
        )
    return candles


def make_credentials(expiry: int = 0) -> Credentials:
    return Credentials(
        client_id="XY1234-100",
        secret="secret-key",
        redirect_url="https://example.com/callback",
        access_token="access-token",
        refresh_token="refresh-token",
        expiry=expiry,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def market_data() -> FakeMarketData:
    return FakeMarketData()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(scan_cooldown_seconds=60, scan_max_workers=4, itm_strike_count=2)


@pytest.fixture
def services(settings, clock, market_data):
    return build_services(
        settings,
        store=MemoryKeyValueStore(),
        market_data=market_data,
        clock=clock,
    )
