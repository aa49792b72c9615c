"""Wiring of stores, broker client, and scanner into one service graph."""

from __future__ import annotations

from dataclasses import dataclass

from .clock import Clock, SystemClock
from .config import AppSettings
from .data.indices import IndexPerformanceService
from .data.providers.base import IndexQuoteClient, MarketDataClient
from .data.providers.fyers import FyersMarketDataClient
from .data.stores import JsonFileKeyValueStore, KeyValueStore
from .scan.orchestrator import ScanOrchestrator
from .scan.ratelimit import ScanRateLimiter
from .state import CredentialStore, ResultStore, SymbolUniverseStore


@dataclass(slots=True)
class ScannerServices:
    credentials: CredentialStore
    universe: SymbolUniverseStore
    results: ResultStore
    orchestrator: ScanOrchestrator
    indices: IndexPerformanceService


def build_services(
    settings: AppSettings | None = None,
    *,
    store: KeyValueStore | None = None,
    market_data: MarketDataClient | None = None,
    index_quotes: IndexQuoteClient | None = None,
    clock: Clock | None = None,
) -> ScannerServices:
    """Build the service graph; omitted collaborators come from ``settings``."""

    settings = settings or AppSettings()
    clock = clock or SystemClock()
    if store is None:
        settings.data_paths.ensure()
        store = JsonFileKeyValueStore(settings.data_paths.state)
    if market_data is None:
        market_data = FyersMarketDataClient(
            base_url=settings.fyers_api_base_url,
            rate_limit_per_minute=settings.fyers_rate_limit_per_minute,
            timeout=settings.fyers_request_timeout,
            resolution=settings.candle_resolution,
            option_strike_count=settings.itm_strike_count + 2,
            exchange_timezone=settings.exchange_timezone,
        )
    if index_quotes is None:
        if not hasattr(market_data, "fetch_index_changes"):
            raise ValueError("index_quotes is required when market_data cannot fetch index quotes")
        index_quotes = market_data  # type: ignore[assignment]

    credentials = CredentialStore(store, clock=clock)
    universe = SymbolUniverseStore(store)
    results = ResultStore(store)
    orchestrator = ScanOrchestrator(
        credentials,
        universe,
        market_data,
        results,
        rate_limiter=ScanRateLimiter(settings.scan_cooldown_seconds, clock=clock),
        max_workers=settings.scan_max_workers,
        itm_count=settings.itm_strike_count,
        clock=clock,
    )
    return ScannerServices(
        credentials=credentials,
        universe=universe,
        results=results,
        orchestrator=orchestrator,
        indices=IndexPerformanceService(credentials, index_quotes),
    )
