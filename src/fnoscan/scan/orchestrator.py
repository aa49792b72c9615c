"""Scan orchestration: preconditions, admission, bounded fan-out, atomic commit."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

from ..clock import Clock, SystemClock
from ..data.providers.base import MarketDataClient
from ..errors import CredentialsUnavailable, MarketDataFetchError, NoSymbolUniverse, PersistenceError
from ..models import Candle, ConnectionStatus, Credentials, Derivative, Results
from ..state import CredentialStore, ResultStore, SymbolUniverseStore
from ..strategies.qualification import Qualification, classify, summarize_open_interest
from .ratelimit import ScanRateLimiter

logger = logging.getLogger(__name__)

Classifier = Callable[[Sequence[Candle]], Qualification]


class ScanOrchestrator:
    """Run one scan over the saved universe and publish the result snapshot."""

    def __init__(
        self,
        credentials: CredentialStore,
        universe: SymbolUniverseStore,
        market_data: MarketDataClient,
        results: ResultStore,
        *,
        rate_limiter: ScanRateLimiter,
        max_workers: int = 8,
        itm_count: int = 2,
        classifier: Classifier = classify,
        clock: Clock | None = None,
    ) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self.credentials = credentials
        self.universe = universe
        self.market_data = market_data
        self.results = results
        self.rate_limiter = rate_limiter
        self.max_workers = max_workers
        self.itm_count = itm_count
        self.classifier = classifier
        self._clock = clock or SystemClock()

    def _check_credentials(self) -> Credentials:
        credentials = self.credentials.current()
        if credentials is None:
            raise CredentialsUnavailable(ConnectionStatus.NOT_CONNECTED)
        status = credentials.connection_status(self._clock.now_ns())
        if status is not ConnectionStatus.CONNECTED:
            raise CredentialsUnavailable(status)
        return credentials

    def run_scan(self) -> Results:
        """Scan every universe symbol and commit the snapshot.

        Raises :class:`CredentialsUnavailable`, :class:`NoSymbolUniverse`, or
        :class:`RateLimited` before any broker call, and :class:`PersistenceError`
        if the snapshot could not be stored (the previous snapshot stays current).
        """

        credentials = self._check_credentials()
        symbols = self.universe.list()
        if not symbols:
            raise NoSymbolUniverse()

        with self.rate_limiter.admit():
            logger.info("Starting scan of %d symbols", len(symbols))
            workers = min(self.max_workers, len(symbols))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scan") as executor:
                derivatives = list(
                    executor.map(lambda symbol: self._scan_symbol(symbol, credentials), symbols))

            results = Results.from_derivatives(derivatives)
            try:
                self.results.commit(results, self._clock.now_ns())
            except PersistenceError:
                logger.error("Scan finished but the snapshot could not be stored")
                raise

        logger.info("Scan complete: %s", results.counts())
        return results

    def _scan_symbol(self, symbol: str, credentials: Credentials) -> Derivative:
        try:
            data = self.market_data.fetch_symbol_data(symbol, credentials)
        except MarketDataFetchError as exc:
            logger.warning("Ignoring %s: %s", symbol, exc.reason)
            return Derivative.ignored(symbol)
        except Exception as exc:
            logger.warning("Ignoring %s after unexpected client error: %r", symbol, exc)
            return Derivative.ignored(symbol)

        qualification = self.classifier(data.candles)
        atm_change, itm_changes = summarize_open_interest(
            data.option_chain, qualification.side, itm_count=self.itm_count)
        return Derivative(
            symbol=symbol,
            status=qualification.status,
            side=qualification.side,
            atm_oi_change=atm_change,
            itm_oi_change=itm_changes,
            candles=tuple(data.candles),
        )
