"""Fyers API v3 data provider for intraday candles, option chains, and index quotes."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from datetime import date, datetime
from typing import Callable, Dict, List, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

import requests

from ...errors import MarketDataFetchError
from ...models import Credentials
from ..schemas import CandleFrame
from .base import MarketDataClient, OptionChain, OptionQuote, OptionType, SymbolMarketData

logger = logging.getLogger(__name__)

_OK_STATUSES = {"ok", "no_data"}
_QUOTES_BATCH_SIZE = 50

_INDEX_TICKERS = {
    "NIFTY": "NSE:NIFTY50-INDEX",
    "NIFTY50": "NSE:NIFTY50-INDEX",
    "BANKNIFTY": "NSE:NIFTYBANK-INDEX",
    "NIFTYBANK": "NSE:NIFTYBANK-INDEX",
    "FINNIFTY": "NSE:FINNIFTY-INDEX",
    "MIDCPNIFTY": "NSE:MIDCPNIFTY-INDEX",
    "NIFTYMIDSELECT": "NSE:MIDCPNIFTY-INDEX",
    "NIFTYNXT50": "NSE:NIFTYNXT50-INDEX",
    "SENSEX": "BSE:SENSEX-INDEX",
    "BANKEX": "BSE:BANKEX-INDEX",
}


def to_fyers_symbol(symbol: str) -> str:
    """Map a universe symbol to a Fyers ticker (``TCS`` -> ``NSE:TCS-EQ``)."""

    normalized = symbol.strip().upper()
    if not normalized:
        raise ValueError("Symbol must not be blank")
    if ":" in normalized:
        return normalized
    return _INDEX_TICKERS.get(normalized, f"NSE:{normalized}-EQ")


def to_fyers_index_symbol(name: str) -> str:
    """Map an index name to a Fyers index ticker (``NIFTYIT`` -> ``NSE:NIFTYIT-INDEX``)."""

    normalized = name.strip().upper()
    if not normalized:
        raise ValueError("Index name must not be blank")
    if ":" in normalized:
        return normalized
    return _INDEX_TICKERS.get(normalized, f"NSE:{normalized}-INDEX")


def _coerce_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def _oi_change_percent(entry: Mapping[str, object]) -> float | None:
    percent = _coerce_float(entry.get("oichp"))
    if percent is not None:
        return percent
    oi = _coerce_float(entry.get("oi"))
    previous = _coerce_float(entry.get("prev_oi"))
    if oi is None or previous is None or previous <= 0:
        return None
    return (oi - previous) / previous * 100.0


class _FyersAPI:
    """Thin wrapper around the Fyers data endpoints with rate limiting."""

    def __init__(
            self,
            *,
            session: Optional[requests.Session] = None,
            base_url: str = "https://api-t1.fyers.in",
            rate_limit_per_minute: int = 180,
            timeout: int = 15,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.rate_limit_per_minute = rate_limit_per_minute
        self.timeout = timeout
        self._call_timestamps: deque[float] = deque()
        self._lock = threading.Lock()

    def close(self) -> None:
        self.session.close()

    def _throttle(self) -> None:
        if self.rate_limit_per_minute <= 0:
            return
        window = 60.0
        while True:
            with self._lock:
                now = time.monotonic()
                while self._call_timestamps and now - self._call_timestamps[0] > window:
                    self._call_timestamps.popleft()
                if len(self._call_timestamps) < self.rate_limit_per_minute:
                    self._call_timestamps.append(now)
                    return
                sleep_time = window - (now - self._call_timestamps[0]) + 0.01
            time.sleep(max(sleep_time, 0.0))

    def _request(self, path: str, credentials: Credentials, params: dict) -> dict:
        self._throttle()
        headers = {"Authorization": f"{credentials.client_id}:{credentials.access_token}"}
        response = self.session.get(
            f"{self.base_url}{path}", params=params, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Fyers returned a non-object payload")
        if payload.get("s") not in _OK_STATUSES:
            message = payload.get("message") or "Fyers request failed"
            raise RuntimeError(message)
        return payload

    def history(
            self,
            ticker: str,
            *,
            resolution: str,
            session_date: date,
            credentials: Credentials,
    ) -> list:
        params = {
            "symbol": ticker,
            "resolution": resolution,
            "date_format": "1",
            "range_from": session_date.isoformat(),
            "range_to": session_date.isoformat(),
            "cont_flag": "1",
        }
        payload = self._request("/data/history", credentials, params)
        return list(payload.get("candles") or [])

    def option_chain(self, ticker: str, *, strike_count: int, credentials: Credentials) -> dict:
        params = {"symbol": ticker, "strikecount": str(strike_count), "timestamp": ""}
        payload = self._request("/data/options-chain-v3", credentials, params)
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise ValueError("Option chain payload is malformed")
        return data

    def quotes(self, tickers: Sequence[str], *, credentials: Credentials) -> list[dict]:
        entries: list[dict] = []
        for start in range(0, len(tickers), _QUOTES_BATCH_SIZE):
            batch = tickers[start:start + _QUOTES_BATCH_SIZE]
            payload = self._request(
                "/data/quotes", credentials, {"symbols": ",".join(batch)})
            entries.extend(item for item in payload.get("d") or [] if isinstance(item, dict))
        return entries


def _parse_option_chain(data: Mapping[str, object]) -> OptionChain | None:
    underlying_price: float | None = None
    quotes: List[OptionQuote] = []
    for entry in data.get("optionsChain") or []:
        if not isinstance(entry, dict):
            continue
        option_type = str(entry.get("option_type") or "").upper()
        strike = _coerce_float(entry.get("strike_price"))
        if option_type not in {OptionType.CALL.value, OptionType.PUT.value}:
            if underlying_price is None:
                underlying_price = _coerce_float(entry.get("ltp"))
            continue
        if strike is None or strike <= 0:
            continue
        quotes.append(
            OptionQuote(
                strike=strike,
                option_type=OptionType(option_type),
                oi_change_percent=_oi_change_percent(entry),
            )
        )
    if underlying_price is None or not quotes:
        return None
    return OptionChain(underlying_price=underlying_price, quotes=tuple(quotes))


class FyersMarketDataClient(MarketDataClient):
    """Fetch session candles, option chains, and index quotes from Fyers."""

    def __init__(
            self,
            *,
            session: Optional[requests.Session] = None,
            base_url: str = "https://api-t1.fyers.in",
            rate_limit_per_minute: int = 180,
            timeout: int = 15,
            resolution: str = "5",
            option_strike_count: int = 5,
            exchange_timezone: str = "Asia/Kolkata",
            session_date: Callable[[], date] | None = None,
    ) -> None:
        self.resolution = resolution
        self.option_strike_count = option_strike_count
        self._timezone = ZoneInfo(exchange_timezone)
        self._session_date = session_date
        self._api = _FyersAPI(
            session=session,
            base_url=base_url,
            rate_limit_per_minute=rate_limit_per_minute,
            timeout=timeout,
        )

    def close(self) -> None:
        self._api.close()

    def session_date(self) -> date:
        if self._session_date is not None:
            return self._session_date()
        return datetime.now(self._timezone).date()

    def fetch_symbol_data(self, symbol: str, credentials: Credentials) -> SymbolMarketData:
        try:
            ticker = to_fyers_symbol(symbol)
            rows = self._api.history(
                ticker,
                resolution=self.resolution,
                session_date=self.session_date(),
                credentials=credentials,
            )
            candles = CandleFrame.to_candles(CandleFrame.from_rows(rows, time_unit="s"))
        except (requests.RequestException, RuntimeError, TypeError, ValueError) as exc:
            raise MarketDataFetchError(symbol, str(exc)) from exc

        if not candles:
            return SymbolMarketData(candles=[])
        return SymbolMarketData(
            candles=candles,
            option_chain=self._fetch_option_chain(symbol, ticker, credentials),
        )

    def _fetch_option_chain(
            self, symbol: str, ticker: str, credentials: Credentials
    ) -> OptionChain | None:
        try:
            data = self._api.option_chain(
                ticker, strike_count=self.option_strike_count, credentials=credentials)
            return _parse_option_chain(data)
        except (requests.RequestException, RuntimeError, TypeError, ValueError) as exc:
            logger.warning("Option chain unavailable for %s: %s", symbol, exc)
            return None

    def fetch_index_changes(
            self, names: Sequence[str], credentials: Credentials
    ) -> Dict[str, float | None]:
        tickers: Dict[str, str | None] = {}
        for name in names:
            try:
                tickers[name] = to_fyers_index_symbol(name)
            except ValueError as exc:
                logger.warning("Skipping index %r: %s", name, exc)
                tickers[name] = None
        unique_tickers = list(dict.fromkeys(t for t in tickers.values() if t is not None))
        if not unique_tickers:
            return {name: None for name in tickers}
        try:
            entries = self._api.quotes(unique_tickers, credentials=credentials)
        except (requests.RequestException, RuntimeError, ValueError) as exc:
            raise MarketDataFetchError(",".join(names), str(exc)) from exc

        changes: Dict[str, float | None] = {}
        for entry in entries:
            if entry.get("s") not in _OK_STATUSES:
                continue
            values = entry.get("v")
            if isinstance(values, dict):
                changes[str(entry.get("n", "")).upper()] = _coerce_float(values.get("chp"))
        return {name: changes.get(ticker) for name, ticker in tickers.items()}


__all__ = [
    "FyersMarketDataClient",
    "to_fyers_index_symbol",
    "to_fyers_symbol",
]
