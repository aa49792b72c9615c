"""Interfaces for broker market data providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Protocol, Sequence

from ...models import Candle, Credentials


class OptionType(str, Enum):
    CALL = "CE"
    PUT = "PE"


@dataclass(slots=True, frozen=True)
class OptionQuote:
    """Open-interest figures for one option strike."""

    strike: float
    option_type: OptionType
    oi_change_percent: float | None = None


@dataclass(slots=True, frozen=True)
class OptionChain:
    """Option strikes around the underlying's last traded price."""

    underlying_price: float
    quotes: tuple[OptionQuote, ...] = ()


@dataclass(slots=True)
class SymbolMarketData:
    """Intraday candles plus the option chain used for the OI overlay."""

    candles: List[Candle] = field(default_factory=list)
    option_chain: OptionChain | None = None


class MarketDataClient(Protocol):
    """Interface for per-symbol intraday data providers."""

    def fetch_symbol_data(self, symbol: str, credentials: Credentials) -> SymbolMarketData:
        """Return the session's candles (chronological) and option chain for ``symbol``.

        Implementations raise :class:`~fnoscan.errors.MarketDataFetchError` on failure.
        """

        raise NotImplementedError


class IndexQuoteClient(Protocol):
    """Interface for index quote providers."""

    def fetch_index_changes(
        self, names: Sequence[str], credentials: Credentials
    ) -> Mapping[str, float | None]:
        """Return the day's percent change keyed by requested index name."""

        raise NotImplementedError
