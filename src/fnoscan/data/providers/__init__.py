"""Provider implementations for broker market data."""

from .base import (
    IndexQuoteClient,
    MarketDataClient,
    OptionChain,
    OptionQuote,
    OptionType,
    SymbolMarketData,
)
from .fyers import FyersMarketDataClient, to_fyers_index_symbol, to_fyers_symbol

__all__ = [
    "FyersMarketDataClient",
    "IndexQuoteClient",
    "MarketDataClient",
    "OptionChain",
    "OptionQuote",
    "OptionType",
    "SymbolMarketData",
    "to_fyers_index_symbol",
    "to_fyers_symbol",
]
