"""Data layer exports for the scanner."""

from .schemas import CANDLE_COLUMNS, CandleFrame
from .stores import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .universe import normalize_symbols, parse_symbol_text

__all__ = [
    "CANDLE_COLUMNS",
    "CandleFrame",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "normalize_symbols",
    "parse_symbol_text",
]
