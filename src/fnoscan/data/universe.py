"""Symbol universe normalisation."""

from __future__ import annotations

from typing import Iterable

import pandas as pd


def normalize_symbols(symbols: Iterable[str]) -> list[str]:
    """Trim entries, drop blanks, and de-duplicate keeping first-seen order."""

    series = pd.Series(list(symbols), dtype="object")
    if series.empty:
        return []
    series = series.dropna().astype(str).str.strip()
    series = series[series != ""].drop_duplicates(keep="first")
    return series.tolist()


def parse_symbol_text(text: str) -> list[str]:
    """Split a one-symbol-per-line document into normalised symbols."""

    return normalize_symbols(text.splitlines())


__all__ = ["normalize_symbols", "parse_symbol_text"]
