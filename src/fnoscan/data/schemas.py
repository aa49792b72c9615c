"""Candle frame helpers for raw broker payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Sequence

import pandas as pd

from ..models import Candle

CANDLE_COLUMNS: tuple[str, ...] = (
    "time",
    "open",
    "high",
    "low",
    "close",
    "volume",
)

_UNIT_TO_NANOS = {"s": 1_000_000_000, "ms": 1_000_000, "us": 1_000, "ns": 1}


@dataclass(slots=True)
class CandleFrame:
    """Helper to construct validated :class:`pandas.DataFrame` objects for candle data."""

    columns: ClassVar[tuple[str, ...]] = CANDLE_COLUMNS

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[float]], *, time_unit: str = "s") -> pd.DataFrame:
        """Convert ``[time, open, high, low, close, volume]`` rows to a chronological frame.

        ``time_unit`` names the unit of the incoming timestamps; the frame stores
        epoch nanoseconds. Rows repeating a timestamp keep the last occurrence.
        """

        width = len(cls.columns)
        padded = [(list(row) + [None] * width)[:width] for row in rows]
        df = pd.DataFrame(padded, columns=cls.columns)
        if df.empty:
            return df
        df = df.dropna(subset=["time", "open", "high", "low", "close"]).copy()
        if time_unit not in _UNIT_TO_NANOS:
            raise ValueError(f"Unsupported time unit: {time_unit}")
        df["time"] = df["time"].astype("int64") * _UNIT_TO_NANOS[time_unit]
        df["volume"] = df["volume"].fillna(0.0)
        df = df.drop_duplicates(subset=["time"], keep="last")
        df.sort_values("time", inplace=True)
        df.reset_index(drop=True, inplace=True)
        return df

    @classmethod
    def ensure_schema(cls, df: pd.DataFrame) -> pd.DataFrame:
        """Ensure the DataFrame contains the expected columns in correct order."""

        missing = set(cls.columns) - set(df.columns)
        if missing:
            raise ValueError(
                f"DataFrame missing required columns: {sorted(missing)}")
        return df.loc[:, cls.columns].copy()

    @classmethod
    def to_candles(cls, df: pd.DataFrame) -> list[Candle]:
        validated = cls.ensure_schema(df)
        return [
            Candle(
                time=int(row.time),
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=float(row.volume),
            )
            for row in validated.itertuples(index=False)
        ]
