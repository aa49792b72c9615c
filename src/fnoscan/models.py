"""Domain models shared by the scanner, stores, and HTTP layer.

Wire names are camelCase (``atmOiChange``, ``changePercent``) to match the
dashboard contract; Python attributes stay snake_case. Optional values are
``None`` when unavailable, never ``-1`` or ``NaN``.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    allow_inf_nan=False,
)


class Status(str, Enum):
    """Per-symbol qualification outcome of a scan."""

    QUALIFIED = "qualified"
    DISQUALIFIED = "disqualified"
    IGNORED = "ignored"


class Side(str, Enum):
    """Bull (``long``) or bear (``short``) side of a classification."""

    LONG = "long"
    SHORT = "short"


class ConnectionStatus(str, Enum):
    """Broker connection state derived from stored credentials."""

    NOT_CONNECTED = "NOT_CONNECTED"
    CONNECTED = "CONNECTED"
    EXPIRED = "EXPIRED"


class Candle(BaseModel):
    """One intraday OHLCV bar."""

    model_config = _WIRE_CONFIG

    time: int = Field(..., ge=0, description="Bar start in epoch nanoseconds.")
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)
    volume: float = Field(default=0.0, ge=0)


class Derivative(BaseModel):
    """Scan outcome for one symbol, with its candles and OI overlay."""

    model_config = _WIRE_CONFIG

    symbol: str
    status: Status
    side: Side
    atm_oi_change: float | None = None
    itm_oi_change: tuple[float, ...] = ()
    candles: tuple[Candle, ...] = ()

    @classmethod
    def ignored(cls, symbol: str) -> "Derivative":
        """Placeholder for a symbol whose data could not be fetched."""

        return cls(symbol=symbol, status=Status.IGNORED, side=Side.LONG)


class Results(BaseModel):
    """One complete scan snapshot partitioned by status."""

    model_config = _WIRE_CONFIG

    qualified: tuple[Derivative, ...] = ()
    disqualified: tuple[Derivative, ...] = ()
    ignored: tuple[Derivative, ...] = ()

    @model_validator(mode="after")
    def _check_partition(self) -> "Results":
        seen: set[str] = set()
        for status, bucket in self.buckets().items():
            for derivative in bucket:
                if derivative.status is not status:
                    raise ValueError(
                        f"{derivative.symbol} has status {derivative.status.value} "
                        f"but sits in the {status.value} bucket")
                if derivative.symbol in seen:
                    raise ValueError(
                        f"{derivative.symbol} appears more than once in results")
                seen.add(derivative.symbol)
        return self

    @classmethod
    def from_derivatives(cls, derivatives: Iterable[Derivative]) -> "Results":
        """Bucket derivatives by status, preserving input order within buckets."""

        grouped: dict[Status, list[Derivative]] = {status: [] for status in Status}
        for derivative in derivatives:
            grouped[derivative.status].append(derivative)
        return cls(
            qualified=tuple(grouped[Status.QUALIFIED]),
            disqualified=tuple(grouped[Status.DISQUALIFIED]),
            ignored=tuple(grouped[Status.IGNORED]),
        )

    def buckets(self) -> dict[Status, tuple[Derivative, ...]]:
        return {
            Status.QUALIFIED: self.qualified,
            Status.DISQUALIFIED: self.disqualified,
            Status.IGNORED: self.ignored,
        }

    def symbols(self) -> list[str]:
        return [derivative.symbol for bucket in self.buckets().values() for derivative in bucket]

    def counts(self) -> dict[str, int]:
        return {status.value: len(bucket) for status, bucket in self.buckets().items()}


class Credentials(BaseModel):
    """Fyers API credentials. ``expiry == 0`` means the token never expires."""

    model_config = _WIRE_CONFIG

    client_id: str
    secret: str = Field(..., repr=False)
    redirect_url: str
    access_token: str = Field(..., repr=False)
    refresh_token: str = Field(default="", repr=False)
    expiry: int = Field(default=0, ge=0, description="Epoch nanoseconds, 0 for none.")

    def connection_status(self, now_ns: int) -> ConnectionStatus:
        if self.expiry == 0 or self.expiry > now_ns:
            return ConnectionStatus.CONNECTED
        return ConnectionStatus.EXPIRED


class IndexPerformance(BaseModel):
    """Percent change of a named index; ``change_percent`` is None when no quote was available."""

    model_config = _WIRE_CONFIG

    name: str
    change_percent: float | None = None


__all__ = [
    "Candle",
    "ConnectionStatus",
    "Credentials",
    "Derivative",
    "IndexPerformance",
    "Results",
    "Side",
    "Status",
]
