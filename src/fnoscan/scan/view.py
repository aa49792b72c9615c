"""Bull/bear result rows as shown on the dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Dict, Iterable, List

from ..models import Derivative, Results, Side


class ResultsView(str, Enum):
    BULL = "bull"
    BEAR = "bear"

    @property
    def side(self) -> Side:
        return Side.LONG if self is ResultsView.BULL else Side.SHORT


class SortKey(str, Enum):
    SYMBOL = "symbol"
    FIRST_5MIN = "first5min"
    DAY_LEVEL = "dayLevel"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


_SIDE_LABELS = {Side.LONG: "Bull", Side.SHORT: "Bear"}
_SELLER_POV_LABELS = {Side.LONG: "Put Options", Side.SHORT: "Call Options"}


def side_label(side: Side) -> str:
    return _SIDE_LABELS[side]


def seller_pov_label(side: Side) -> str:
    """Option type a premium seller writes on this side."""

    return _SELLER_POV_LABELS[side]


def first_bar_level(derivative: Derivative, view: ResultsView) -> float | None:
    if not derivative.candles:
        return None
    first = derivative.candles[0]
    return first.low if view is ResultsView.BULL else first.high


def day_level(derivative: Derivative, view: ResultsView) -> float | None:
    if not derivative.candles:
        return None
    if view is ResultsView.BULL:
        return min(candle.low for candle in derivative.candles)
    return max(candle.high for candle in derivative.candles)


@dataclass(slots=True)
class DerivativeRow:
    symbol: str
    status: str
    side: str
    seller_pov: str
    first_5min_level: float | None
    day_level: float | None
    atm_oi_change: float | None
    itm_oi_change: List[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "status": self.status,
            "side": self.side,
            "sellerPov": self.seller_pov,
            "first5min": self.first_5min_level,
            "dayLevel": self.day_level,
            "atmOiChange": self.atm_oi_change,
            "itmOiChange": list(self.itm_oi_change),
        }


def build_row(derivative: Derivative, view: ResultsView) -> DerivativeRow:
    return DerivativeRow(
        symbol=derivative.symbol,
        status=derivative.status.value,
        side=side_label(derivative.side),
        seller_pov=seller_pov_label(derivative.side),
        first_5min_level=first_bar_level(derivative, view),
        day_level=day_level(derivative, view),
        atm_oi_change=derivative.atm_oi_change,
        itm_oi_change=list(derivative.itm_oi_change),
    )


def qualified_rows(results: Results | None, view: ResultsView) -> List[DerivativeRow]:
    """Qualified derivatives on the view's side, in scan order."""

    if results is None:
        return []
    return [
        build_row(derivative, view)
        for derivative in results.qualified
        if derivative.side is view.side
    ]


def sort_rows(
    rows: Iterable[DerivativeRow],
    key: SortKey = SortKey.SYMBOL,
    direction: SortDirection = SortDirection.ASC,
) -> List[DerivativeRow]:
    """Sort rows on one column; rows without a level go last in either direction."""

    reverse = direction is SortDirection.DESC
    if key is SortKey.SYMBOL:
        return sorted(rows, key=lambda row: row.symbol, reverse=reverse)
    level = attrgetter("first_5min_level" if key is SortKey.FIRST_5MIN else "day_level")
    rows = list(rows)
    present = sorted((row for row in rows if level(row) is not None), key=level, reverse=reverse)
    return present + [row for row in rows if level(row) is None]
