"""Opening-range bull/bear qualification.

A session qualifies as bull when the opening bar's low is never undercut for the
rest of the session, and as bear when the opening bar's high is never exceeded.
Comparisons are exact on the stored prices; there is no tolerance band.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..data.providers.base import OptionChain, OptionType
from ..models import Candle, Side, Status

_SELLER_OPTION_TYPE = {
    Side.LONG: OptionType.PUT,
    Side.SHORT: OptionType.CALL,
}


@dataclass(slots=True, frozen=True)
class Qualification:
    status: Status
    side: Side


def classify(candles: Sequence[Candle]) -> Qualification:
    """Classify one symbol's chronological session candles.

    * no candles: ``ignored`` / ``long``
    * first low is the day low: ``qualified`` / ``long`` (wins when both pass)
    * first high is the day high: ``qualified`` / ``short``
    * neither: ``disqualified``, side of the test that missed by the smaller
      price distance, ``long`` on a tie
    """

    if not candles:
        return Qualification(Status.IGNORED, Side.LONG)

    first = candles[0]
    day_low = min(candle.low for candle in candles)
    day_high = max(candle.high for candle in candles)

    if first.low == day_low:
        return Qualification(Status.QUALIFIED, Side.LONG)
    if first.high == day_high:
        return Qualification(Status.QUALIFIED, Side.SHORT)

    bull_miss = first.low - day_low
    bear_miss = day_high - first.high
    side = Side.LONG if bull_miss <= bear_miss else Side.SHORT
    return Qualification(Status.DISQUALIFIED, side)


def summarize_open_interest(
    chain: OptionChain | None,
    side: Side,
    *,
    itm_count: int = 2,
) -> tuple[float | None, tuple[float, ...]]:
    """Return ``(atm_oi_change, itm_oi_changes)`` for the option a seller writes on ``side``.

    Puts are used for the bull side and calls for the bear side. ITM strikes are
    ordered nearest to the underlying first; strikes without an OI change figure
    are skipped.
    """

    if chain is None:
        return None, ()

    option_type = _SELLER_OPTION_TYPE[side]
    by_strike = {
        quote.strike: quote.oi_change_percent
        for quote in chain.quotes
        if quote.option_type is option_type
    }
    if not by_strike:
        return None, ()

    price = chain.underlying_price
    atm_strike = min(by_strike, key=lambda strike: (abs(strike - price), strike))
    if option_type is OptionType.PUT:
        itm_strikes = sorted(strike for strike in by_strike if strike > price)
    else:
        itm_strikes = sorted((strike for strike in by_strike if strike < price), reverse=True)

    itm_changes = [
        by_strike[strike]
        for strike in itm_strikes
        if strike != atm_strike and by_strike[strike] is not None
    ]
    return by_strike[atm_strike], tuple(itm_changes[:max(itm_count, 0)])


__all__ = ["Qualification", "classify", "summarize_open_interest"]
