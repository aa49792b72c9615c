from conftest import make_candles
from fnoscan.models import Derivative, Results, Side, Status
from fnoscan.scan.view import (
    ResultsView,
    SortDirection,
    SortKey,
    qualified_rows,
    sort_rows,
)


def _results() -> Results:
    return Results.from_derivatives([
        Derivative(symbol="TCS", status=Status.QUALIFIED, side=Side.LONG,
                   atm_oi_change=1.25, itm_oi_change=(2.0, 3.0),
                   candles=make_candles([(100, 110), (104, 112)])),
        Derivative(symbol="INFY", status=Status.QUALIFIED, side=Side.LONG,
                   candles=make_candles([(90, 95), (91, 99)])),
        Derivative(symbol="SBIN", status=Status.QUALIFIED, side=Side.SHORT,
                   candles=make_candles([(80, 90), (78, 85)])),
        Derivative(symbol="HDFC", status=Status.DISQUALIFIED, side=Side.LONG,
                   candles=make_candles([(100, 110), (95, 115)])),
    ])


def test_bull_rows_use_first_bar_low_and_day_low():
    rows = qualified_rows(_results(), ResultsView.BULL)

    assert [row.symbol for row in rows] == ["TCS", "INFY"]
    tcs = rows[0].to_dict()
    assert tcs["side"] == "Bull"
    assert tcs["sellerPov"] == "Put Options"
    assert tcs["first5min"] == 100
    assert tcs["dayLevel"] == 100
    assert tcs["atmOiChange"] == 1.25
    assert tcs["itmOiChange"] == [2.0, 3.0]


def test_bear_rows_use_first_bar_high_and_day_high():
    rows = qualified_rows(_results(), ResultsView.BEAR)

    assert [row.symbol for row in rows] == ["SBIN"]
    assert rows[0].side == "Bear"
    assert rows[0].seller_pov == "Call Options"
    assert rows[0].first_5min_level == 90
    assert rows[0].day_level == 90


def test_no_results_give_no_rows():
    assert qualified_rows(None, ResultsView.BULL) == []


def test_sort_rows_by_symbol_and_levels():
    rows = qualified_rows(_results(), ResultsView.BULL)

    assert [r.symbol for r in sort_rows(rows)] == ["INFY", "TCS"]
    assert [r.symbol for r in sort_rows(rows, SortKey.SYMBOL, SortDirection.DESC)] == ["TCS", "INFY"]
    assert [r.symbol for r in sort_rows(rows, SortKey.FIRST_5MIN)] == ["INFY", "TCS"]
    assert [r.symbol for r in sort_rows(rows, SortKey.DAY_LEVEL, SortDirection.DESC)] == ["TCS", "INFY"]


def test_sort_rows_puts_missing_levels_last_in_both_directions():
    rows = qualified_rows(_results(), ResultsView.BULL)
    rows[0].first_5min_level = None

    assert [r.symbol for r in sort_rows(rows, SortKey.FIRST_5MIN)] == ["INFY", "TCS"]
    assert [r.symbol for r in sort_rows(rows, SortKey.FIRST_5MIN, SortDirection.DESC)] == ["INFY", "TCS"]
