import pandas as pd
import pytest

from fnoscan.clock import NANOS_PER_SECOND
from fnoscan.data.schemas import CANDLE_COLUMNS, CandleFrame


def test_from_rows_sorts_and_converts_to_nanoseconds():
    df = CandleFrame.from_rows([
        [1718010900, 101.0, 103.0, 100.5, 102.0, 500],
        [1718010600, 100.0, 102.0, 99.0, 101.0, 700],
    ])

    assert list(df.columns) == list(CANDLE_COLUMNS)
    assert df["time"].tolist() == [1718010600 * NANOS_PER_SECOND, 1718010900 * NANOS_PER_SECOND]

    candles = CandleFrame.to_candles(df)
    assert candles[0].open == pytest.approx(100.0)
    assert candles[1].volume == pytest.approx(500)


def test_rows_without_volume_default_to_zero():
    candles = CandleFrame.to_candles(CandleFrame.from_rows([[1718010600, 1.0, 2.0, 0.5, 1.5]]))

    assert candles[0].volume == 0.0


def test_empty_rows_give_no_candles():
    assert CandleFrame.to_candles(CandleFrame.from_rows([])) == []


def test_unknown_time_unit_is_rejected():
    with pytest.raises(ValueError):
        CandleFrame.from_rows([[1, 1.0, 1.0, 1.0, 1.0, 1]], time_unit="hours")


def test_ensure_schema_rejects_missing_columns():
    with pytest.raises(ValueError):
        CandleFrame.ensure_schema(pd.DataFrame({"time": [1]}))
