import pytest

from fnoscan.data.stores import MemoryKeyValueStore
from fnoscan.data.universe import normalize_symbols, parse_symbol_text
from fnoscan.errors import EmptyUniverse
from fnoscan.state import SymbolUniverseStore


def test_normalize_symbols_trims_drops_blanks_and_dedupes_in_order():
    assert normalize_symbols(["  NIFTY\n", "", "TCS", "TCS"]) == ["NIFTY", "TCS"]


def test_normalize_symbols_keeps_first_seen_order():
    assert normalize_symbols(["TCS", " INFY", "SBIN ", "INFY", "TCS"]) == ["TCS", "INFY", "SBIN"]


def test_parse_symbol_text_splits_lines():
    text = "NIFTY\r\nBANKNIFTY\n\n  RELIANCE  \nNIFTY\n"

    assert parse_symbol_text(text) == ["NIFTY", "BANKNIFTY", "RELIANCE"]


def test_universe_is_absent_until_saved():
    store = SymbolUniverseStore(MemoryKeyValueStore())

    assert store.list() is None


def test_save_stores_normalized_universe():
    store = SymbolUniverseStore(MemoryKeyValueStore())

    saved = store.save(["  NIFTY\n", "", "TCS", "TCS"])

    assert saved == ["NIFTY", "TCS"]
    assert store.list() == ["NIFTY", "TCS"]


def test_save_replaces_wholesale():
    store = SymbolUniverseStore(MemoryKeyValueStore())
    store.save(["NIFTY", "TCS"])

    store.save(["SBIN"])

    assert store.list() == ["SBIN"]


@pytest.mark.parametrize("symbols", [[], ["", "   ", "\n"]])
def test_save_rejects_empty_universe(symbols):
    store = SymbolUniverseStore(MemoryKeyValueStore())
    store.save(["TCS"])

    with pytest.raises(EmptyUniverse):
        store.save(symbols)

    assert store.list() == ["TCS"]
