from conftest import DummySession, FakeMarketData, make_credentials
from fnoscan.data.indices import (
    DEFAULT_INDEX_NAMES,
    IndexPerformanceService,
    display_name,
    sort_by_change,
)
from fnoscan.data.providers.fyers import FyersMarketDataClient
from fnoscan.data.stores import MemoryKeyValueStore
from fnoscan.errors import MarketDataFetchError
from fnoscan.models import IndexPerformance
from fnoscan.state import CredentialStore

BASE_URL = "https://api-t1.fyers.in"


def _service(clock, quotes) -> IndexPerformanceService:
    credentials = CredentialStore(MemoryKeyValueStore(), clock=clock)
    credentials.save(make_credentials())
    return IndexPerformanceService(credentials, quotes)


def test_returns_one_entry_per_name_in_request_order(clock):
    quotes = FakeMarketData(index_changes={"BANKNIFTY": -0.5, "NIFTY50": 0.0})
    service = _service(clock, quotes)

    entries = service.fetch(["NIFTY50", "SENSEX", "BANKNIFTY"])

    assert [entry.name for entry in entries] == ["NIFTY50", "SENSEX", "BANKNIFTY"]
    assert [entry.change_percent for entry in entries] == [0.0, None, -0.5]


def test_quote_failure_yields_absent_changes_not_an_error(clock):
    service = _service(clock, FakeMarketData(index_changes=MarketDataFetchError("indices", "503")))

    entries = service.fetch(["NIFTY50", "NIFTYIT"])

    assert entries == [
        IndexPerformance(name="NIFTY50"),
        IndexPerformance(name="NIFTYIT"),
    ]


def test_without_connection_no_quote_request_is_made(clock):
    quotes = FakeMarketData(index_changes={"NIFTY50": 1.0})
    service = IndexPerformanceService(CredentialStore(MemoryKeyValueStore(), clock=clock), quotes)

    entries = service.fetch(["NIFTY50"])

    assert entries == [IndexPerformance(name="NIFTY50", change_percent=None)]
    assert quotes.index_calls == []


def test_sort_by_change_puts_unavailable_last():
    entries = [
        IndexPerformance(name="A", change_percent=-1.0),
        IndexPerformance(name="B"),
        IndexPerformance(name="C", change_percent=2.0),
        IndexPerformance(name="D", change_percent=0.0),
    ]

    assert [entry.name for entry in sort_by_change(entries)] == ["C", "D", "A", "B"]


def test_default_index_names_have_display_names():
    assert len(DEFAULT_INDEX_NAMES) == 14
    assert display_name("NIFTYPSUBANK") == "Nifty PSU Bank"
    assert display_name("UNKNOWN") == "UNKNOWN"


def test_blank_index_name_yields_absent_change(clock):
    session = DummySession({
        f"{BASE_URL}/data/quotes": {
            "s": "ok",
            "d": [{"n": "NSE:NIFTY50-INDEX", "s": "ok", "v": {"chp": 1.5}}],
        },
    })
    client = FyersMarketDataClient(session=session, rate_limit_per_minute=0)

    entries = _service(clock, client).fetch(["NIFTY50", ""])

    assert [entry.name for entry in entries] == ["NIFTY50", ""]
    assert [entry.change_percent for entry in entries] == [1.5, None]
