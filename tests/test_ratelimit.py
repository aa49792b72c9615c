import pytest

from conftest import FakeClock
from fnoscan.errors import RateLimited
from fnoscan.scan.ratelimit import ScanRateLimiter


def test_first_run_is_admitted(clock):
    limiter = ScanRateLimiter(60, clock=clock)

    with limiter.admit():
        pass

    assert limiter.remaining() == pytest.approx(60)


def test_second_run_within_cooldown_reports_remaining_wait(clock):
    limiter = ScanRateLimiter(60, clock=clock)
    with limiter.admit():
        pass
    clock.advance(15)

    with pytest.raises(RateLimited) as excinfo:
        limiter.acquire()

    assert excinfo.value.retry_after_seconds == pytest.approx(45)
    assert "Rate limit" in str(excinfo.value)
    assert "45 seconds" in str(excinfo.value)


def test_run_is_admitted_after_cooldown(clock):
    limiter = ScanRateLimiter(60, clock=clock)
    with limiter.admit():
        pass
    clock.advance(60)

    with limiter.admit():
        pass


def test_in_flight_run_blocks_even_without_cooldown(clock):
    limiter = ScanRateLimiter(0, clock=clock)
    limiter.acquire()

    with pytest.raises(RateLimited) as excinfo:
        limiter.acquire()

    assert excinfo.value.in_progress
    assert "Rate limit" in str(excinfo.value)

    limiter.release()
    limiter.acquire()


def test_failed_run_still_releases_and_counts_toward_cooldown(clock):
    limiter = ScanRateLimiter(30, clock=clock)

    with pytest.raises(RuntimeError):
        with limiter.admit():
            raise RuntimeError("boom")

    with pytest.raises(RateLimited) as excinfo:
        limiter.acquire()
    assert not excinfo.value.in_progress


def test_negative_cooldown_is_rejected():
    with pytest.raises(ValueError):
        ScanRateLimiter(-1, clock=FakeClock())
