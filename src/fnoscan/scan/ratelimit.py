"""Admission control for scan runs."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from ..clock import Clock, SystemClock
from ..errors import RateLimited

logger = logging.getLogger(__name__)


class ScanRateLimiter:
    """Admit at most one scan at a time, spaced by a cooldown measured from run start."""

    def __init__(self, cooldown_seconds: float, *, clock: Clock | None = None) -> None:
        if cooldown_seconds < 0:
            raise ValueError("cooldown_seconds cannot be negative")
        self.cooldown_seconds = float(cooldown_seconds)
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._in_flight = False
        self._last_started: float | None = None

    def remaining(self) -> float:
        """Seconds until the cooldown allows another run (0 when it already does)."""

        with self._lock:
            return self._remaining_locked(self._clock.monotonic())

    def _remaining_locked(self, now: float) -> float:
        if self._last_started is None:
            return 0.0
        return max(0.0, self.cooldown_seconds - (now - self._last_started))

    def acquire(self) -> None:
        with self._lock:
            now = self._clock.monotonic()
            remaining = self._remaining_locked(now)
            if self._in_flight:
                logger.info("Rejected scan: another scan is in progress")
                raise RateLimited(remaining, in_progress=True)
            if remaining > 0:
                logger.info("Rejected scan: cooldown has %.1fs remaining", remaining)
                raise RateLimited(remaining)
            self._in_flight = True
            self._last_started = now

    def release(self) -> None:
        with self._lock:
            self._in_flight = False

    @contextmanager
    def admit(self) -> Iterator[None]:
        self.acquire()
        try:
            yield
        finally:
            self.release()
