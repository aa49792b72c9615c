"""Broker credential storage and derived connection status."""

from __future__ import annotations

import logging

from ..clock import Clock, SystemClock
from ..data.stores import KeyValueStore
from ..models import ConnectionStatus, Credentials

logger = logging.getLogger(__name__)

CREDENTIALS_KEY = "credentials"


class CredentialStore:
    """Hold the single Fyers credential record.

    Connection status is computed on every query from the stored expiry and the
    injected clock, so a token silently moves from ``CONNECTED`` to ``EXPIRED``
    once wall-clock time reaches its expiry.
    """

    def __init__(self, store: KeyValueStore, *, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()

    def save(self, credentials: Credentials) -> ConnectionStatus:
        self._store.put(CREDENTIALS_KEY, credentials.model_dump(mode="json"))
        status = credentials.connection_status(self._clock.now_ns())
        logger.info("Saved Fyers credentials for client %s (%s)",
                    credentials.client_id, status.value)
        return status

    def clear(self) -> None:
        self._store.delete(CREDENTIALS_KEY)
        logger.info("Cleared Fyers credentials")

    def current(self) -> Credentials | None:
        payload = self._store.get(CREDENTIALS_KEY)
        if payload is None:
            return None
        return Credentials.model_validate(payload)

    def status(self) -> ConnectionStatus:
        credentials = self.current()
        if credentials is None:
            return ConnectionStatus.NOT_CONNECTED
        return credentials.connection_status(self._clock.now_ns())
