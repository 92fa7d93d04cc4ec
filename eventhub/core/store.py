"""Supervised access to the Firestore client.

A single :class:`StoreGuard` is built by the application factory and shared by
every request. It connects with exponential backoff at startup, probes the
store before each data-touching request and makes one immediate reconnect
attempt when the probe fails. While the store is unreachable requests are
answered with a 503 instead of reaching the route.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import TYPE_CHECKING, Any, Callable

from flask import current_app, g, request

from eventhub.constants import (
    STORE_BACKOFF_FACTOR,
    STORE_CONNECT_DELAY,
    STORE_CONNECT_RETRIES,
    STORE_PING_TIMEOUT,
    USERS_COLLECTION,
)
from eventhub.errors import ServiceUnavailableError

if TYPE_CHECKING:
    from flask import Flask
    from google.cloud.firestore_v1.client import Client

# Endpoints served without touching the store
EXEMPT_ENDPOINTS = {"static", "main.index", "main.health"}


class ConnectionState(enum.Enum):
    """Lifecycle of the store connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DEGRADED = "degraded"


class StoreGuard:
    """Own the Firestore client and gate access to it."""

    def __init__(
        self,
        client_factory: Callable[[], Client],
        retries: int = STORE_CONNECT_RETRIES,
        delay: float = STORE_CONNECT_DELAY,
        backoff: float = STORE_BACKOFF_FACTOR,
        sleep: Callable[[float], None] = time.sleep,
        ping_timeout: float = STORE_PING_TIMEOUT,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client_factory = client_factory
        self._retries = retries
        self._delay = delay
        self._backoff = backoff
        self._sleep = sleep
        self._ping_timeout = ping_timeout
        self.logger = logger or logging.getLogger("eventhub")
        self._client: Client | None = None
        self.state = ConnectionState.DISCONNECTED

    @property
    def client(self) -> Client | None:
        """Return the current client, if any."""
        return self._client

    def connect(self) -> bool:
        """Connect at startup, retrying with a growing delay."""
        delay = self._delay
        for attempt in range(1, self._retries + 1):
            self.logger.info(
                f"Attempting to connect to Firestore... "
                f"(Attempt {attempt}/{self._retries})"
            )
            if self._attempt():
                return True
            if attempt < self._retries:
                self.logger.info(f"Retrying in {delay:.1f}s...")
                self._sleep(delay)
                delay *= self._backoff

        self.logger.error("Failed to connect to Firestore after all retries")
        self.state = ConnectionState.DISCONNECTED
        return False

    def reconnect(self) -> bool:
        """Make a single immediate connection attempt."""
        self.logger.info("Attempting to reconnect to Firestore...")
        if self._attempt():
            return True
        self.state = ConnectionState.DEGRADED
        return False

    def ping(self) -> bool:
        """Issue a one-document read against the current client."""
        if self._client is None:
            return False
        try:
            self._probe(self._client, self._ping_timeout)
        except Exception as e:
            self.logger.warning(f"Firestore ping failed: {e}")
            return False
        return True

    def mark_degraded(self) -> None:
        """Flag the connection as suspect after a failed store call."""
        if self.state is ConnectionState.CONNECTED:
            self.state = ConnectionState.DEGRADED

    def acquire(self) -> Client:
        """Return a live client or raise ``ServiceUnavailableError``."""
        if self.state is ConnectionState.CONNECTED and self.ping():
            return self._client  # type: ignore[return-value]

        self.state = ConnectionState.DEGRADED
        if self.reconnect():
            return self._client  # type: ignore[return-value]

        raise ServiceUnavailableError(
            "Database connection not available",
            {
                "message": "Unable to connect to database. "
                "Please try again later or contact support.",
            },
        )

    def _attempt(self) -> bool:
        self.state = ConnectionState.CONNECTING
        try:
            client = self._client_factory()
            self._probe(client, self._ping_timeout)
        except Exception as e:
            self.logger.error(f"Firestore connection attempt failed: {e}")
            self.state = ConnectionState.DISCONNECTED
            return False

        self._client = client
        self.state = ConnectionState.CONNECTED
        self.logger.info("Connected to Firestore")
        return True

    @staticmethod
    def _probe(client: Any, timeout: float) -> None:
        # No client-side retry so an unreachable backend fails within timeout
        query = client.collection(USERS_COLLECTION).limit(1)
        list(query.stream(retry=None, timeout=timeout))


def get_db() -> Client:
    """Return the client acquired for the current request."""
    if "db" not in g:
        g.db = current_app.extensions["store"].acquire()
    return g.db


def guard_request() -> None:
    """Acquire the store before any data-touching endpoint runs."""
    if request.method == "OPTIONS":
        return
    if request.endpoint is None or request.endpoint in EXEMPT_ENDPOINTS:
        return
    get_db()


def init_app(app: Flask) -> StoreGuard:
    """Build the guard, connect it and register the request hook."""
    guard = StoreGuard(
        app.config["STORE_CLIENT_FACTORY"],
        retries=app.config["STORE_CONNECT_RETRIES"],
        delay=app.config["STORE_CONNECT_DELAY"],
        backoff=app.config["STORE_BACKOFF_FACTOR"],
        ping_timeout=app.config["STORE_PING_TIMEOUT"],
        logger=app.logger,
    )
    app.extensions["store"] = guard

    if not guard.connect():
        app.logger.warning(
            "Server running without database connection. "
            "Data endpoints will return 503 until it recovers."
        )

    app.before_request(guard_request)
    return guard
