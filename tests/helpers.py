"""Shared builders for route tests."""

from __future__ import annotations

from typing import Any

from eventhub import create_app
from tests.conftest import make_mock_db

ALICE = {"email": "alice@example.com", "uid": "uid-alice"}
BOB = {"email": "bob@example.com", "uid": "uid-bob"}


def build_app(db: Any = None, token_verifier: Any = None, **config: Any) -> Any:
    """Create a test app bound to ``db`` (a fresh mock store by default)."""
    if db is None:
        db = make_mock_db()
    test_config = {
        "TESTING": True,
        "STORE_CLIENT_FACTORY": lambda: db,
        "STORE_CONNECT_RETRIES": 1,
        "STORE_CONNECT_DELAY": 0,
        "TOKEN_VERIFIER": token_verifier,
    }
    test_config.update(config)
    return create_app(test_config)


def headers_for(user: dict[str, str]) -> dict[str, str]:
    """Fallback identity headers for ``user``."""
    return {"X-User-Email": user["email"], "X-User-UID": user["uid"]}
