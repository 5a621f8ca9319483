"""
tests/conftest.py -- Shared test fixtures for the foosball API tests.

This module provides:
  - engine / user_store / org_store: fresh in-memory database per test for
    unit tests of the stores and services
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient running the real FastAPI app against an isolated
    named shared-memory database
  - register_and_login(): helper that drives the public auth endpoints

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
api_client because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process.

The DEBUG env var must be set before any auth module import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.main import app
from auth.store import UserStore
from core.db import create_db_engine
from orgs.store import OrgStore

# ---------------------------------------------------------------------------
# Unit-test fixtures -- one private in-memory database per test
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory engine with the full schema created.

    SQLAlchemy pools :memory: SQLite per thread, so every statement in a
    single-threaded test sees the same database.
    """
    eng = create_db_engine("sqlite:///:memory:")
    yield eng
    eng.dispose()


@pytest.fixture
def user_store(engine: Engine) -> UserStore:
    return UserStore(engine)


@pytest.fixture
def org_store(engine: Engine) -> OrgStore:
    return OrgStore(engine)


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(engine: Engine):
    """Return an async context manager that replaces the real lifespan.

    Wires the test engine and stores into app.state so TestClient routes see
    an isolated test DB rather than the configured database.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = UserStore(engine)
        app.state.org_store = OrgStore(engine)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient for API integration tests.

    One client (and one database) per test module. Tests that need distinct
    users should pick unique usernames, since state is shared within the
    module.
    """
    db_url = f"sqlite:///file:test_api_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"
    eng = create_db_engine(db_url)

    app.router.lifespan_context = _patch_lifespan(eng)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    eng.dispose()


def register_and_login(client: TestClient, username: str, password: str) -> tuple[int, str]:
    """Register a user through the API, log in, and return (userid, token)."""
    resp = client.post("/api/v1/auth/register", json={"username": username, "password": password})
    assert resp.status_code == 201, resp.text
    user_id = resp.json()["userid"]
    resp = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return user_id, resp.json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
