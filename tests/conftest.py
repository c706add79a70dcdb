"""
tests/conftest.py -- Shared test fixtures for Chirpy.

This module provides:
  - settings: Settings with a fixed 32-char secret and bcrypt cost 4 (fast)
  - user_store / chirp_store: per-test in-memory SQLite stores
  - sessions: SessionService wired to user_store
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: module-scoped TestClient for HTTP integration tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
the TestClient because it runs sync route handlers in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. Unit-test fixtures run in one thread and can use :memory:.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import asynccontextmanager
from itertools import count

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from api.main import app
from api.metrics import HitCounter
from auth.sessions import SessionService
from auth.store import UserStore
from chirps.store import ChirpStore
from core.config import Settings

TEST_SECRET = "f1d9cffa3564f3d1e75027ec2805382a"

_db_counter = count()


def make_settings(**overrides) -> Settings:
    values = {
        "secret_key": SecretStr(TEST_SECRET),
        "bcrypt_rounds": 4,
        "platform": "dev",
        "database_url": "sqlite:///:memory:",
    }
    values.update(overrides)
    return Settings(**values)


# ---------------------------------------------------------------------------
# Unit fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def chirp_store() -> Generator[ChirpStore, None, None]:
    store = ChirpStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def sessions(user_store: UserStore, settings: Settings) -> SessionService:
    return SessionService.from_settings(user_store, settings)


# ---------------------------------------------------------------------------
# Integration fixtures
# ---------------------------------------------------------------------------


def _shared_memory_url() -> str:
    """Unique named shared-memory DB so test modules never share state."""
    return f"sqlite:///file:test_chirpy_{next(_db_counter)}?mode=memory&cache=shared&uri=true"


def _patch_lifespan(settings: Settings, user_store: UserStore, chirp_store: ChirpStore):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test stores and settings into app.state so TestClient
    routes see isolated test DBs rather than whatever DATABASE_URL points at.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.user_store = user_store
        app.state.chirp_store = chirp_store
        app.state.sessions = SessionService.from_settings(user_store, settings)
        app.state.metrics = HitCounter()
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client() -> Generator[TestClient, None, None]:
    """Yield a TestClient running the real app against fresh in-memory stores.

    The app runs on the dev platform so /admin/reset is enabled.
    """
    db_url = _shared_memory_url()
    settings = make_settings(database_url=db_url)
    user_store = UserStore(db_url)
    chirp_store = ChirpStore(db_url)

    app.router.lifespan_context = _patch_lifespan(settings, user_store, chirp_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    chirp_store.close()
    user_store.close()


@pytest.fixture(scope="module")
def prod_client() -> Generator[TestClient, None, None]:
    """Like api_client, but with platform=prod."""
    db_url = _shared_memory_url()
    settings = make_settings(database_url=db_url, platform="prod")
    user_store = UserStore(db_url)
    chirp_store = ChirpStore(db_url)

    app.router.lifespan_context = _patch_lifespan(settings, user_store, chirp_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    chirp_store.close()
    user_store.close()
