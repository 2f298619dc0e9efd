"""
Test configuration and fixtures for the shortlink service.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from shortlink_app.cache.strategies import InMemoryCache
from shortlink_app.config import settings
from shortlink_app.database.connection import Base, build_engine, build_session_factory
from shortlink_app.dependencies import get_cache, get_listing_cache, get_store
from shortlink_app.storage.strategies import SQLAlchemyMappingStore


@pytest.fixture(scope="function")
def session_factory(tmp_path):
    """
    Fresh SQLite file database per test.

    A file (not :memory:) so worker threads each get their own connection.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)

    try:
        yield build_session_factory(engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def store(session_factory):
    return SQLAlchemyMappingStore(session_factory, timeout=5.0)


@pytest.fixture(scope="function")
def cache():
    return InMemoryCache(ttl=300, maxsize=100)


@pytest.fixture(scope="function")
def listing_cache():
    return InMemoryCache(ttl=10, maxsize=1)


@pytest.fixture(scope="function")
def client(store, cache, listing_cache):
    """
    Create a test client with store and caches overridden.
    This is the main fixture that API tests will use.
    """
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_listing_cache] = lambda: listing_cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_headers(client):
    response = client.post("/api/admin/login", json={"password": settings.admin_secret})
    token = response.json()["token"]
    return {"Authorization": f"Bearer {token}"}


class FakeClock:
    """Manually advanced clock for TTL tests"""

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="function")
def clock():
    return FakeClock()
