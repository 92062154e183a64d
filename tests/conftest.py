"""
Test configuration and fixtures for the link rotator.
Every test gets its own data/ and logs/ directories under tmp_path.
"""

import pytest
from fastapi.testclient import TestClient

from main import app
from rotator_app.cache.strategies import InMemoryCache
from rotator_app.config import Settings
from rotator_app.dependencies import get_cache, get_settings
from rotator_app.models.event import Event
from rotator_app.storage.event_store import EventStore
from rotator_app.storage.log_reader import LogReader


TEST_TOKEN = "test-dashboard-token"
FALLBACK = "https://fallback.example.com/a,https://fallback.example.com/b"


@pytest.fixture(scope="function")
def test_settings(tmp_path):
    """Isolated settings: temp directories, known token, no network lookups"""
    return Settings(
        data_dir=tmp_path / "data",
        logs_dir=tmp_path / "logs",
        rotator_token=TEST_TOKEN,
        fallback_urls=FALLBACK,
        geo_lookup_enabled=False,
        geo_cache_backend="memory",
        timezone="UTC",
        _env_file=None,
    )


@pytest.fixture(scope="function")
def client(test_settings):
    """
    Test client with settings and cache dependencies overridden.
    This is the main fixture that API tests use.
    """
    cache = InMemoryCache()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_cache] = lambda: cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "logs" / "redirections.log"


@pytest.fixture
def store(log_path):
    return EventStore(log_path)


@pytest.fixture
def reader(log_path):
    return LogReader(log_path)


def make_event(url="https://a.example.com", timestamp="2026-10-19T10:15:00+00:00", **fields) -> Event:
    return Event(timestamp=timestamp, url=url, **fields)
