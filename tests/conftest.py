"""Shared pytest fixtures for all test suites."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from backend.mdspace.db.inmemory import InMemoryMarkdownStore, InMemoryRateLimiter
from backend.mdspace.db.store import get_rate_limiter, get_store
from backend.mdspace.main import app


@pytest.fixture
def store() -> InMemoryMarkdownStore:
    """Fresh in-memory markdown store per test."""
    return InMemoryMarkdownStore()


@pytest.fixture
def limiter() -> InMemoryRateLimiter:
    """Write limiter generous enough never to throttle a normal test."""
    return InMemoryRateLimiter(max_requests=1000, window_seconds=60)


@pytest.fixture
def client(store: InMemoryMarkdownStore, limiter: InMemoryRateLimiter) -> Generator[TestClient, None, None]:
    """Test client wired to the per-test store and limiter.

    Each TestClient keeps its own cookie jar, so one client is one session.
    """
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def other_client(client: TestClient) -> Generator[TestClient, None, None]:
    """Second session against the same store."""
    with TestClient(app) as test_client:
        yield test_client
