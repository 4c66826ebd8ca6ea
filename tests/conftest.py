"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_store
from catalog.seed import seed_books
from catalog.store import CatalogStore


FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    """The instant returned by the store clock in tests."""
    return FIXED_NOW


@pytest.fixture
def store():
    """Create a fresh store holding the starter catalog."""
    return CatalogStore(books=seed_books(), clock=lambda: FIXED_NOW)


@pytest.fixture
def empty_store():
    """Create a store with no books."""
    return CatalogStore(clock=lambda: FIXED_NOW)


@pytest.fixture
def client(store):
    """Create test client bound to the per-test store."""
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
