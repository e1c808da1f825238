"""Fixtures for API route tests: wired services with mocked Redis and model."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from askdb.api.main import app, app_state
from askdb.config import Settings
from askdb.services import build_services


@pytest.fixture
def counter():
    """Redis stand-in; ``incr`` returns 1 unless a test says otherwise."""
    counter = MagicMock()
    counter.incr = AsyncMock(return_value=1)
    counter.expire = AsyncMock(return_value=True)
    counter.delete = AsyncMock(return_value=1)
    counter.get = AsyncMock(return_value=None)
    counter.ttl = AsyncMock(return_value=-2)
    counter.aclose = AsyncMock()
    return counter


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("QUOTA_RESET_PASSWORD", "s3cret")
    return Settings()


@pytest.fixture
def services(settings, counter, mock_provider):
    services = build_services(settings, counter=counter, provider=mock_provider)
    services.titles.request = MagicMock(return_value=True)
    original_state = app_state.copy()
    app_state["services"] = services
    yield services
    app_state.update(original_state)


@pytest.fixture
def client(services):
    """Test client (lifespan not run; services come from the fixture)."""
    return TestClient(app)
