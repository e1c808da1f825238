"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging
from unittest.mock import AsyncMock

import pytest
from fakeredis import aioredis as fake_aioredis

from askdb.llm.base import BaseLLMProvider
from askdb.llm.models import LLMResponse
from askdb.models.schema import Column, Table
from askdb.quota.limiter import RateLimiter

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires Redis, PostgreSQL or an API key)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled (use --run-integration to enable)."
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """
    Capture logs at DEBUG and undo any global disable (the CLI silences
    logging for its own process).
    """
    caplog.set_level(logging.DEBUG)
    yield
    logging.disable(logging.NOTSET)


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def mock_openai_api_key(monkeypatch):
    """
    Provide a fake OpenAI key and keep .env files out of the way.

    Runs automatically for all tests.
    """
    from askdb.config import clear_settings_cache

    clear_settings_cache()
    monkeypatch.setenv("ASKDB_ENV_SOURCE", "process")
    test_key = "sk-test-key-1234567890-abcdefghijklmnop"
    monkeypatch.setenv("LLM_OPENAI_API_KEY", test_key)
    yield test_key
    clear_settings_cache()


# ============================================================================
# Model Provider and Quota
# ============================================================================


def make_llm_response(content: str) -> LLMResponse:
    return LLMResponse(content=content, model="gpt-4.1", finish_reason="stop", provider="openai")


@pytest.fixture
def llm_response():
    """Factory for provider responses."""
    return make_llm_response


@pytest.fixture
def mock_provider():
    """
    Model provider whose ``generate`` is an AsyncMock.

    Usage:
        mock_provider.generate.return_value = llm_response("SELECT 1")
    """
    provider = AsyncMock(spec=BaseLLMProvider)
    provider.generate.return_value = make_llm_response("SELECT 1")
    return provider


@pytest.fixture
def fake_redis():
    """In-memory async Redis client (bound to the running test's loop on first use)."""
    return fake_aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def rate_limiter(fake_redis):
    return RateLimiter(fake_redis, limit=100, window_seconds=86400)


# ============================================================================
# Common Test Data
# ============================================================================


@pytest.fixture
def sample_schema() -> list[Table]:
    return [
        Table(
            name="users",
            columns=[Column(name="id", type="integer"), Column(name="name", type="text")],
        ),
        Table(
            name="orders.2024",
            columns=[Column(name="id", type="integer"), Column(name="total", type="numeric")],
        ),
    ]
