"""Shared test fixtures for the Services Assistant test suite."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta
from types import MappingProxyType
from unittest.mock import AsyncMock, MagicMock

import pytest


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    This runs before any imports, so config.py always sees a local,
    offline setup regardless of the developer's ``.env``.
    """
    os.environ["LLM_PROVIDER"] = "mock"
    os.environ["METRICS_ENABLED"] = "false"
    os.environ.setdefault("CATALOG_BASE_URL", "http://catalog.test/v1")


class FakeClock:
    """Manually advanced UTC clock for the conversation store."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 2, 17, 10, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_config():
    """Factory fixture for an assistant policy with test-friendly defaults."""
    from src.config import (
        DEFAULT_BLOCKED_PHRASES,
        DEFAULT_FALLBACK_RESPONSES,
        GuardrailPolicy,
        LlmConfig,
        ProviderType,
    )

    def _make(**overrides):
        values = {
            "provider": ProviderType.MOCK,
            "default_locale": "en",
            "supported_locales": ("en", "fr", "ar"),
            "fallback_responses": MappingProxyType(dict(DEFAULT_FALLBACK_RESPONSES)),
            "guardrails": GuardrailPolicy(blocked_phrases=DEFAULT_BLOCKED_PHRASES),
            "provider_timeout_seconds": 1.0,
        }
        values.update(overrides)
        return LlmConfig(**values)

    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def store(clock):
    from src.assistant.conversation_store import InMemoryConversationStore

    return InMemoryConversationStore(25, clock=clock)


@pytest.fixture
def provider():
    """A model provider whose three operations are AsyncMocks."""
    mock = MagicMock()
    mock.name = "fake"
    mock.chat = AsyncMock()
    mock.suggest_services = AsyncMock()
    mock.assist_document = AsyncMock()
    return mock
