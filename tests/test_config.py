"""Tests for assistant configuration loading and validation."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from src.config import (
    DEFAULT_BLOCKED_PHRASES,
    DEFAULT_FALLBACK_RESPONSES,
    ConfigurationError,
    ProviderType,
    load_llm_config,
)
from src.providers import create_provider
from src.providers.mock import MockProvider


def _load(**env: str):
    with patch.dict("os.environ", env, clear=False):
        return load_llm_config()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "LLM_PROVIDER",
        "LLM_DEFAULT_LOCALE",
        "APP_DEFAULT_LOCALE",
        "LLM_SUPPORTED_LOCALES",
        "LLM_GUARDRAILS_BLOCKED",
        "LLM_MAX_PROMPT_LENGTH",
        "LLM_MAX_CONTEXT_MESSAGES",
        "LLM_PROVIDER_TIMEOUT_SECONDS",
        "LLM_PROVIDER_MAX_RETRIES",
        "LLM_CONVERSATION_TTL_SECONDS",
        "ANTHROPIC_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadLlmConfig:
    def test_defaults(self):
        config = load_llm_config()
        assert config.provider is ProviderType.MOCK
        assert config.default_locale == "en"
        assert config.supported_locales == ("en", "fr", "ar")
        assert config.guardrails.max_prompt_length == 1200
        assert config.guardrails.blocked_phrases == DEFAULT_BLOCKED_PHRASES
        assert config.max_context_messages == 25
        assert config.provider_max_retries == 0

    def test_default_locale_is_always_supported(self):
        config = _load(LLM_DEFAULT_LOCALE="FR", LLM_SUPPORTED_LOCALES="en, ar,en")
        assert config.default_locale == "fr"
        assert config.supported_locales == ("fr", "en", "ar")

    def test_custom_blocked_phrases_are_lower_cased(self):
        config = _load(LLM_GUARDRAILS_BLOCKED="Reveal Secrets, jailbreak ,")
        assert config.guardrails.blocked_phrases == frozenset({"reveal secrets", "jailbreak"})

    def test_unparseable_integer_keeps_default(self):
        config = _load(LLM_MAX_PROMPT_LENGTH="lots")
        assert config.guardrails.max_prompt_length == 1200

    def test_unknown_locale_reuses_english_fallbacks(self):
        config = _load(LLM_SUPPORTED_LOCALES="en,es")
        assert config.fallback_for("es") == DEFAULT_FALLBACK_RESPONSES["en"]

    def test_fallback_for_unsupported_locale_uses_default(self):
        config = _load(LLM_DEFAULT_LOCALE="fr")
        assert config.fallback_for("de") == DEFAULT_FALLBACK_RESPONSES["fr"]


class TestConfigurationErrors:
    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown LLM_PROVIDER"):
            _load(LLM_PROVIDER="openai")

    @pytest.mark.parametrize(
        "name",
        ["LLM_MAX_PROMPT_LENGTH", "LLM_MAX_CONTEXT_MESSAGES", "LLM_CONVERSATION_TTL_SECONDS"],
    )
    def test_non_positive_limits(self, name):
        with pytest.raises(ConfigurationError, match=name):
            _load(**{name: "0"})

    def test_negative_retries(self):
        with pytest.raises(ConfigurationError, match="LLM_PROVIDER_MAX_RETRIES"):
            _load(LLM_PROVIDER_MAX_RETRIES="-1")

    def test_anthropic_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY"):
            _load(LLM_PROVIDER="anthropic")


class TestCreateProvider:
    def test_mock_provider(self):
        assert isinstance(create_provider(load_llm_config()), MockProvider)

    def test_anthropic_provider(self):
        config = _load(LLM_PROVIDER="anthropic", ANTHROPIC_API_KEY="sk-test")
        with patch("src.providers.anthropic._build_llm") as mock_build:
            provider = create_provider(config)
        assert provider.name == "anthropic"
        mock_build.assert_called_once_with("sk-test", config.model_name)
