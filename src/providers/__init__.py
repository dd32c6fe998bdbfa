"""Language-model providers and the start-up factory that picks one."""

from __future__ import annotations

import logging

from src.config import ConfigurationError, LlmConfig, ProviderType
from src.providers.base import ModelProvider, ProviderError
from src.providers.mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = ["ModelProvider", "ProviderError", "create_provider"]


def create_provider(config: LlmConfig) -> ModelProvider:
    """Instantiate the provider selected by ``config.provider``.

    Called once during start-up; the choice is fixed for the process.
    """
    if config.provider is ProviderType.MOCK:
        logger.info("Using the offline mock language-model provider")
        return MockProvider()

    if config.provider is ProviderType.ANTHROPIC:
        if not config.anthropic_api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY is required for the anthropic provider.")
        from src.providers.anthropic import AnthropicProvider  # noqa: PLC0415

        logger.info("Using the Anthropic provider (model=%s)", config.model_name)
        return AnthropicProvider(config.anthropic_api_key, config.model_name)

    raise ConfigurationError(f"Unsupported provider: {config.provider!r}")
