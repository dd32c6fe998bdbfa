"""Centralized configuration for the Services Assistant.

Value resolution order (per variable):
  1. Environment variable / ``.env`` file  (local dev)
  2. AWS SSM Parameter Store SecureString  (secrets only, when
     ``AWS_EXECUTION_ENV`` is set)

The SSM paths follow the convention ``/services-assistant/<VARIABLE_NAME>``.

The assistant settings (provider, locales, fallbacks, guardrails, context
window) are resolved once by :func:`load_llm_config` into an immutable
:class:`LlmConfig`.  The server refuses to start when that policy cannot be
built, so a misconfigured process never serves requests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ── Feature flag: running on AWS? ────────────────────────────────────
_ON_AWS = bool(os.getenv("AWS_EXECUTION_ENV"))


class ConfigurationError(RuntimeError):
    """Raised when the assistant configuration is missing or invalid."""


# ── Secret resolution ────────────────────────────────────────────────

def _get_ssm_parameter(name: str) -> str | None:
    """Fetch a SecureString from SSM Parameter Store.

    Returns ``None`` if the parameter does not exist or boto3 is
    unavailable.  Errors are logged but never raised so that local-dev
    fallback still works.
    """
    try:
        import boto3  # noqa: PLC0415  lazy import, only needed on AWS

        ssm = boto3.client("ssm")
        resp = ssm.get_parameter(Name=f"/services-assistant/{name}", WithDecryption=True)
        return resp["Parameter"]["Value"]
    except Exception:
        logger.debug("SSM lookup for %s failed (expected locally)", name)
        return None


def _optional_secret(name: str) -> str | None:
    """Return a secret from env-var or SSM, or ``None`` when unset."""
    value = os.getenv(name)
    if value and not value.startswith("your_"):
        return value

    if _ON_AWS:
        return _get_ssm_parameter(name)
    return None


def _int_env(name: str, default: int) -> int:
    """Parse an integer variable; unparseable values keep the default."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


def _csv_env(name: str) -> list[str]:
    """Split a comma-separated variable into lower-cased, non-empty items."""
    raw = os.getenv(name, "")
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


# ── Assistant policy types ───────────────────────────────────────────


class ProviderType(str, Enum):
    """Language-model backends the assistant can be wired to."""

    MOCK = "mock"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class FallbackMessages:
    """Canned, localized answers used when the model backend is unavailable."""

    generic: str
    service_suggestions: str
    document_assist: str
    follow_up: tuple[str, ...]


@dataclass(frozen=True)
class GuardrailPolicy:
    blocked_phrases: frozenset[str]
    max_prompt_length: int = 1200


DEFAULT_LOCALE = "en"
DEFAULT_SUPPORTED_LOCALES = ("en", "fr", "ar")
MAX_RETAINED_INTENTS = 10

DEFAULT_BLOCKED_PHRASES = frozenset(
    {
        "ignore previous instructions",
        "disregard previous rules",
        "disable safeguards",
        "override system prompt",
        "system override",
        "act as the system",
        "prompt injection",
    }
)

DEFAULT_FALLBACK_RESPONSES: dict[str, FallbackMessages] = {
    "en": FallbackMessages(
        generic=(
            "I am unable to respond right now. Please try again soon or "
            "contact our support team for assistance."
        ),
        service_suggestions=(
            "Our assistant is currently offline. Based on your profile, our most "
            "requested services include scheduling consultations and reviewing "
            "documentation. A specialist will reach out shortly if needed."
        ),
        document_assist=(
            "Document assistance is temporarily unavailable. Please review the "
            "document guidelines or contact a specialist for urgent requests."
        ),
        follow_up=(
            "Would you like me to connect you with a specialist for a quick review?",
            "Should I assemble a checklist of required attachments?",
        ),
    ),
    "fr": FallbackMessages(
        generic=(
            "Je ne peux pas répondre pour le moment. Réessayez plus tard ou "
            "contactez notre équipe d'assistance pour obtenir de l'aide."
        ),
        service_suggestions=(
            "Notre assistant est hors ligne. En attendant, pensez à planifier une "
            "consultation ou à consulter les guides de services. Un spécialiste "
            "vous contactera si nécessaire."
        ),
        document_assist=(
            "L’assistance documentaire est temporairement indisponible. Consultez "
            "les directives ou contactez un spécialiste pour toute demande urgente."
        ),
        follow_up=(
            "Souhaitez-vous qu’un spécialiste relise vos documents ?",
            "Dois-je préparer une checklist des pièces à joindre ?",
        ),
    ),
    "ar": FallbackMessages(
        generic=(
            "لا يمكنني الرد الآن. يرجى المحاولة لاحقًا أو التواصل مع فريق الدعم "
            "للحصول على المساعدة."
        ),
        service_suggestions=(
            "المساعد غير متاح حاليًا. ننصحك بحجز استشارة أو مراجعة دليل الخدمات. "
            "سيتواصل معك أخصائي عند الحاجة."
        ),
        document_assist=(
            "خدمة المساعدة في المستندات متوقفة مؤقتًا. يرجى مراجعة إرشادات "
            "المستندات أو التواصل مع أخصائي للطلبات العاجلة."
        ),
        follow_up=(
            "هل ترغب في أن أوصلك بأخصائي لمراجعة سريعة؟",
            "هل أعد لك قائمة بالمرفقات المطلوبة؟",
        ),
    ),
}


@dataclass(frozen=True)
class LlmConfig:
    """Immutable assistant policy, resolved once at process start."""

    provider: ProviderType
    default_locale: str
    supported_locales: tuple[str, ...]
    fallback_responses: Mapping[str, FallbackMessages]
    guardrails: GuardrailPolicy
    max_context_messages: int = 25
    provider_timeout_seconds: float = 20.0
    provider_max_retries: int = 0
    conversation_ttl_seconds: int = 3600
    anthropic_api_key: str | None = None
    model_name: str = "claude-haiku-4-5"

    def __post_init__(self) -> None:
        if not self.supported_locales:
            raise ConfigurationError("At least one supported locale is required.")
        if self.default_locale not in self.supported_locales:
            raise ConfigurationError(
                f"Default locale {self.default_locale!r} must be one of "
                f"the supported locales {list(self.supported_locales)}."
            )
        if self.default_locale not in self.fallback_responses:
            raise ConfigurationError(
                f"No fallback messages configured for default locale {self.default_locale!r}."
            )
        for locale, messages in self.fallback_responses.items():
            if not messages.follow_up:
                raise ConfigurationError(f"Fallback follow-ups for {locale!r} cannot be empty.")
        if self.guardrails.max_prompt_length <= 0:
            raise ConfigurationError("LLM_MAX_PROMPT_LENGTH must be a positive integer.")
        if self.max_context_messages <= 0:
            raise ConfigurationError("LLM_MAX_CONTEXT_MESSAGES must be a positive integer.")
        if self.provider_timeout_seconds <= 0:
            raise ConfigurationError("LLM_PROVIDER_TIMEOUT_SECONDS must be positive.")
        if self.provider_max_retries < 0:
            raise ConfigurationError("LLM_PROVIDER_MAX_RETRIES cannot be negative.")
        if self.conversation_ttl_seconds <= 0:
            raise ConfigurationError("LLM_CONVERSATION_TTL_SECONDS must be positive.")
        if self.provider is ProviderType.ANTHROPIC and not self.anthropic_api_key:
            raise ConfigurationError(
                "Missing required configuration: ANTHROPIC_API_KEY. "
                "Set it in .env (local) or SSM Parameter Store "
                "/services-assistant/ANTHROPIC_API_KEY (AWS)."
            )

    def fallback_for(self, locale: str) -> FallbackMessages:
        """Return the fallback bundle for *locale*, else the default bundle."""
        messages = self.fallback_responses.get(locale)
        if messages is None:
            messages = self.fallback_responses.get(
                self.default_locale, DEFAULT_FALLBACK_RESPONSES["en"],
            )
        return messages


def load_llm_config() -> LlmConfig:
    """Build the assistant policy from the environment.

    Raises:
        ConfigurationError: if the resulting policy is unusable.
    """
    raw_provider = os.getenv("LLM_PROVIDER", ProviderType.MOCK.value).strip().lower()
    try:
        provider = ProviderType(raw_provider)
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown LLM_PROVIDER {raw_provider!r}; "
            f"expected one of {[p.value for p in ProviderType]}."
        ) from exc

    default_locale = (
        os.getenv("LLM_DEFAULT_LOCALE") or os.getenv("APP_DEFAULT_LOCALE") or DEFAULT_LOCALE
    ).strip().lower()

    declared = _csv_env("LLM_SUPPORTED_LOCALES") or list(DEFAULT_SUPPORTED_LOCALES)
    # Default locale first, declaration order preserved, duplicates dropped
    supported = tuple(dict.fromkeys([default_locale, *declared]))

    blocked = _csv_env("LLM_GUARDRAILS_BLOCKED")
    guardrails = GuardrailPolicy(
        blocked_phrases=frozenset(blocked) if blocked else DEFAULT_BLOCKED_PHRASES,
        max_prompt_length=_int_env("LLM_MAX_PROMPT_LENGTH", 1200),
    )

    fallbacks = {
        locale: DEFAULT_FALLBACK_RESPONSES.get(locale, DEFAULT_FALLBACK_RESPONSES["en"])
        for locale in supported
    }

    config = LlmConfig(
        provider=provider,
        default_locale=default_locale,
        supported_locales=supported,
        fallback_responses=MappingProxyType(fallbacks),
        guardrails=guardrails,
        max_context_messages=_int_env("LLM_MAX_CONTEXT_MESSAGES", 25),
        provider_timeout_seconds=_float_env("LLM_PROVIDER_TIMEOUT_SECONDS", 20.0),
        provider_max_retries=_int_env("LLM_PROVIDER_MAX_RETRIES", 0),
        conversation_ttl_seconds=_int_env("LLM_CONVERSATION_TTL_SECONDS", 3600),
        anthropic_api_key=(
            _optional_secret("ANTHROPIC_API_KEY")
            if provider is ProviderType.ANTHROPIC
            else None
        ),
        model_name=os.getenv("MODEL_NAME", "claude-haiku-4-5"),
    )
    logger.info(
        "Assistant config loaded — provider=%s default_locale=%s locales=%s "
        "max_prompt=%d max_context=%d",
        config.provider.value, config.default_locale, ",".join(config.supported_locales),
        config.guardrails.max_prompt_length, config.max_context_messages,
    )
    return config


# ── Service catalog ─────────────────────────────────────────────────
CATALOG_BASE_URL: str = os.getenv("CATALOG_BASE_URL", "http://localhost:3001/v1")
CATALOG_API_TOKEN: str | None = _optional_secret("CATALOG_API_TOKEN")

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ORIGINS: list[str] = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
