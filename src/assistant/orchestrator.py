"""Assistant orchestration: guardrails → conversation state → provider →
answer or localized fallback.

Every public operation follows the same sequence:

  1. resolve the locale (request → caller preference → default);
  2. validate the free text with the guardrails — a
     :class:`~src.assistant.guardrails.ValidationError` is the *only*
     exception callers ever see from this module;
  3. (chat only) resolve the conversation and record the user's turn;
  4. call the provider once (plus ``provider_max_retries`` retries), each
     attempt bounded by ``provider_timeout_seconds``;
  5. map the outcome to the success shape, or to the fallback shape with
     ``fallback=True`` and a canned message in the caller's language.

Provider outcomes are carried as :class:`ProviderSuccess` /
:class:`ProviderFailure` values rather than exceptions so a failure can
never escape by accident.  Task cancellation is not a failure: it is
re-raised and no assistant turn is recorded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from src.assistant.conversation_store import ConversationStore, InMemoryConversationStore
from src.assistant.guardrails import GuardrailValidator
from src.assistant.locale import resolve_locale
from src.assistant.models import (
    Caller,
    ChatRequest,
    ChatResult,
    DocumentAssistResult,
    DocumentRequest,
    ServiceSuggestion,
    SuggestionsRequest,
    SuggestionsResult,
    SummaryResult,
)
from src.config import LlmConfig, load_llm_config
from src.providers import create_provider
from src.providers.base import (
    ChatCompletionRequest,
    DocumentAssistRequest,
    ModelProvider,
    SuggestionRequest,
)
from src.services.catalog_client import CatalogPage
from src.services.metrics import metrics

logger = logging.getLogger(__name__)

CATALOG_INTENT = "catalog_recommendation"
CATALOG_FALLBACK_LIMIT = 3
RETRY_BACKOFF_SECONDS = 0.5

T = TypeVar("T")


class ServiceCatalog(Protocol):
    """The part of the catalog service the fallback path relies on."""

    async def list_active(
        self, page: int = 1, limit: int = 3, locale: str | None = None,
    ) -> CatalogPage: ...


@dataclass(frozen=True)
class ProviderSuccess(Generic[T]):
    value: T


@dataclass(frozen=True)
class ProviderFailure:
    error: Exception

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, TimeoutError)


class AssistantOrchestrator:
    """Entry point for every assistant operation."""

    def __init__(
        self,
        config: LlmConfig,
        store: ConversationStore,
        guardrail: GuardrailValidator,
        provider: ModelProvider,
        catalog: ServiceCatalog | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._guardrail = guardrail
        self._provider = provider
        self._catalog = catalog

    # ── Helpers ──────────────────────────────────────────────────────

    def _resolve_locale(self, requested: str | None, caller_locale: str | None = None) -> str:
        return resolve_locale(
            requested,
            caller_locale,
            self._config.supported_locales,
            self._config.default_locale,
        )

    def _guard_hint(self, hint: str | None) -> str | None:
        """Validate an optional intent hint; blank hints are dropped."""
        if hint is None or not hint.strip():
            return None
        return self._guardrail.enforce(hint, "intentHint")

    async def _invoke(
        self, operation: str, call: Callable[[], Awaitable[T]],
    ) -> ProviderSuccess[T] | ProviderFailure:
        """Run a provider call under the timeout / retry policy."""
        attempts = 1 + self._config.provider_max_retries
        attempt = 1

        while True:
            try:
                value = await asyncio.wait_for(
                    call(), timeout=self._config.provider_timeout_seconds,
                )
                return ProviderSuccess(value)
            except Exception as exc:
                logger.warning(
                    "Provider %s %s attempt %d/%d failed: %s",
                    self._provider.name, operation, attempt, attempts,
                    type(exc).__name__ if isinstance(exc, TimeoutError) else exc,
                )
                if attempt >= attempts:
                    return ProviderFailure(exc)

            await asyncio.sleep(RETRY_BACKOFF_SECONDS * (2 ** (attempt - 1)))
            attempt += 1

    async def _catalog_suggestions(self, locale: str) -> tuple[ServiceSuggestion, ...]:
        """First page of active catalog services, or nothing if unavailable."""
        if self._catalog is None:
            return ()
        try:
            page = await self._catalog.list_active(
                page=1, limit=CATALOG_FALLBACK_LIMIT, locale=locale,
            )
        except Exception:
            logger.warning("Catalog lookup failed during suggestion fallback", exc_info=True)
            return ()

        return tuple(
            ServiceSuggestion(title=entry.localized_name, description=entry.summary, slug=entry.slug)
            for entry in page.items
        )

    # ── Operations ───────────────────────────────────────────────────

    async def chat(self, caller: Caller, request: ChatRequest) -> ChatResult:
        """Run one conversation turn."""
        locale = self._resolve_locale(request.locale, caller.locale)
        message = self._guardrail.enforce(request.message, "message")
        intent_hint = self._guard_hint(request.intent_hint)
        state = self._store.resolve(caller.id, locale, request.conversation_id)

        async with self._store.lock(state):
            self._store.append_message(state, "user", message, locale)
            completion_request = ChatCompletionRequest(
                locale=locale,
                message=message,
                history=tuple(state.messages),
                intent_hint=intent_hint,
            )
            outcome = await self._invoke(
                "chat", lambda: self._provider.chat(completion_request),
            )

            if isinstance(outcome, ProviderSuccess):
                completion = outcome.value
                self._store.append_message(
                    state, "assistant", completion.reply, locale, completion.intent,
                )
                self._store.push_intent(state, completion.intent)
                return ChatResult(
                    conversation=self._store.snapshot(state),
                    reply=completion.reply,
                    intent=completion.intent,
                    fallback=False,
                    locale=locale,
                )

            reply = self._config.fallback_for(locale).generic
            # Keep the record consistent with what the user was shown
            self._store.append_message(state, "assistant", reply, locale)
            metrics.record_fallback("chat", locale)
            logger.warning(
                "Chat fallback owner=%s conversation=%s locale=%s timed_out=%s",
                caller.id, state.id, locale, outcome.timed_out,
            )
            return ChatResult(
                conversation=self._store.snapshot(state),
                reply=reply,
                intent=None,
                fallback=True,
                locale=locale,
            )

    async def suggest_services(
        self, caller: Caller, request: SuggestionsRequest,
    ) -> SuggestionsResult:
        """Recommend services for the described situation."""
        locale = self._resolve_locale(request.locale, caller.locale)
        context = self._guardrail.enforce(request.context, "context")
        intent_hint = self._guard_hint(request.intent_hint)

        suggestion_request = SuggestionRequest(
            locale=locale, context=context, intent_hint=intent_hint,
        )
        outcome = await self._invoke(
            "suggest_services", lambda: self._provider.suggest_services(suggestion_request),
        )
        if isinstance(outcome, ProviderSuccess):
            completion = outcome.value
            return SuggestionsResult(
                suggestions=tuple(completion.suggestions),
                intent=completion.intent,
                fallback=False,
                locale=locale,
            )

        suggestions = await self._catalog_suggestions(locale)
        metrics.record_fallback("suggest_services", locale)
        return SuggestionsResult(
            suggestions=suggestions,
            intent=CATALOG_INTENT,
            fallback=True,
            locale=locale,
            message=self._config.fallback_for(locale).service_suggestions,
        )

    async def assist_document(
        self, caller: Caller, request: DocumentRequest,
    ) -> DocumentAssistResult:
        """Help the caller prepare or complete a document."""
        locale = self._resolve_locale(request.locale, caller.locale)
        prompt = self._guardrail.enforce(request.prompt, "prompt")
        summary = None
        if request.document_summary is not None:
            summary = self._guardrail.enforce(request.document_summary, "documentSummary")

        assist_request = DocumentAssistRequest(
            locale=locale,
            prompt=prompt,
            document_summary=summary,
            document_type=(request.document_type or "").strip() or None,
        )
        outcome = await self._invoke(
            "assist_document", lambda: self._provider.assist_document(assist_request),
        )
        if isinstance(outcome, ProviderSuccess):
            completion = outcome.value
            return DocumentAssistResult(
                answer=completion.answer,
                follow_up=tuple(completion.follow_up),
                intent=completion.intent,
                fallback=False,
                locale=locale,
            )

        fallback = self._config.fallback_for(locale)
        metrics.record_fallback("assist_document", locale)
        return DocumentAssistResult(
            answer=fallback.document_assist,
            follow_up=fallback.follow_up,
            intent=None,
            fallback=True,
            locale=locale,
        )

    async def summarize(self, prompt: str, locale: str | None) -> SummaryResult:
        """Summarize *prompt* through the document-assistance provider call."""
        locale = self._resolve_locale(locale)
        text = self._guardrail.enforce(prompt, "prompt")

        assist_request = DocumentAssistRequest(locale=locale, prompt=text)
        outcome = await self._invoke(
            "summarize", lambda: self._provider.assist_document(assist_request),
        )
        if isinstance(outcome, ProviderSuccess):
            return SummaryResult(summary=outcome.value.answer, locale=locale)

        metrics.record_fallback("summarize", locale)
        return SummaryResult(
            summary=self._config.fallback_for(locale).document_assist,
            locale=locale,
            fallback=True,
        )


def create_assistant(
    config: LlmConfig | None = None,
    *,
    catalog: ServiceCatalog | None = None,
) -> AssistantOrchestrator:
    """Wire an orchestrator from configuration.

    Loads the configuration when none is given, so a missing or invalid
    policy raises :class:`~src.config.ConfigurationError` before any request
    is served.
    """
    config = config or load_llm_config()
    store = InMemoryConversationStore(
        config.max_context_messages,
        ttl_seconds=config.conversation_ttl_seconds,
    )
    assistant = AssistantOrchestrator(
        config,
        store,
        GuardrailValidator(config.guardrails),
        create_provider(config),
        catalog,
    )
    logger.debug(
        "Assistant wired — provider: %s, locales: %s, max_context: %d",
        config.provider.value, ",".join(config.supported_locales), config.max_context_messages,
    )
    return assistant
