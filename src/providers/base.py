"""Language-model provider contract.

Every backend exposes the same three asynchronous operations.  Any of them
may raise; the orchestrator treats every exception as a provider failure
and answers with a localized fallback instead.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.assistant.models import ConversationMessage, ServiceSuggestion


class ProviderError(Exception):
    """Raised when a model backend call fails or returns an unusable answer."""


# ── Requests ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChatCompletionRequest:
    locale: str
    message: str
    history: Sequence[ConversationMessage]
    intent_hint: str | None = None


@dataclass(frozen=True)
class SuggestionRequest:
    locale: str
    context: str
    intent_hint: str | None = None


@dataclass(frozen=True)
class DocumentAssistRequest:
    locale: str
    prompt: str
    document_summary: str | None = None
    document_type: str | None = None


# ── Responses ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ChatCompletion:
    reply: str
    intent: str | None = None


@dataclass(frozen=True)
class SuggestionCompletion:
    suggestions: tuple[ServiceSuggestion, ...]
    intent: str
    rationale: str | None = None


@dataclass(frozen=True)
class DocumentCompletion:
    answer: str
    follow_up: tuple[str, ...] = field(default_factory=tuple)
    intent: str | None = None


class ModelProvider(abc.ABC):
    """Capability interface implemented by every model backend."""

    name: str = "provider"

    @abc.abstractmethod
    async def chat(self, request: ChatCompletionRequest) -> ChatCompletion:
        ...

    @abc.abstractmethod
    async def suggest_services(self, request: SuggestionRequest) -> SuggestionCompletion:
        ...

    @abc.abstractmethod
    async def assist_document(self, request: DocumentAssistRequest) -> DocumentCompletion:
        ...
