"""Data types shared by the assistant orchestration layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

Role = Literal["user", "assistant"]


# ── Conversation state ───────────────────────────────────────────────


@dataclass(frozen=True)
class ConversationMessage:
    """A single turn.  Never modified once appended to a conversation."""

    role: Role
    content: str
    locale: str
    timestamp: datetime
    intent: str | None = None


@dataclass
class ConversationState:
    """Mutable history of one conversation, owned by the conversation store.

    Only the store mutates ``messages`` and ``intents``; everything outside
    it works from :class:`ConversationSnapshot` copies.
    """

    id: str
    owner_id: str
    locale: str
    created_at: datetime
    updated_at: datetime
    messages: list[ConversationMessage] = field(default_factory=list)
    intents: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MessageSnapshot:
    role: Role
    content: str
    locale: str
    timestamp: str
    intent: str | None = None


@dataclass(frozen=True)
class ConversationSnapshot:
    """Read-only projection of a conversation with ISO-8601 timestamps."""

    id: str
    locale: str
    intents: tuple[str, ...]
    messages: tuple[MessageSnapshot, ...]
    created_at: str
    updated_at: str


# ── Caller & requests ────────────────────────────────────────────────


@dataclass(frozen=True)
class Caller:
    """Identity supplied by the authentication layer in front of the API."""

    id: str
    locale: str | None = None


@dataclass(frozen=True)
class ChatRequest:
    message: str
    conversation_id: str | None = None
    locale: str | None = None
    intent_hint: str | None = None


@dataclass(frozen=True)
class SuggestionsRequest:
    context: str
    locale: str | None = None
    intent_hint: str | None = None


@dataclass(frozen=True)
class DocumentRequest:
    prompt: str
    locale: str | None = None
    document_summary: str | None = None
    document_type: str | None = None


# ── Results returned to callers ──────────────────────────────────────


@dataclass(frozen=True)
class ServiceSuggestion:
    title: str
    description: str
    slug: str | None = None
    confidence: float | None = None


@dataclass(frozen=True)
class ChatResult:
    conversation: ConversationSnapshot
    reply: str
    intent: str | None
    fallback: bool
    locale: str


@dataclass(frozen=True)
class SuggestionsResult:
    suggestions: tuple[ServiceSuggestion, ...]
    intent: str
    fallback: bool
    locale: str
    message: str | None = None


@dataclass(frozen=True)
class DocumentAssistResult:
    answer: str
    follow_up: tuple[str, ...]
    intent: str | None
    fallback: bool
    locale: str


@dataclass(frozen=True)
class SummaryResult:
    summary: str
    locale: str
    fallback: bool = False
