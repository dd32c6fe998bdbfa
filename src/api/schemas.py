"""Pydantic schemas for the FastAPI endpoints.

Wire names are camelCase (``conversationId``, ``intentHint``…) to match the
web client; Python attribute names stay snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Requests ─────────────────────────────────────────────────────────


class ChatMessageRequest(_CamelModel):
    """A user's turn in a conversation."""

    conversation_id: str | None = Field(
        None,
        min_length=1,
        max_length=100,
        description="Existing (or client-chosen) conversation identifier",
    )
    message: str = Field(..., max_length=2000, description="Message to send to the assistant")
    locale: str | None = Field(None, max_length=10, description="Preferred response language")
    intent_hint: str | None = Field(
        None, max_length=200, description="Intent hint used to guide the conversation",
    )


class ServiceSuggestionsRequest(_CamelModel):
    context: str = Field(
        ..., max_length=1000, description="Context describing the user need or question",
    )
    locale: str | None = Field(None, max_length=10)
    intent_hint: str | None = Field(None, max_length=200)


class DocumentAssistRequest(_CamelModel):
    prompt: str = Field(
        ..., max_length=2000, description="Assistance needed for the document",
    )
    document_summary: str | None = Field(None, max_length=2000)
    document_type: str | None = Field(None, max_length=120, examples=["residency_permit"])
    locale: str | None = Field(None, max_length=10)


class SummarizeRequest(_CamelModel):
    prompt: str = Field(..., min_length=3)
    locale: str | None = Field(None, max_length=10)


# ── Responses ────────────────────────────────────────────────────────


class MessageOut(_CamelModel):
    role: str
    content: str
    locale: str
    intent: str | None = None
    timestamp: str


class ConversationOut(_CamelModel):
    id: str
    locale: str
    intents: list[str]
    messages: list[MessageOut]
    created_at: str
    updated_at: str


class ChatMessageResponse(_CamelModel):
    conversation: ConversationOut
    reply: str
    intent: str | None = None
    fallback: bool
    locale: str


class SuggestionOut(_CamelModel):
    title: str
    description: str
    slug: str | None = None
    confidence: float | None = None


class ServiceSuggestionsResponse(_CamelModel):
    suggestions: list[SuggestionOut]
    intent: str
    fallback: bool
    locale: str
    message: str | None = None


class DocumentAssistResponse(_CamelModel):
    answer: str
    follow_up: list[str]
    intent: str | None = None
    fallback: bool
    locale: str


class SummarizeResponse(_CamelModel):
    summary: str
    locale: str
    fallback: bool = False


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    service: str = "services-assistant"
    provider: str | None = None
