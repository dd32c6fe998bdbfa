"""Deterministic, rule-based provider for local development and tests.

Intents are detected with simple keyword patterns, replies are built from
localized templates (en / fr / ar) and suggestions come from a small fixed
catalogue, so the whole assistant stays usable with no network access.
"""

from __future__ import annotations

import logging
import re

from src.assistant.models import ServiceSuggestion
from src.providers.base import (
    ChatCompletion,
    ChatCompletionRequest,
    DocumentAssistRequest,
    DocumentCompletion,
    ModelProvider,
    SuggestionCompletion,
    SuggestionRequest,
)
from src.providers.mock_content import (
    CHAT_TEMPLATES,
    DOCUMENT_TEMPLATES,
    FOLLOW_UPS,
    INTENT_LABELS,
    INTENT_PATTERNS,
    SUGGESTIONS,
)

logger = logging.getLogger(__name__)

_COMPILED_PATTERNS = [(intent, re.compile(pattern)) for intent, pattern in INTENT_PATTERNS]


def truncate(text: str, length: int) -> str:
    """Shorten *text* to *length* characters, ending with an ellipsis."""
    if len(text) <= length:
        return text
    return f"{text[: max(0, length - 1)].strip()}…"


def detect_intent(text: str) -> str:
    """Classify *text* into one of the known intents (``generic`` if none)."""
    lowered = text.lower()
    for intent, pattern in _COMPILED_PATTERNS:
        if pattern.search(lowered):
            return intent
    return "generic"


class MockProvider(ModelProvider):
    """Offline stand-in for a real language model."""

    name = "mock"

    @staticmethod
    def _locale(locale: str | None) -> str:
        normalized = (locale or "").lower()
        return normalized if normalized in CHAT_TEMPLATES else "en"

    async def chat(self, request: ChatCompletionRequest) -> ChatCompletion:
        locale = self._locale(request.locale)
        last_user = next(
            (m.content for m in reversed(request.history) if m.role == "user"),
            request.message,
        )
        intent = request.intent_hint or detect_intent(last_user)
        logger.debug("Mock chat response locale=%s intent=%s", locale, intent)

        template = CHAT_TEMPLATES[locale]
        labels = INTENT_LABELS[locale]
        label = labels.get(intent, labels["generic"])
        snippet = (
            template["snippet"].format(snippet=truncate(last_user, 160))
            if last_user
            else template["default_prompt"]
        )
        reply = f"{template['opening'].format(intent=label)} {snippet} {template['closing']}"
        return ChatCompletion(reply=reply, intent=None if intent == "generic" else intent)

    async def suggest_services(self, request: SuggestionRequest) -> SuggestionCompletion:
        locale = self._locale(request.locale)
        intent = request.intent_hint or detect_intent(request.context)
        logger.debug(
            "Mock service suggestions locale=%s intent=%s context_length=%d",
            locale, intent, len(request.context),
        )

        catalogue = SUGGESTIONS[locale]
        entries = catalogue.get(intent, catalogue["generic"])
        suggestions = tuple(
            ServiceSuggestion(title=title, description=summary, slug=slug, confidence=confidence)
            for title, summary, slug, confidence in entries
        )
        rationale = None
        if intent != "generic":
            rationale = f"Suggestions tailored for {INTENT_LABELS[locale].get(intent, intent)}."
        return SuggestionCompletion(suggestions=suggestions, intent=intent, rationale=rationale)

    async def assist_document(self, request: DocumentAssistRequest) -> DocumentCompletion:
        locale = self._locale(request.locale)
        intent = detect_intent(request.prompt)
        logger.debug(
            "Mock document assistance locale=%s intent=%s prompt_length=%d",
            locale, intent, len(request.prompt),
        )

        template = DOCUMENT_TEMPLATES[locale]
        parts = []
        if request.document_summary:
            parts.append(template["summary"].format(summary=truncate(request.document_summary, 160)))
        if request.document_type:
            parts.append(template["document"].format(document_type=request.document_type))
        else:
            parts.append(template["request"])
        parts.append(template["plan"].format(snippet=truncate(request.prompt, 220)))

        follow_ups = FOLLOW_UPS[locale]
        return DocumentCompletion(
            answer="".join(parts),
            follow_up=follow_ups.get(intent, follow_ups["generic"]),
            intent=None if intent == "generic" else intent,
        )
