"""Remote provider backed by Anthropic's Claude models through LangChain.

Each operation sends a locale-aware system prompt and asks for a single JSON
object back.  Transport errors, timeouts and unparseable answers all surface
as :class:`ProviderError`; the orchestrator turns them into fallbacks.
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import AIMessage, AnyMessage, HumanMessage, SystemMessage

from src.assistant.models import ConversationMessage, ServiceSuggestion
from src.prompts import CHAT_OUTPUT, DOCUMENT_OUTPUT, SUGGESTIONS_OUTPUT, get_system_prompt
from src.providers.base import (
    ChatCompletion,
    ChatCompletionRequest,
    DocumentAssistRequest,
    DocumentCompletion,
    ModelProvider,
    ProviderError,
    SuggestionCompletion,
    SuggestionRequest,
)
from src.services.metrics import metrics

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def _build_llm(api_key: str, model_name: str) -> ChatAnthropic:
    return ChatAnthropic(
        model=model_name,
        api_key=api_key,
        temperature=0.2,
        max_tokens=1024,
        max_retries=0,  # retries and timeouts are owned by the orchestrator
    )


def _content_text(content: Any) -> str:
    """Flatten a LangChain message ``content`` (str or block list) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def parse_json_payload(text: str) -> dict[str, Any]:
    """Extract the JSON object from a model answer.

    Models sometimes wrap the object in prose or code fences, so the
    outermost ``{...}`` span is parsed.
    """
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        raise ProviderError("Model answer did not contain a JSON object.")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ProviderError(f"Model answer is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ProviderError("Model answer JSON must be an object.")
    return payload


def _history_messages(history: list[ConversationMessage]) -> list[AnyMessage]:
    messages: list[AnyMessage] = []
    for message in history:
        if message.role == "user":
            messages.append(HumanMessage(content=message.content))
        else:
            messages.append(AIMessage(content=message.content))
    return messages


def _required_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ProviderError(f"Model answer is missing '{key}'.")
    return value.strip()


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if isinstance(value, str) and value.strip() and value.strip() != "generic":
        return value.strip()
    return None


class AnthropicProvider(ModelProvider):
    """Claude-backed implementation of the provider contract."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model_name: str,
        *,
        llm: ChatAnthropic | None = None,
    ) -> None:
        self._model_name = model_name
        # Injectable for tests
        self._llm = llm or _build_llm(api_key, model_name)

    async def _complete(
        self, operation: str, system: str, messages: list[AnyMessage],
    ) -> dict[str, Any]:
        t0 = time.perf_counter()
        try:
            response = await self._llm.ainvoke([SystemMessage(content=system), *messages])
            payload = parse_json_payload(_content_text(response.content))
        except Exception as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            metrics.record_failure(
                "anthropic", operation,
                error_type=type(exc).__name__, latency_ms=elapsed,
            )
            if isinstance(exc, ProviderError):
                raise
            raise ProviderError(f"{operation} failed: {exc}") from exc

        elapsed = (time.perf_counter() - t0) * 1000
        metrics.record_success("anthropic", operation, latency_ms=elapsed)
        logger.debug("%s (%s) responded in %.0fms", operation, self._model_name, elapsed)
        return payload

    async def chat(self, request: ChatCompletionRequest) -> ChatCompletion:
        system = get_system_prompt(request.locale, CHAT_OUTPUT)
        messages = _history_messages(list(request.history))
        # History normally ends with the user's turn; guard against callers
        # that pass the message separately
        if not messages or not isinstance(messages[-1], HumanMessage):
            messages.append(HumanMessage(content=request.message))
        if request.intent_hint:
            # Caller-supplied: stays in the user turn, never in the system prompt
            last = messages[-1]
            messages[-1] = HumanMessage(
                content=f"{_content_text(last.content)}\n\n(Intent hint: {request.intent_hint})",
            )

        payload = await self._complete("chat", system, messages)
        return ChatCompletion(
            reply=_required_str(payload, "reply"),
            intent=_optional_str(payload, "intent"),
        )

    async def suggest_services(self, request: SuggestionRequest) -> SuggestionCompletion:
        system = get_system_prompt(request.locale, SUGGESTIONS_OUTPUT)
        context = request.context
        if request.intent_hint:
            context = f"{context}\n\n(Intent hint: {request.intent_hint})"

        payload = await self._complete(
            "suggest_services", system, [HumanMessage(content=context)],
        )
        raw_items = payload.get("suggestions")
        if not isinstance(raw_items, list):
            raise ProviderError("Model answer is missing 'suggestions'.")

        suggestions = []
        for item in raw_items:
            if not isinstance(item, dict) or not item.get("title"):
                continue
            confidence = item.get("confidence")
            suggestions.append(
                ServiceSuggestion(
                    title=str(item["title"]),
                    description=str(item.get("description") or item.get("summary") or ""),
                    slug=item.get("slug"),
                    confidence=float(confidence) if isinstance(confidence, int | float) else None,
                )
            )

        return SuggestionCompletion(
            suggestions=tuple(suggestions),
            intent=_optional_str(payload, "intent") or request.intent_hint or "generic",
            rationale=_optional_str(payload, "rationale"),
        )

    async def assist_document(self, request: DocumentAssistRequest) -> DocumentCompletion:
        system = get_system_prompt(request.locale, DOCUMENT_OUTPUT)
        lines = [request.prompt]
        if request.document_type:
            lines.append(f"Document type: {request.document_type}")
        if request.document_summary:
            lines.append(f"Document summary: {request.document_summary}")

        payload = await self._complete(
            "assist_document", system, [HumanMessage(content="\n".join(lines))],
        )
        follow_up = payload.get("followUp") or payload.get("follow_up") or []
        return DocumentCompletion(
            answer=_required_str(payload, "answer"),
            follow_up=tuple(str(q) for q in follow_up if isinstance(q, str) and q.strip()),
            intent=_optional_str(payload, "intent"),
        )
