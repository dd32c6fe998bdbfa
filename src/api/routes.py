"""FastAPI route definitions for the assistant API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.auth import get_caller
from src.api.schemas import (
    ChatMessageRequest,
    ChatMessageResponse,
    DocumentAssistRequest,
    DocumentAssistResponse,
    HealthResponse,
    ServiceSuggestionsRequest,
    ServiceSuggestionsResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from src.assistant.guardrails import ValidationError
from src.assistant.models import (
    Caller,
    ChatRequest,
    DocumentRequest,
    SuggestionsRequest,
)
from src.assistant.orchestrator import AssistantOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_assistant(request: Request) -> AssistantOrchestrator:
    """Retrieve the orchestrator built during the FastAPI lifespan.

    The orchestrator is initialised once during the lifespan (see
    ``server.py``) together with its provider and conversation store.
    """
    assistant = getattr(request.app.state, "assistant", None)
    if assistant is None:
        raise HTTPException(
            status_code=503,
            detail="The assistant is still starting up. Please try again in a moment.",
        )
    return assistant


async def _run(http_request: Request, operation: str, call: Awaitable[Any]) -> dict[str, Any]:
    """Await an orchestrator call and map its errors to HTTP responses.

    Guardrail rejections become 400s with the validation message.  Provider
    failures never reach this point (they are answered with fallbacks), so
    anything else is unexpected: it is logged with its traceback and the
    client gets a generic 500 without internal details.
    """
    request_id = getattr(http_request.state, "request_id", "?")
    try:
        result = await call
    except ValidationError as exc:
        logger.info("[%s] %s rejected: %s", request_id, operation, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("[%s] Error processing %s request", request_id, operation)
        raise HTTPException(
            status_code=500,
            detail="An internal error occurred. Please try again.",
        ) from exc
    return asdict(result)


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint."""
    return HealthResponse(provider=getattr(request.app.state, "provider_name", None))


@router.post("/assistant/chat", response_model=ChatMessageResponse)
async def chat(
    body: ChatMessageRequest,
    http_request: Request,
    caller: Caller = Depends(get_caller),
):
    """Send a message to the assistant.

    Reusing ``conversationId`` continues a conversation; an id the caller
    has not used before starts a new conversation under that id.  When the
    model is unavailable the reply is a localized fallback and
    ``fallback`` is ``true``.
    """
    assistant = _get_assistant(http_request)
    data = await _run(
        http_request,
        "chat",
        assistant.chat(
            caller,
            ChatRequest(
                message=body.message,
                conversation_id=body.conversation_id,
                locale=body.locale,
                intent_hint=body.intent_hint,
            ),
        ),
    )
    return ChatMessageResponse.model_validate(data)


@router.post("/assistant/service-suggestions", response_model=ServiceSuggestionsResponse)
async def service_suggestions(
    body: ServiceSuggestionsRequest,
    http_request: Request,
    caller: Caller = Depends(get_caller),
):
    """Recommend services for the caller's situation."""
    assistant = _get_assistant(http_request)
    data = await _run(
        http_request,
        "service-suggestions",
        assistant.suggest_services(
            caller,
            SuggestionsRequest(
                context=body.context, locale=body.locale, intent_hint=body.intent_hint,
            ),
        ),
    )
    return ServiceSuggestionsResponse.model_validate(data)


@router.post("/assistant/document-assist", response_model=DocumentAssistResponse)
async def document_assist(
    body: DocumentAssistRequest,
    http_request: Request,
    caller: Caller = Depends(get_caller),
):
    """Get a preparation plan and follow-up questions for a document."""
    assistant = _get_assistant(http_request)
    data = await _run(
        http_request,
        "document-assist",
        assistant.assist_document(
            caller,
            DocumentRequest(
                prompt=body.prompt,
                locale=body.locale,
                document_summary=body.document_summary,
                document_type=body.document_type,
            ),
        ),
    )
    return DocumentAssistResponse.model_validate(data)


@router.post("/assistant/summaries", response_model=SummarizeResponse)
async def summarize(
    body: SummarizeRequest,
    http_request: Request,
    caller: Caller = Depends(get_caller),
):
    """Summarize a piece of text."""
    assistant = _get_assistant(http_request)
    data = await _run(
        http_request,
        "summaries",
        assistant.summarize(body.prompt, body.locale or caller.locale),
    )
    return SummarizeResponse.model_validate(data)
