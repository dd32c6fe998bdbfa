"""Services Assistant — conversational assistant orchestration layer.

Architecture Overview
=====================

Every request goes through the **AssistantOrchestrator**:

1. **Guardrails** — input is NFKC-normalized, trimmed and checked against a
   length limit and a blocked-phrase list (prompt-injection phrases by
   default).  Rejections are the only errors callers ever see.
2. **Conversation store** — chat turns are recorded per caller and per
   conversation, trimmed to a bounded context window and reclaimed after a
   period of inactivity.
3. **Model provider** — a deterministic mock (local dev / tests) or
   Anthropic Claude via LangChain, chosen once at start-up.
4. **Fallbacks** — when the provider fails or times out, the caller gets a
   canned answer in their language with ``fallback: true``; service
   suggestions fall back to the first active entries of the service
   catalog.

Key Design Decisions
--------------------
- **Availability over fidelity**: no provider error ever surfaces to the
  end user; each call is bounded by a timeout and answered with a
  documented fallback shape.
- **Owner-scoped conversations**: a caller can pick the id of a new
  conversation (idempotent creation) but can only ever see their own.
- **One writer per conversation**: turns on the same conversation are
  serialized with a per-conversation lock.
- **Dual Interface**: FastAPI server (production) + CLI chat loop
  (development/testing).

Package Structure
-----------------
- ``src/assistant/`` — guardrails, conversation store, locale negotiation,
  orchestrator
- ``src/providers/`` — provider contract, mock and Anthropic providers
- ``src/services/`` — service catalog client, TTL cache, CloudWatch metrics
- ``src/api/`` — FastAPI routes, Pydantic schemas, caller identity
- ``src/config.py`` — centralized configuration from environment variables
- ``src/prompts.py`` — system prompts for the remote provider
- ``src/server.py`` — FastAPI application
- ``src/main.py`` — CLI chat interface
"""
