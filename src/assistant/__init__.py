"""Conversation state, guardrails and orchestration for the assistant."""
