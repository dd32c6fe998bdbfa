"""Conversation history storage for the assistant.

Design decisions
────────────────
• **Owner-scoped namespaces**: conversations are keyed first by owner id,
  then by conversation id, so two callers can never reach each other's
  history even when they pick the same conversation id.
• **Caller-chosen ids are honored**: resolving an id that is unknown in the
  owner's namespace creates the conversation under exactly that id, which
  lets clients create conversations idempotently.
• **Bounded retention**: messages are trimmed to ``max_context_messages``
  and intents to the 10 most recent, oldest first.
• **Per-conversation asyncio.Lock** so concurrent chat turns on the same
  conversation run one after the other instead of interleaving.
• **TTL eviction**: conversations idle for longer than ``ttl_seconds`` are
  reclaimed lazily during ``resolve``.  Data is lost on process restart,
  which is acceptable for this use-case.
"""

from __future__ import annotations

import abc
import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from src.assistant.models import (
    ConversationMessage,
    ConversationSnapshot,
    ConversationState,
    MessageSnapshot,
    Role,
)
from src.config import MAX_RETAINED_INTENTS

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
SWEEP_INTERVAL_SECONDS = 60


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _isoformat(value: datetime) -> str:
    """Render a UTC timestamp as ``2026-02-17T10:30:00.000Z``."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ConversationStore(abc.ABC):
    """Storage contract the orchestrator depends on."""

    @abc.abstractmethod
    def resolve(
        self, owner_id: str, locale: str, conversation_id: str | None = None,
    ) -> ConversationState:
        """Return the owner's conversation, creating it when unknown."""

    @abc.abstractmethod
    def append_message(
        self,
        state: ConversationState,
        role: Role,
        content: str,
        locale: str,
        intent: str | None = None,
    ) -> ConversationMessage:
        """Timestamp and append a message, trimming the oldest overflow."""

    @abc.abstractmethod
    def push_intent(self, state: ConversationState, intent: str | None) -> None:
        """Record an intent label; ``None`` is ignored."""

    @abc.abstractmethod
    def lock(self, state: ConversationState) -> asyncio.Lock:
        """Return the lock serializing turns on *state*."""

    def snapshot(self, state: ConversationState) -> ConversationSnapshot:
        """Deep, immutable copy of *state* with ISO-8601 timestamps."""
        return ConversationSnapshot(
            id=state.id,
            locale=state.locale,
            intents=tuple(state.intents),
            messages=tuple(
                MessageSnapshot(
                    role=message.role,
                    content=message.content,
                    locale=message.locale,
                    intent=message.intent,
                    timestamp=_isoformat(message.timestamp),
                )
                for message in state.messages
            ),
            created_at=_isoformat(state.created_at),
            updated_at=_isoformat(state.updated_at),
        )


class InMemoryConversationStore(ConversationStore):
    """Process-local conversation registry."""

    def __init__(
        self,
        max_context_messages: int = 25,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._max_context_messages = max_context_messages
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        # owner_id → conversation_id → state
        self._store: dict[str, dict[str, ConversationState]] = {}
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._last_sweep = clock()

    # ── Core operations ──────────────────────────────────────────────

    def resolve(
        self, owner_id: str, locale: str, conversation_id: str | None = None,
    ) -> ConversationState:
        now = self._clock()
        if now - self._last_sweep >= timedelta(seconds=SWEEP_INTERVAL_SECONDS):
            self.evict_expired(now)

        conversations = self._store.setdefault(owner_id, {})

        if conversation_id and conversation_id in conversations:
            state = conversations[conversation_id]
            if state.locale != locale:
                logger.debug(
                    "Updating conversation locale owner=%s conversation=%s %s=>%s",
                    owner_id, conversation_id, state.locale, locale,
                )
                state.locale = locale
            return state

        state = ConversationState(
            id=conversation_id or str(uuid.uuid4()),
            owner_id=owner_id,
            locale=locale,
            created_at=now,
            updated_at=now,
        )
        conversations[state.id] = state
        logger.debug(
            "Created conversation owner=%s conversation=%s locale=%s",
            owner_id, state.id, locale,
        )
        return state

    def append_message(
        self,
        state: ConversationState,
        role: Role,
        content: str,
        locale: str,
        intent: str | None = None,
    ) -> ConversationMessage:
        message = ConversationMessage(
            role=role,
            content=content,
            locale=locale,
            intent=intent,
            timestamp=self._clock(),
        )
        state.messages.append(message)

        overflow = len(state.messages) - self._max_context_messages
        if overflow > 0:
            del state.messages[:overflow]

        state.updated_at = message.timestamp
        return message

    def push_intent(self, state: ConversationState, intent: str | None) -> None:
        if not intent:
            return

        state.intents.append(intent)

        overflow = len(state.intents) - MAX_RETAINED_INTENTS
        if overflow > 0:
            del state.intents[:overflow]

    def lock(self, state: ConversationState) -> asyncio.Lock:
        key = (state.owner_id, state.id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    # ── Eviction ─────────────────────────────────────────────────────

    def evict_expired(self, now: datetime | None = None) -> int:
        """Drop conversations idle for longer than the TTL.  Returns count.

        Conversations with a turn in flight (lock held) are kept.
        """
        now = now or self._clock()
        self._last_sweep = now
        cutoff = now - self._ttl
        removed = 0

        for owner_id in list(self._store):
            conversations = self._store[owner_id]
            for conversation_id, state in list(conversations.items()):
                if state.updated_at > cutoff:
                    continue
                key = (owner_id, conversation_id)
                lock = self._locks.get(key)
                if lock is not None and lock.locked():
                    continue
                del conversations[conversation_id]
                self._locks.pop(key, None)
                removed += 1
            if not conversations:
                del self._store[owner_id]

        if removed:
            logger.debug("Evicted %d idle conversation(s)", removed)
        return removed

    # ── Introspection ────────────────────────────────────────────────

    def get(self, owner_id: str, conversation_id: str) -> ConversationState | None:
        """Look up a conversation without creating it."""
        return self._store.get(owner_id, {}).get(conversation_id)

    @property
    def conversation_count(self) -> int:
        return sum(len(conversations) for conversations in self._store.values())

    @property
    def max_context_messages(self) -> int:
        return self._max_context_messages
