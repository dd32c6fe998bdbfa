"""Tests for the in-memory conversation store."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest

from src.assistant.conversation_store import SWEEP_INTERVAL_SECONDS, InMemoryConversationStore
from src.config import MAX_RETAINED_INTENTS

# ── Resolution ───────────────────────────────────────────────────────


class TestResolve:
    def test_creates_conversation_with_generated_id(self, store):
        state = store.resolve("user-1", "en")
        assert state.id
        assert state.owner_id == "user-1"
        assert state.locale == "en"
        assert state.messages == []
        assert state.created_at == state.updated_at

    def test_generated_ids_are_unique(self, store):
        assert store.resolve("user-1", "en").id != store.resolve("user-1", "en").id

    def test_returns_existing_conversation(self, store):
        first = store.resolve("user-1", "en")
        assert store.resolve("user-1", "en", first.id) is first

    def test_unknown_id_is_created_verbatim(self, store):
        state = store.resolve("user-1", "fr", "my-chat")
        assert state.id == "my-chat"
        assert store.get("user-1", "my-chat") is state

    def test_same_id_is_isolated_per_owner(self, store):
        mine = store.resolve("user-1", "en", "shared")
        store.append_message(mine, "user", "private", "en")
        theirs = store.resolve("user-2", "en", "shared")
        assert theirs is not mine
        assert theirs.messages == []
        assert store.conversation_count == 2

    def test_locale_is_updated_on_reuse(self, store):
        state = store.resolve("user-1", "en", "c1")
        store.resolve("user-1", "ar", "c1")
        assert state.locale == "ar"


# ── Messages & intents ──────────────────────────────────────────────


class TestAppendMessage:
    def test_appends_and_touches_updated_at(self, store, clock):
        state = store.resolve("user-1", "en")
        clock.advance(5)
        message = store.append_message(state, "user", "hello", "en", "generic")
        assert state.messages == [message]
        assert message.timestamp == clock.now
        assert state.updated_at == clock.now
        assert state.created_at < state.updated_at

    def test_trims_oldest_messages(self, clock):
        store = InMemoryConversationStore(3, clock=clock)
        state = store.resolve("user-1", "en")
        for i in range(5):
            store.append_message(state, "user", f"m{i}", "en")
        assert [m.content for m in state.messages] == ["m2", "m3", "m4"]

    def test_messages_are_immutable(self, store):
        state = store.resolve("user-1", "en")
        message = store.append_message(state, "user", "hello", "en")
        with pytest.raises(dataclasses.FrozenInstanceError):
            message.content = "changed"


class TestPushIntent:
    def test_ignores_none(self, store):
        state = store.resolve("user-1", "en")
        store.push_intent(state, None)
        store.push_intent(state, "")
        assert state.intents == []

    def test_keeps_most_recent_intents(self, store):
        state = store.resolve("user-1", "en")
        for i in range(MAX_RETAINED_INTENTS + 3):
            store.push_intent(state, f"intent-{i}")
        assert len(state.intents) == MAX_RETAINED_INTENTS
        assert state.intents[0] == "intent-3"
        assert state.intents[-1] == f"intent-{MAX_RETAINED_INTENTS + 2}"


# ── Snapshots ────────────────────────────────────────────────────────


class TestSnapshot:
    def test_timestamps_are_iso_utc_with_millis(self, store):
        state = store.resolve("user-1", "en")
        store.append_message(state, "user", "hello", "en")
        snapshot = store.snapshot(state)
        assert snapshot.created_at == "2026-02-17T10:30:00.000Z"
        assert snapshot.messages[0].timestamp == "2026-02-17T10:30:00.000Z"

    def test_snapshot_is_detached_from_state(self, store):
        state = store.resolve("user-1", "en")
        store.append_message(state, "user", "first", "en")
        store.push_intent(state, "document_assistance")
        snapshot = store.snapshot(state)

        store.append_message(state, "assistant", "second", "en")
        store.push_intent(state, "financial_advice")

        assert len(snapshot.messages) == 1
        assert snapshot.intents == ("document_assistance",)
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.locale = "fr"


# ── Eviction ─────────────────────────────────────────────────────────


class TestEviction:
    def test_evicts_idle_conversations(self, clock):
        store = InMemoryConversationStore(ttl_seconds=100, clock=clock)
        store.resolve("user-1", "en", "old")
        clock.advance(101)
        assert store.evict_expired() == 1
        assert store.get("user-1", "old") is None
        assert store.conversation_count == 0

    def test_keeps_recently_updated_conversations(self, clock):
        store = InMemoryConversationStore(ttl_seconds=100, clock=clock)
        state = store.resolve("user-1", "en", "active")
        clock.advance(90)
        store.append_message(state, "user", "still here", "en")
        clock.advance(90)
        assert store.evict_expired() == 0
        assert store.get("user-1", "active") is state

    def test_resolve_sweeps_lazily(self, clock):
        store = InMemoryConversationStore(ttl_seconds=10, clock=clock)
        store.resolve("user-1", "en", "old")
        clock.advance(SWEEP_INTERVAL_SECONDS)
        store.resolve("user-2", "en", "new")
        assert store.get("user-1", "old") is None
        assert store.get("user-2", "new") is not None

    def test_expired_id_is_recreated_empty(self, clock):
        store = InMemoryConversationStore(ttl_seconds=10, clock=clock)
        state = store.resolve("user-1", "en", "c1")
        store.append_message(state, "user", "hello", "en")
        clock.advance(SWEEP_INTERVAL_SECONDS)
        fresh = store.resolve("user-1", "en", "c1")
        assert fresh is not state
        assert fresh.messages == []

    def test_skips_conversation_with_turn_in_flight(self, clock):
        store = InMemoryConversationStore(ttl_seconds=10, clock=clock)
        state = store.resolve("user-1", "en", "busy")

        async def _run():
            async with store.lock(state):
                clock.advance(60)
                return store.evict_expired()

        assert asyncio.run(_run()) == 0
        assert store.get("user-1", "busy") is state


# ── Locks ────────────────────────────────────────────────────────────


class TestLock:
    def test_same_conversation_shares_a_lock(self, store):
        state = store.resolve("user-1", "en", "c1")
        assert store.lock(state) is store.lock(store.resolve("user-1", "en", "c1"))

    def test_different_owners_get_different_locks(self, store):
        a = store.resolve("user-1", "en", "c1")
        b = store.resolve("user-2", "en", "c1")
        assert store.lock(a) is not store.lock(b)
