"""
Unit Tests for the Conversation Store

Tests chat and message CRUD, capped reads, validation and cascade delete.
A fake clock makes creation order explicit.
"""

from datetime import datetime, timedelta, timezone

import pytest

from fides_vera.config import RetentionPolicy
from fides_vera.conversations import ConversationStore, InsertMessage, Role
from fides_vera.documents.document import SourceReference
from fides_vera.errors import ValidationError


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


class FakeClock:
    """Returns strictly increasing timestamps, one second apart."""

    def __init__(self):
        self._now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore(RetentionPolicy(history_limit=5), clock=FakeClock())


@pytest.fixture
def chat(store):
    return store.create_chat({"title": "Virtues", "user_id": 1})


def add_messages(store, chat_id, count):
    return [
        store.create_message(
            {"chat_id": chat_id, "role": "user" if i % 2 == 0 else "assistant", "content": f"message {i}"}
        )
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# CHATS
# ---------------------------------------------------------------------------


class TestChats:
    """Test chat create/read/update/delete."""

    def test_create_and_get_chat(self, store):
        chat = store.create_chat({"title": "First"})

        assert chat.id == 1
        assert chat.user_id is None
        assert store.get_chat(chat.id) == chat

    def test_get_missing_chat_returns_none(self, store):
        assert store.get_chat(42) is None

    def test_get_chats_by_user_id(self, store):
        store.create_chat({"title": "A", "user_id": 1})
        store.create_chat({"title": "B", "user_id": 2})
        store.create_chat({"title": "C", "user_id": 1})

        assert [c.title for c in store.get_chats_by_user_id(1)] == ["A", "C"]

    def test_create_chat_requires_title(self, store):
        with pytest.raises(ValidationError):
            store.create_chat({"user_id": 1})

    def test_create_chat_rejects_non_int_user(self, store):
        with pytest.raises(ValidationError):
            store.create_chat({"title": "A", "user_id": "one"})

    def test_update_title(self, store, chat):
        updated = store.update_chat_title(chat.id, "Charity")

        assert updated.title == "Charity"
        assert updated.created_at == chat.created_at
        assert store.get_chat(chat.id).title == "Charity"

    def test_update_missing_chat_returns_none(self, store):
        assert store.update_chat_title(99, "Nope") is None

    def test_update_blank_title_raises(self, store, chat):
        with pytest.raises(ValidationError):
            store.update_chat_title(chat.id, "  ")

    def test_delete_missing_chat_returns_false(self, store):
        assert store.delete_chat(99) is False

    def test_delete_cascades_to_messages(self, store, chat):
        other = store.create_chat({"title": "Other"})
        add_messages(store, chat.id, 3)
        add_messages(store, other.id, 2)

        assert store.delete_chat(chat.id) is True

        assert store.get_chat(chat.id) is None
        assert store.get_messages_by_chat_id(chat.id) == []
        assert store.count_messages() == 2


# ---------------------------------------------------------------------------
# MESSAGES
# ---------------------------------------------------------------------------


class TestMessages:
    """Test message creation and capped reads."""

    def test_create_message(self, store, chat):
        message = store.create_message(
            InsertMessage(chat_id=chat.id, role=Role.USER, content="What is grace?")
        )

        assert message.role is Role.USER
        assert message.sources is None
        assert store.get_message(message.id) == message

    def test_get_missing_message_returns_none(self, store):
        assert store.get_message(7) is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"role": "user", "content": "no chat id"},
            {"chat_id": 1, "content": "no role"},
            {"chat_id": 1, "role": "user"},
            {"chat_id": 1, "role": "user", "content": ""},
            {"chat_id": "1", "role": "user", "content": "string id"},
            {"chat_id": 1, "role": "moderator", "content": "bad role"},
        ],
    )
    def test_malformed_message_raises(self, store, chat, payload):
        with pytest.raises(ValidationError):
            store.create_message(payload)

        assert store.count_messages() == 0

    def test_message_for_unknown_chat_raises(self, store):
        with pytest.raises(ValidationError):
            store.create_message({"chat_id": 5, "role": "user", "content": "orphan"})

    def test_reads_capped_to_newest_in_ascending_order(self, store, chat):
        created = add_messages(store, chat.id, 9)

        messages = store.get_messages_by_chat_id(chat.id)

        assert len(messages) == 5
        assert [m.id for m in messages] == [m.id for m in created[-5:]]
        assert [m.created_at for m in messages] == sorted(m.created_at for m in messages)

    def test_cap_does_not_delete(self, store, chat):
        add_messages(store, chat.id, 9)
        store.get_messages_by_chat_id(chat.id)

        assert store.count_messages(chat.id) == 9

    def test_explicit_limit(self, store, chat):
        add_messages(store, chat.id, 9)

        assert len(store.get_messages_by_chat_id(chat.id, limit=100)) == 9
        assert store.get_messages_by_chat_id(chat.id, limit=0) == []

    def test_same_timestamp_ordered_by_id(self):
        fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        store = ConversationStore(clock=lambda: fixed)
        chat = store.create_chat({"title": "Same instant"})
        created = add_messages(store, chat.id, 3)

        assert [m.id for m in store.get_messages_by_chat_id(chat.id)] == [m.id for m in created]


# ---------------------------------------------------------------------------
# EXCHANGES
# ---------------------------------------------------------------------------


class TestExchange:
    """Test writing a user/assistant pair."""

    def test_exchange_writes_user_then_assistant(self, store, chat):
        source = SourceReference(id=1, title="Catechism", source="Vatican", relevance_score=0.5)

        user, assistant = store.create_exchange(chat.id, "Question?", "Answer.", [source])

        assert user.role is Role.USER and user.sources is None
        assert assistant.role is Role.ASSISTANT
        assert assistant.sources == (source,)
        assert user.id < assistant.id
        assert [m.id for m in store.get_messages_by_chat_id(chat.id)] == [user.id, assistant.id]

    def test_invalid_exchange_writes_nothing(self, store, chat):
        with pytest.raises(ValidationError):
            store.create_exchange(chat.id, "Question?", "", [])

        assert store.count_messages(chat.id) == 0

    def test_exchange_for_unknown_chat_raises(self, store):
        with pytest.raises(ValidationError):
            store.create_exchange(404, "Question?", "Answer.", [])
