"""
Unit Tests for the RAG Orchestrator

Tests process_query end to end with an in-memory retriever, a real
conversation store and a mocked completion provider.

Checks:
1. The exchange is persisted user-then-assistant with the same sources
2. Completion parameters and prompt shape
3. Failures persist nothing and surface as QueryProcessingError
4. Calls on one chat are serialized
"""

import threading
import time
from unittest.mock import MagicMock

import pytest

from fides_vera.config import PipelineConfig, RetentionPolicy
from fides_vera.conversations import ConversationStore, Role
from fides_vera.documents import DocumentStore, seed_document_store
from fides_vera.errors import ProviderError, QueryProcessingError, ValidationError
from fides_vera.rag import RAGService
from fides_vera.rag.service import DEFAULT_CHAT_TITLE
from fides_vera.retrieval import get_retriever


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def retriever():
    store = DocumentStore()
    return get_retriever(seed_document_store(store))


@pytest.fixture
def conversations():
    return ConversationStore()


@pytest.fixture
def completion():
    provider = MagicMock()
    provider.model = "test-model"
    provider.complete.return_value = "Faith, hope and charity are the theological virtues."
    return provider


@pytest.fixture
def service(retriever, conversations, completion):
    return RAGService(retriever, conversations, completion)


@pytest.fixture
def chat(conversations):
    return conversations.create_chat({"title": "Virtues", "user_id": 1})


# ---------------------------------------------------------------------------
# HAPPY PATH
# ---------------------------------------------------------------------------


class TestProcessQuery:
    """Test a successful query."""

    def test_returns_answer_and_sources(self, service, chat):
        result = service.process_query(chat.id, "What are the theological virtues?")

        assert result.content == "Faith, hope and charity are the theological virtues."
        assert 0 < len(result.sources) <= 3
        assert all(0.0 <= s.relevance_score <= 1.0 for s in result.sources)

    def test_persists_user_then_assistant(self, service, conversations, chat):
        result = service.process_query(chat.id, "What are the theological virtues?")

        messages = conversations.get_messages_by_chat_id(chat.id)
        assert [m.role for m in messages] == [Role.USER, Role.ASSISTANT]
        assert messages[0].content == "What are the theological virtues?"
        assert messages[0].sources is None
        assert messages[1].content == result.content
        assert messages[1].sources == result.sources
        assert result.assistant_message == messages[1]

    def test_completion_parameters(self, service, completion, chat):
        service.process_query(chat.id, "What is charity?")

        _, kwargs = completion.complete.call_args
        assert kwargs == {"temperature": 0.5, "max_tokens": 1500}

    def test_prompt_shape(self, service, completion, chat):
        history = [
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Peace be with you."},
        ]

        service.process_query(chat.id, "What is charity?", history)

        messages = completion.complete.call_args.args[0]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert "Relevant context:" in messages[0]["content"]
        assert messages[-1] == {"role": "user", "content": "What is charity?"}

    def test_retrieval_limit_from_config(self, retriever, conversations, completion, chat):
        service = RAGService(retriever, conversations, completion, PipelineConfig(retrieval_limit=1))

        result = service.process_query(chat.id, "Catechism faith")

        assert len(result.sources) == 1

    def test_default_history_comes_from_store(self, service, completion, chat):
        service.process_query(chat.id, "First question about faith")
        completion.complete.return_value = "Second answer"

        service.process_query(chat.id, "Second question about hope")

        messages = completion.complete.call_args.args[0]
        assert [m["content"] for m in messages[1:-1]] == [
            "First question about faith",
            "Faith, hope and charity are the theological virtues.",
        ]

    def test_empty_history_ignores_store(self, service, completion, chat):
        service.process_query(chat.id, "First question about faith")

        service.process_query(chat.id, "Second question", [])

        assert len(completion.complete.call_args.args[0]) == 2

    def test_to_dict(self, service, chat):
        data = service.process_query(chat.id, "What is hope?").to_dict()

        assert data["role"] == "assistant"
        assert all("relevanceScore" in s for s in data["sources"])


# ---------------------------------------------------------------------------
# FAILURES
# ---------------------------------------------------------------------------


class TestProcessQueryFailures:
    """Test that failures persist nothing."""

    def test_provider_failure_wrapped(self, service, conversations, completion, chat):
        error = ProviderError("Completion API error: 500 boom", status=500)
        completion.complete.side_effect = error

        with pytest.raises(QueryProcessingError) as exc_info:
            service.process_query(chat.id, "What is grace?")

        assert exc_info.value.cause is error
        assert exc_info.value.message == "Failed to process message"
        assert conversations.count_messages(chat.id) == 0

    def test_retriever_failure_wrapped(self, conversations, completion, chat):
        retriever = MagicMock()
        retriever.search.side_effect = RuntimeError("index unavailable")
        service = RAGService(retriever, conversations, completion)

        with pytest.raises(QueryProcessingError) as exc_info:
            service.process_query(chat.id, "What is grace?")

        assert isinstance(exc_info.value.cause, RuntimeError)
        completion.complete.assert_not_called()
        assert conversations.count_messages(chat.id) == 0

    def test_empty_completion_persists_nothing(self, service, conversations, completion, chat):
        completion.complete.return_value = ""

        with pytest.raises(QueryProcessingError):
            service.process_query(chat.id, "What is grace?")

        assert conversations.count_messages(chat.id) == 0

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_rejected(self, service, completion, chat, query):
        with pytest.raises(ValidationError):
            service.process_query(chat.id, query)

        completion.complete.assert_not_called()

    def test_unknown_chat_rejected(self, service, completion):
        with pytest.raises(ValidationError):
            service.process_query(404, "What is grace?")

        completion.complete.assert_not_called()


# ---------------------------------------------------------------------------
# START CHAT AND CONCURRENCY
# ---------------------------------------------------------------------------


class TestStartChat:
    """Test creating a chat with its first exchange."""

    def test_start_chat(self, service, conversations):
        chat, result = service.start_chat("Who was Saint Francis?", user_id=3)

        assert chat.title == DEFAULT_CHAT_TITLE
        assert chat.user_id == 3
        assert conversations.count_messages(chat.id) == 2
        assert result.user_message.chat_id == chat.id

    def test_start_chat_with_title(self, service):
        chat, _ = service.start_chat("Who was Saint Francis?", title="Saints")

        assert chat.title == "Saints"

    def test_started_chats_are_bounded_by_eviction(self, retriever, completion):
        conversations = ConversationStore(RetentionPolicy(max_chats_per_user=2))
        service = RAGService(retriever, conversations, completion)
        started = [service.start_chat(f"Question {i}")[0] for i in range(10)]

        report = conversations.evict()

        assert [c.id for c in conversations.get_chats()] == [c.id for c in started[-2:]]
        assert report.chats_evicted == 8
        assert conversations.count_messages() == 4


class TestConcurrency:
    """Test that exchanges on one chat never interleave."""

    def test_same_chat_calls_alternate_roles(self, retriever, conversations, chat):
        completion = MagicMock()

        def slow_complete(messages, **kwargs):
            time.sleep(0.01)
            return "answer to " + messages[-1]["content"]

        completion.complete.side_effect = slow_complete
        service = RAGService(retriever, conversations, completion)
        threads = [
            threading.Thread(target=service.process_query, args=(chat.id, f"question {i}"))
            for i in range(6)
        ]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        messages = conversations.get_messages_by_chat_id(chat.id, limit=100)
        assert len(messages) == 12
        for user, assistant in zip(messages[::2], messages[1::2]):
            assert user.role is Role.USER
            assert assistant.role is Role.ASSISTANT
            assert assistant.content == "answer to " + user.content

    def test_locks_released_for_deleted_chats(self, service, conversations):
        for i in range(50):
            chat, _ = service.start_chat(f"question {i}")
            conversations.delete_chat(chat.id)

        assert conversations.get_chats() == []
        assert len(service._chat_locks) == 0
