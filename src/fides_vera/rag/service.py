"""
RAG orchestrator - the end-to-end query operation.

process_query():
1. Retrieve the top-K sources for the query
2. Assemble the bounded prompt (instructions + context + history + query)
3. Get a completion
4. Persist the user message, then the assistant message with its sources
5. Return the answer and the sources

Nothing is persisted unless every earlier step succeeded. Any failure
surfaces as one QueryProcessingError carrying the cause; there is no
automatic retry.
"""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass, field
from typing import Sequence

from fides_vera.config import PipelineConfig
from fides_vera.conversations.models import Chat, Message
from fides_vera.conversations.store import ConversationStore
from fides_vera.core.protocols import CompletionProvider, Retriever
from fides_vera.documents.document import SourceReference
from fides_vera.errors import QueryProcessingError, ValidationError
from fides_vera.observability import get_config as get_tracing_config
from fides_vera.observability import get_tracer
from fides_vera.observability.attributes import (
    GEN_AI_COMPLETION,
    GEN_AI_PROMPT,
    RAG_CHAT_ID,
    RAG_HISTORY_LENGTH,
    RAG_PROMPT_MESSAGE_COUNT,
    completion_attributes,
    retrieval_attributes,
)
from fides_vera.rag.context import ContextAssembler, HistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_CHAT_TITLE = "New Chat"


@dataclass
class QueryResult:
    """Answer text plus the sources it was grounded on."""

    content: str
    sources: tuple[SourceReference, ...]
    user_message: Message | None = field(default=None, repr=False)
    assistant_message: Message | None = field(default=None, repr=False)

    def to_dict(self) -> dict:
        return {
            "role": "assistant",
            "content": self.content,
            "sources": [s.to_dict() for s in self.sources],
        }


class RAGService:
    """
    Composes retriever, context assembler, completion provider and
    conversation store.

    All collaborators are injected. Calls for the same chat are serialized
    so a user message is always immediately followed by its reply.
    """

    def __init__(
        self,
        retriever: Retriever,
        conversations: ConversationStore,
        completion: CompletionProvider,
        config: PipelineConfig | None = None,
        assembler: ContextAssembler | None = None,
    ):
        self.retriever = retriever
        self.conversations = conversations
        self.completion = completion
        self.config = config or PipelineConfig()
        self.assembler = assembler or ContextAssembler(self.config)
        # Entries vanish once no call holds the lock, so deleted chats leave nothing behind.
        self._chat_locks: weakref.WeakValueDictionary[int, threading.Lock] = weakref.WeakValueDictionary()
        self._chat_locks_guard = threading.Lock()

    def process_query(
        self,
        chat_id: int,
        query: str,
        history: Sequence[HistoryEntry] | None = None,
    ) -> QueryResult:
        """
        Answer `query` within a chat and persist the exchange.

        Args:
            chat_id: Existing chat to append to
            query: The user's question
            history: Prior turns; defaults to the chat's stored recent messages

        Raises:
            ValidationError: blank query or unknown chat (nothing attempted)
            QueryProcessingError: retrieval, completion or persistence failed
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError(
                "Message content is required",
                [{"field": "content", "message": "must be a non-empty string"}],
            )
        if self.conversations.get_chat(chat_id) is None:
            raise ValidationError(
                f"Chat {chat_id} does not exist",
                [{"field": "chat_id", "message": "unknown chat"}],
            )

        with self._lock_for(chat_id):
            if history is None:
                history = self.conversations.get_messages_by_chat_id(chat_id)
            return self._process_locked(chat_id, query, history)

    def start_chat(
        self,
        query: str,
        title: str | None = None,
        user_id: int | None = None,
    ) -> tuple[Chat, QueryResult]:
        """Create a chat and answer its first message."""
        chat = self.conversations.create_chat(
            {"title": title or DEFAULT_CHAT_TITLE, "user_id": user_id}
        )
        return chat, self.process_query(chat.id, query, [])

    def _process_locked(
        self,
        chat_id: int,
        query: str,
        history: Sequence[HistoryEntry],
    ) -> QueryResult:
        tracer = get_tracer()
        capture = get_tracing_config().capture_content

        with tracer.start_span("rag.process_query", attributes={RAG_CHAT_ID: chat_id}) as span:
            try:
                with tracer.start_span("rag.retrieve") as retrieve_span:
                    sources = self.retriever.search(query, self.config.retrieval_limit)
                    for key, value in retrieval_attributes([s.id for s in sources]).items():
                        retrieve_span.set_attribute(key, value)

                messages = self.assembler.build_messages(
                    query,
                    sources,
                    history,
                    lookup=self.retriever.get_document_by_id,
                )
                span.set_attribute(RAG_HISTORY_LENGTH, len(messages) - 2)
                span.set_attribute(RAG_PROMPT_MESSAGE_COUNT, len(messages))

                attrs = completion_attributes(
                    getattr(self.completion, "model", None),
                    self.config.temperature,
                    self.config.max_tokens,
                )
                with tracer.start_span("rag.complete", attributes=attrs) as complete_span:
                    content = self.completion.complete(
                        messages,
                        temperature=self.config.temperature,
                        max_tokens=self.config.max_tokens,
                    )
                    if capture:
                        complete_span.set_attribute(GEN_AI_PROMPT, query)
                        complete_span.set_attribute(GEN_AI_COMPLETION, content)

                user_message, assistant_message = self.conversations.create_exchange(
                    chat_id, query, content, sources
                )
            except Exception as e:
                logger.error("Error processing query for chat %d: %s", chat_id, e)
                span.record_exception(e)
                span.set_status("error", str(e))
                raise QueryProcessingError(e) from e

            span.set_status("ok")

        return QueryResult(
            content=content,
            sources=tuple(sources),
            user_message=user_message,
            assistant_message=assistant_message,
        )

    def _lock_for(self, chat_id: int) -> threading.Lock:
        with self._chat_locks_guard:
            lock = self._chat_locks.get(chat_id)
            if lock is None:
                lock = self._chat_locks[chat_id] = threading.Lock()
            return lock
