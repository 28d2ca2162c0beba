"""
In-memory conversation store.

Chats and messages live in integer-keyed arenas behind one re-entrant
lock. Every mutation, including the eviction sweep, holds that lock, so a
sweep can never observe or remove a half-written exchange.

Swapping in a persistent backend means reimplementing this class's public
methods; callers only see Chat/Message records and None/False for
missing ids.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

from pydantic import ValidationError as PydanticValidationError

from fides_vera.config import RetentionPolicy
from fides_vera.conversations.models import (
    Chat,
    EvictionReport,
    InsertChat,
    InsertMessage,
    Message,
    Role,
)
from fides_vera.documents.document import SourceReference
from fides_vera.errors import ValidationError
from fides_vera.observability import get_tracer
from fides_vera.observability.attributes import (
    CONVERSATIONS_CHATS_EVICTED,
    CONVERSATIONS_MESSAGES_REMOVED,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _chronological(message: Message) -> tuple[datetime, int]:
    return (message.created_at, message.id)


def _validate_chat(payload: InsertChat | Mapping[str, Any]) -> InsertChat:
    if isinstance(payload, InsertChat):
        return payload
    try:
        return InsertChat.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic("Invalid chat data", e) from e


def _validate_message(payload: InsertMessage | Mapping[str, Any]) -> InsertMessage:
    if isinstance(payload, InsertMessage):
        return payload
    try:
        return InsertMessage.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic("Invalid message data", e) from e


class ConversationStore:
    """
    Holds chats and their messages and enforces retention ceilings.

    Reads of a chat's messages are capped to the newest
    `policy.history_limit` messages; the cap bounds what is handed
    downstream, not what is kept.
    """

    def __init__(
        self,
        policy: RetentionPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.policy = policy or RetentionPolicy()
        self._clock = clock or _utcnow
        self._chats: dict[int, Chat] = {}
        self._messages: dict[int, Message] = {}
        self._chat_ids = itertools.count(1)
        self._message_ids = itertools.count(1)
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """The write lock shared by mutations and eviction."""
        return self._lock

    # -----------------------------------------------------------------------
    # CHATS
    # -----------------------------------------------------------------------

    def create_chat(self, payload: InsertChat | Mapping[str, Any]) -> Chat:
        """
        Create a chat.

        Raises:
            ValidationError: if the title is missing/blank or user_id is not an int.
        """
        data = _validate_chat(payload)
        with self._lock:
            chat = Chat(
                id=next(self._chat_ids),
                title=data.title,
                user_id=data.user_id,
                created_at=self._clock(),
            )
            self._chats[chat.id] = chat
        return chat

    def get_chat(self, chat_id: int) -> Chat | None:
        return self._chats.get(chat_id)

    def get_chats(self) -> list[Chat]:
        with self._lock:
            return list(self._chats.values())

    def get_chats_by_user_id(self, user_id: int) -> list[Chat]:
        with self._lock:
            return [chat for chat in self._chats.values() if chat.user_id == user_id]

    def update_chat_title(self, chat_id: int, title: str) -> Chat | None:
        """
        Rename a chat. Returns None when the chat does not exist.

        Raises:
            ValidationError: if the title is not a non-blank string.
        """
        if not isinstance(title, str) or not title.strip():
            raise ValidationError(
                "Valid title is required",
                [{"field": "title", "message": "must be a non-empty string"}],
            )
        with self._lock:
            chat = self._chats.get(chat_id)
            if chat is None:
                return None
            updated = replace(chat, title=title)
            self._chats[chat_id] = updated
            return updated

    def delete_chat(self, chat_id: int) -> bool:
        """Delete a chat and all of its messages. False if it did not exist."""
        with self._lock:
            if chat_id not in self._chats:
                return False
            self._delete_chat_locked(chat_id)
            return True

    # -----------------------------------------------------------------------
    # MESSAGES
    # -----------------------------------------------------------------------

    def create_message(self, payload: InsertMessage | Mapping[str, Any]) -> Message:
        """
        Append a message to a chat.

        Raises:
            ValidationError: if chat_id/role/content are missing or
                wrong-shaped, or the chat does not exist.
        """
        data = _validate_message(payload)
        with self._lock:
            self._require_chat(data.chat_id)
            return self._append_locked(data)

    def create_exchange(
        self,
        chat_id: int,
        user_content: str,
        assistant_content: str,
        sources: Sequence[SourceReference],
    ) -> tuple[Message, Message]:
        """
        Append a user message followed by its assistant reply.

        Both messages are validated before either is written, and both are
        written in one critical section.
        """
        user = _validate_message({"chat_id": chat_id, "role": Role.USER, "content": user_content})
        assistant = _validate_message(
            {
                "chat_id": chat_id,
                "role": Role.ASSISTANT,
                "content": assistant_content,
                "sources": tuple(sources),
            }
        )
        with self._lock:
            self._require_chat(chat_id)
            return self._append_locked(user), self._append_locked(assistant)

    def get_message(self, message_id: int) -> Message | None:
        return self._messages.get(message_id)

    def get_messages_by_chat_id(self, chat_id: int, limit: int | None = None) -> list[Message]:
        """
        The newest messages of a chat, oldest first.

        Args:
            chat_id: Chat to read
            limit: Maximum messages returned (default: policy.history_limit)
        """
        limit = self.policy.history_limit if limit is None else limit
        with self._lock:
            messages = self._chat_messages_locked(chat_id)
        if limit <= 0:
            return []
        return messages[-limit:]

    def count_messages(self, chat_id: int | None = None) -> int:
        """Number of stored messages, for one chat or overall."""
        with self._lock:
            if chat_id is None:
                return len(self._messages)
            return sum(1 for m in self._messages.values() if m.chat_id == chat_id)

    # -----------------------------------------------------------------------
    # EVICTION
    # -----------------------------------------------------------------------

    def evict(self) -> EvictionReport:
        """
        Enforce the retention ceilings.

        1. Per chat: keep the newest max_messages_per_chat messages.
        2. Per user: keep the newest max_chats_per_user chats, deleting
           older chats with their messages. Chats without a user share one
           bucket.
        3. Global: if more than max_total_messages remain, drop the oldest
           messages across all chats.
        """
        tracer = get_tracer()
        report = EvictionReport()

        with tracer.start_span("conversations.evict") as span, self._lock:
            policy = self.policy

            by_chat: dict[int, list[Message]] = defaultdict(list)
            for message in self._messages.values():
                by_chat[message.chat_id].append(message)
            for messages in by_chat.values():
                excess = len(messages) - policy.max_messages_per_chat
                if excess > 0:
                    messages.sort(key=_chronological)
                    for message in messages[:excess]:
                        del self._messages[message.id]
                    report.messages_trimmed_per_chat += excess

            by_user: dict[int | None, list[Chat]] = defaultdict(list)
            for chat in self._chats.values():
                by_user[chat.user_id].append(chat)
            for chats in by_user.values():
                excess = len(chats) - policy.max_chats_per_user
                if excess > 0:
                    chats.sort(key=lambda c: (c.created_at, c.id))
                    for chat in chats[:excess]:
                        report.messages_cascaded += self._delete_chat_locked(chat.id)
                        report.evicted_chat_ids.append(chat.id)
                    report.chats_evicted += excess

            excess = len(self._messages) - policy.max_total_messages
            if excess > 0:
                oldest = sorted(self._messages.values(), key=_chronological)[:excess]
                for message in oldest:
                    del self._messages[message.id]
                report.messages_trimmed_globally = excess

            span.set_attribute(CONVERSATIONS_MESSAGES_REMOVED, report.total_messages_removed)
            span.set_attribute(CONVERSATIONS_CHATS_EVICTED, report.chats_evicted)

        if report.changed:
            logger.info(
                "Eviction removed %d messages and %d chats",
                report.total_messages_removed,
                report.chats_evicted,
            )
        return report

    # -----------------------------------------------------------------------
    # INTERNALS (caller holds the lock)
    # -----------------------------------------------------------------------

    def _require_chat(self, chat_id: int) -> None:
        if chat_id not in self._chats:
            raise ValidationError(
                f"Chat {chat_id} does not exist",
                [{"field": "chat_id", "message": "unknown chat"}],
            )

    def _append_locked(self, data: InsertMessage) -> Message:
        message = Message(
            id=next(self._message_ids),
            chat_id=data.chat_id,
            role=data.role,
            content=data.content,
            sources=data.sources,
            created_at=self._clock(),
        )
        self._messages[message.id] = message
        return message

    def _chat_messages_locked(self, chat_id: int) -> list[Message]:
        messages = [m for m in self._messages.values() if m.chat_id == chat_id]
        messages.sort(key=_chronological)
        return messages

    def _delete_chat_locked(self, chat_id: int) -> int:
        doomed = [mid for mid, m in self._messages.items() if m.chat_id == chat_id]
        for message_id in doomed:
            del self._messages[message_id]
        del self._chats[chat_id]
        return len(doomed)
