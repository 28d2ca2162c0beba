"""
Conversation models.

Chat and Message are frozen dataclasses; the only mutation a chat ever
sees is a title change, done by replacing the record. InsertChat and
InsertMessage are the validated create-requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, StrictInt, StrictStr

from fides_vera.documents.document import SourceReference


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Chat:
    id: int
    title: str
    created_at: datetime
    user_id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "userId": self.user_id,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Message:
    id: int
    chat_id: int
    role: Role
    content: str
    created_at: datetime
    sources: tuple[SourceReference, ...] | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "chatId": self.chat_id,
            "role": self.role.value,
            "content": self.content,
            "sources": [s.to_dict() for s in self.sources] if self.sources is not None else None,
            "createdAt": self.created_at.isoformat(),
        }


class InsertChat(BaseModel):
    """Create-request for a chat."""

    model_config = ConfigDict(extra="forbid")

    title: StrictStr = Field(min_length=1)
    user_id: StrictInt | None = None


class InsertMessage(BaseModel):
    """Create-request for a message."""

    model_config = ConfigDict(extra="forbid")

    chat_id: StrictInt
    role: Role
    content: StrictStr = Field(min_length=1)
    sources: tuple[InstanceOf[SourceReference], ...] | None = None


@dataclass
class EvictionReport:
    """What one eviction sweep removed."""

    messages_trimmed_per_chat: int = 0
    chats_evicted: int = 0
    messages_cascaded: int = 0
    messages_trimmed_globally: int = 0
    evicted_chat_ids: list[int] = field(default_factory=list)

    @property
    def total_messages_removed(self) -> int:
        return (
            self.messages_trimmed_per_chat
            + self.messages_cascaded
            + self.messages_trimmed_globally
        )

    @property
    def changed(self) -> bool:
        return self.total_messages_removed > 0 or self.chats_evicted > 0
