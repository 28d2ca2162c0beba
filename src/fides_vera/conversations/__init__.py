"""
Conversations module - chats, messages and retention.

This module provides:
- Chat / Message / Role: conversation records
- ConversationStore: in-memory store with capped reads and eviction
- EvictionScheduler: recurring eviction sweep
"""

from fides_vera.config import RetentionPolicy
from fides_vera.conversations.models import (
    Chat,
    EvictionReport,
    InsertChat,
    InsertMessage,
    Message,
    Role,
)
from fides_vera.conversations.store import ConversationStore
from fides_vera.conversations.eviction import EvictionScheduler

__all__ = [
    # Models
    "Chat",
    "Message",
    "Role",
    "InsertChat",
    "InsertMessage",
    "EvictionReport",
    # Store
    "ConversationStore",
    "RetentionPolicy",
    "EvictionScheduler",
]
