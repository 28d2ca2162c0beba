"""
Context assembly - builds the bounded prompt sent to the completion provider.

Every function here is PURE: same inputs, same message list. The prompt
can be tested without a provider or a store.

Prompt size is bounded three ways:
- only the top-K retrieved sources are included
- each source's content is cut to a character budget
- only the last few history messages are kept
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from fides_vera.config import PipelineConfig
from fides_vera.conversations.models import Message
from fides_vera.documents.document import (
    CatechismMetadata,
    Category,
    CouncilDocumentMetadata,
    Document,
    EncyclicalMetadata,
    SaintMetadata,
    ScriptureMetadata,
    SourceReference,
)
from fides_vera.rag.prompts import CONTEXT_HEADER, SYSTEM_PROMPT

ELLIPSIS = "..."

DocumentLookup = Callable[[int], Document | None]
HistoryEntry = Message | Mapping[str, Any]


def _field(value: str | None) -> str:
    return value or ""


def _catechism_lines(meta: CatechismMetadata) -> str:
    return f"\nSection: {_field(meta.section)}\nParagraphs: {_field(meta.paragraphs)}\nYear: {_field(meta.year)}"


def _council_lines(meta: CouncilDocumentMetadata) -> str:
    return f"\nDocument: {_field(meta.document)}\nType: {_field(meta.type)}\nYear: {_field(meta.year)}"


def _encyclical_lines(meta: EncyclicalMetadata) -> str:
    return f"\nPope: {_field(meta.pope)}\nYear: {_field(meta.year)}\nType: {_field(meta.type)}"


def _saint_lines(meta: SaintMetadata) -> str:
    return f"\nLifespan: {_field(meta.lifespan)}\nFeast Day: {_field(meta.feast)}\nTitle: {_field(meta.title)}"


def _scripture_lines(meta: ScriptureMetadata) -> str:
    return f"\nTestament: {_field(meta.testament)}\nBooks: {_field(meta.books)}\nType: {_field(meta.type)}"


# One formatter per category, keyed by the metadata variant it accepts.
_METADATA_FORMATTERS: dict[Category, tuple[type, Callable[[Any], str]]] = {
    Category.CATECHISM: (CatechismMetadata, _catechism_lines),
    Category.COUNCIL_DOCUMENTS: (CouncilDocumentMetadata, _council_lines),
    Category.ENCYCLICALS: (EncyclicalMetadata, _encyclical_lines),
    Category.SAINTS: (SaintMetadata, _saint_lines),
    Category.SCRIPTURE: (ScriptureMetadata, _scripture_lines),
}


def format_metadata(category: str | None, document: Document | None) -> str:
    """
    Category-specific citation lines for a source, or "" when the category
    is unknown or the document carries no matching metadata.
    """
    known = Category.parse(category)
    if known is None or document is None or document.metadata is None:
        return ""
    metadata_type, formatter = _METADATA_FORMATTERS[known]
    if not isinstance(document.metadata, metadata_type):
        return ""
    return formatter(document.metadata)


def to_prompt_message(entry: HistoryEntry) -> dict[str, str]:
    """Reduce a history entry to the role+content pair the provider accepts."""
    if isinstance(entry, Message):
        return {"role": entry.role.value, "content": entry.content}
    role = entry["role"]
    return {"role": getattr(role, "value", role), "content": entry["content"]}


class ContextAssembler:
    """Builds the role-tagged message sequence for one query."""

    def __init__(
        self,
        config: PipelineConfig | None = None,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.config = config or PipelineConfig()
        self.system_prompt = system_prompt

    def truncate(self, content: str | None) -> str:
        """Cut content to the character budget, marking the cut with '...'."""
        content = content or ""
        budget = self.config.context_char_budget
        if len(content) > budget:
            return content[:budget] + ELLIPSIS
        return content

    def format_source(self, source: SourceReference, document: Document | None = None) -> str:
        """Render one retrieved source as a context block."""
        return (
            f"Document: {source.title}\n"
            f"Content: {self.truncate(source.content)}\n"
            f"Source: {source.source}\n"
            f"Category: {source.category or ''}"
            f"{format_metadata(source.category, document)}\n"
        )

    def build_context(
        self,
        sources: Sequence[SourceReference],
        lookup: DocumentLookup | None = None,
    ) -> str:
        """Join the rendered blocks for all sources."""
        return "\n".join(
            self.format_source(source, lookup(source.id) if lookup else None)
            for source in sources
        )

    def truncate_history(self, history: Sequence[HistoryEntry]) -> list[dict[str, str]]:
        """Keep the last history_limit entries, stripped to role+content."""
        limit = self.config.history_limit
        recent = list(history)[-limit:] if limit > 0 else []
        return [to_prompt_message(entry) for entry in recent]

    def build_messages(
        self,
        query: str,
        sources: Sequence[SourceReference],
        history: Sequence[HistoryEntry] = (),
        lookup: DocumentLookup | None = None,
    ) -> list[dict[str, str]]:
        """
        Assemble the full prompt.

        Returns:
            [system (instructions + context), *recent history, user query]
        """
        system = self.system_prompt + CONTEXT_HEADER + self.build_context(sources, lookup)
        return [
            {"role": "system", "content": system},
            *self.truncate_history(history),
            {"role": "user", "content": query},
        ]
