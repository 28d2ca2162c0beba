"""
In-memory document store.

Documents live in an arena keyed by monotonically increasing integer ids.
The store is append-only: the corpus is loaded at startup and never edited.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from fides_vera.documents.document import (
    Document,
    DocumentMetadata,
    build_metadata,
)
from fides_vera.errors import ValidationError

logger = logging.getLogger(__name__)


class InsertDocument(BaseModel):
    """Create-request for a corpus document."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    source: str = Field(min_length=1)
    category: str = Field(min_length=1)
    metadata: dict[str, Any] | None = None


class DocumentStore:
    """
    Holds the reference corpus.

    Supports lookup by id, by category (exact match) and by
    case-insensitive substring over title and content.
    """

    def __init__(self) -> None:
        self._documents: dict[int, Document] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._documents)

    def create_document(self, payload: InsertDocument | Mapping[str, Any]) -> Document:
        """
        Validate and store a document.

        Raises:
            ValidationError: if a required field is missing or blank.
        """
        if not isinstance(payload, InsertDocument):
            try:
                payload = InsertDocument.model_validate(payload)
            except PydanticValidationError as e:
                raise ValidationError.from_pydantic("Invalid document data", e) from e

        metadata: DocumentMetadata | None = build_metadata(payload.category, payload.metadata)

        with self._lock:
            document = Document(
                id=next(self._ids),
                title=payload.title,
                content=payload.content,
                source=payload.source,
                category=payload.category,
                metadata=metadata,
            )
            self._documents[document.id] = document

        logger.debug("Stored document %d (%s)", document.id, document.title)
        return document

    def get_document(self, document_id: int) -> Document | None:
        return self._documents.get(document_id)

    def get_documents(self) -> list[Document]:
        """All documents in insertion order."""
        with self._lock:
            return list(self._documents.values())

    def get_documents_by_category(self, category: str) -> list[Document]:
        with self._lock:
            return [doc for doc in self._documents.values() if doc.category == category]

    def search_documents(self, query: str) -> list[Document]:
        """Case-insensitive substring match over title and content."""
        needle = query.lower()
        with self._lock:
            return [
                doc
                for doc in self._documents.values()
                if needle in doc.title.lower() or needle in doc.content.lower()
            ]
