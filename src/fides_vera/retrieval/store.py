"""
In-memory retriever.

Two selection strategies share one index:
- vector search (cosine similarity) when documents carry embeddings and an
  embedding provider can embed the query
- keyword-overlap search otherwise

KNOWN LIMITATION: vector search over a partially embedded index silently
ignores documents without an embedding. Callers get no signal that the
result set covers only part of the corpus.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from fides_vera.core.protocols import EmbeddingProvider
from fides_vera.documents.document import Document, SourceReference
from fides_vera.errors import LengthMismatchError, ProviderError
from fides_vera.retrieval.similarity import (
    cosine_similarity,
    extract_keywords,
    keyword_score,
    to_relevance_score,
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentVector:
    """An indexed document and its optional embedding."""

    document: Document
    embedding: np.ndarray | None = None


def _ranked(scored: list[tuple[Document, float]], limit: int) -> list[SourceReference]:
    """Sort by descending score, then ascending document id, and truncate."""
    scored.sort(key=lambda pair: (-pair[1], pair[0].id))
    return [doc.to_source_reference(score) for doc, score in scored[: max(limit, 0)]]


class InMemoryRetriever:
    """
    Relevance search over an in-memory index.

    Documents are not deduplicated: adding the same document twice indexes
    it twice, and equal scores keep insertion order after the id tie-break.
    """

    def __init__(self, embeddings: EmbeddingProvider | None = None):
        """
        Args:
            embeddings: Optional provider used to embed string queries.
                Without it, string queries always use keyword search.
        """
        self._embeddings = embeddings
        self._entries: list[DocumentVector] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def has_vectors(self) -> bool:
        """True when at least one indexed document carries an embedding."""
        return any(entry.embedding is not None for entry in self._entries)

    def add_document(self, document: Document) -> None:
        """Index a document for keyword search only."""
        self._entries.append(DocumentVector(document=document))

    def add_document_with_vector(
        self,
        document: Document,
        vector: Sequence[float] | np.ndarray,
    ) -> None:
        """Index a document with its embedding."""
        embedding = np.asarray(vector, dtype=np.float32)
        self._entries.append(DocumentVector(document=document, embedding=embedding))

    def index_corpus(
        self,
        documents: Iterable[Document],
        embeddings: EmbeddingProvider | None = None,
    ) -> None:
        """
        Index many documents, embedding them in one batch when a provider
        is given.

        If the batch embedding call fails, the documents are indexed without
        vectors and string queries fall back to keyword search.
        """
        documents = list(documents)
        vectors = None
        if embeddings is not None:
            try:
                vectors = embeddings.embed_batch([f"{doc.title}\n{doc.content}" for doc in documents])
            except ProviderError as e:
                logger.error("Failed to embed corpus, using keyword search only: %s", e)

        if vectors is None:
            for doc in documents:
                self.add_document(doc)
            logger.info("Indexed %d documents for keyword search", len(documents))
            return

        for doc, vector in zip(documents, vectors):
            self.add_document_with_vector(doc, vector)
        logger.info("Indexed %d documents with embeddings", len(documents))

    def documents(self) -> list[Document]:
        """Indexed documents in insertion order."""
        return [entry.document for entry in self._entries]

    def get_document_by_id(self, document_id: int) -> Document | None:
        for entry in self._entries:
            if entry.document.id == document_id:
                return entry.document
        return None

    # -----------------------------------------------------------------------
    # SEARCH
    # -----------------------------------------------------------------------

    def search(
        self,
        query: str | Sequence[float] | np.ndarray,
        limit: int = 5,
    ) -> list[SourceReference]:
        """
        Rank documents against a query string or a query vector.

        A blank string returns the first `limit` documents with score 1.0.
        A string is embedded and vector-searched when possible, otherwise
        keyword-searched. A vector is always vector-searched.
        """
        if not isinstance(query, str):
            return self.search_by_vector(query, limit)

        if not query.strip():
            return self._first(limit)

        if self._embeddings is not None and self.has_vectors:
            logger.debug("Using vector search for query")
            return self.search_by_vector(self._embeddings.embed(query), limit)

        logger.debug("Using keyword search for query")
        return self.search_by_keywords(query, limit)

    def search_by_keywords(self, query: str, limit: int = 5) -> list[SourceReference]:
        """Rank every indexed document by keyword-overlap ratio."""
        if not query.strip():
            return self._first(limit)

        keywords = extract_keywords(query)
        scored = [
            (entry.document, keyword_score(keywords, f"{entry.document.title} {entry.document.content}"))
            for entry in self._entries
        ]
        return _ranked(scored, limit)

    def search_by_vector(
        self,
        query_vector: Sequence[float] | np.ndarray,
        limit: int = 5,
    ) -> list[SourceReference]:
        """
        Rank embedded documents by cosine similarity, clamped to [0, 1].

        Documents without an embedding are ignored. A document whose
        embedding has the wrong dimension is skipped with a warning.
        """
        scored: list[tuple[Document, float]] = []
        unembedded = 0

        for entry in self._entries:
            if entry.embedding is None:
                unembedded += 1
                continue
            try:
                similarity = cosine_similarity(query_vector, entry.embedding)
            except LengthMismatchError as e:
                logger.warning("Skipping document %d: %s", entry.document.id, e)
                continue
            scored.append((entry.document, to_relevance_score(similarity)))

        if unembedded:
            logger.debug("Vector search ignored %d documents without embeddings", unembedded)

        return _ranked(scored, limit)

    def _first(self, limit: int) -> list[SourceReference]:
        return [
            entry.document.to_source_reference(1.0)
            for entry in self._entries[: max(limit, 0)]
        ]


def get_retriever(
    documents: Iterable[Document] = (),
    embeddings: EmbeddingProvider | None = None,
) -> InMemoryRetriever:
    """
    Factory function to build an indexed retriever.

    Args:
        documents: Corpus to index
        embeddings: Optional provider; when given, documents are embedded at
            index time and string queries use vector search

    Returns:
        An InMemoryRetriever holding the corpus
    """
    retriever = InMemoryRetriever(embeddings)
    retriever.index_corpus(documents, embeddings)
    return retriever
