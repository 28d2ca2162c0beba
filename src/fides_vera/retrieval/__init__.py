"""
Retrieval module - relevance search for RAG.

This module provides:
- cosine_similarity / keyword_score: scoring functions
- InMemoryRetriever: vector search with keyword fallback
- get_retriever(): Factory function
"""

from fides_vera.retrieval.similarity import (
    cosine_similarity,
    extract_keywords,
    keyword_score,
    to_relevance_score,
)
from fides_vera.retrieval.store import (
    DocumentVector,
    InMemoryRetriever,
    get_retriever,
)

__all__ = [
    # Scoring
    "cosine_similarity",
    "extract_keywords",
    "keyword_score",
    "to_relevance_score",
    # Store
    "DocumentVector",
    "InMemoryRetriever",
    "get_retriever",
]
