"""
Seed data for the document store.

Separating corpus content from store infrastructure keeps the store
testable with controlled data.
"""

from fides_vera.documents.seeds.catholic_corpus import (
    get_corpus_documents,
    seed_document_store,
)

__all__ = ["get_corpus_documents", "seed_document_store"]
