"""
Documents module - the fixed reference corpus.

This module provides:
- Document / SourceReference: corpus and citation models
- Category plus one metadata variant per category
- DocumentStore: in-memory arena of documents
- seed_document_store(): loads the reference corpus
"""

from fides_vera.documents.document import (
    Category,
    CatechismMetadata,
    CouncilDocumentMetadata,
    Document,
    DocumentMetadata,
    EncyclicalMetadata,
    GenericMetadata,
    SaintMetadata,
    ScriptureMetadata,
    SourceReference,
    build_metadata,
)
from fides_vera.documents.store import DocumentStore, InsertDocument
from fides_vera.documents.seeds import get_corpus_documents, seed_document_store

__all__ = [
    # Models
    "Category",
    "CatechismMetadata",
    "CouncilDocumentMetadata",
    "Document",
    "DocumentMetadata",
    "EncyclicalMetadata",
    "GenericMetadata",
    "SaintMetadata",
    "ScriptureMetadata",
    "SourceReference",
    "build_metadata",
    # Store
    "DocumentStore",
    "InsertDocument",
    # Seeds
    "get_corpus_documents",
    "seed_document_store",
]
