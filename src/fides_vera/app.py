"""
Application wiring.

Builds every component once, explicitly, and hands them to each other by
reference. Nothing in the package is a hidden module-level singleton, so
tests can build as many independent applications as they like.

Lifecycle: create_application() -> start() -> ... -> stop()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fides_vera.completion import get_completion_provider
from fides_vera.config import Settings
from fides_vera.conversations import ConversationStore, EvictionScheduler
from fides_vera.core.protocols import CompletionProvider, EmbeddingProvider
from fides_vera.documents import DocumentStore, seed_document_store
from fides_vera.embeddings import get_embedding_provider
from fides_vera.rag import ContextAssembler, RAGService
from fides_vera.retrieval import InMemoryRetriever, get_retriever

logger = logging.getLogger(__name__)


@dataclass
class Application:
    """All long-lived components of one process."""

    settings: Settings
    documents: DocumentStore
    retriever: InMemoryRetriever
    conversations: ConversationStore
    rag: RAGService
    scheduler: EvictionScheduler

    def start(self) -> None:
        """Start background work (the eviction sweep)."""
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()


def create_application(
    settings: Settings | None = None,
    completion: CompletionProvider | None = None,
    embeddings: EmbeddingProvider | None = None,
) -> Application:
    """
    Build an application from settings.

    Args:
        settings: Settings (loaded from env if not provided)
        completion: Completion provider override (factory default otherwise)
        embeddings: Embedding provider override (factory default otherwise)

    Returns:
        A wired, not yet started, Application
    """
    settings = settings or Settings.from_env()

    documents = DocumentStore()
    corpus = seed_document_store(documents)

    if embeddings is None:
        embeddings = get_embedding_provider(settings.provider)
    retriever = get_retriever(corpus, embeddings)

    if completion is None:
        completion = get_completion_provider(settings.provider)

    conversations = ConversationStore(settings.retention)
    rag = RAGService(
        retriever=retriever,
        conversations=conversations,
        completion=completion,
        config=settings.pipeline,
        assembler=ContextAssembler(settings.pipeline),
    )
    scheduler = EvictionScheduler(conversations)

    logger.info("Document store initialized with %d documents", len(documents))
    return Application(
        settings=settings,
        documents=documents,
        retriever=retriever,
        conversations=conversations,
        rag=rag,
        scheduler=scheduler,
    )
