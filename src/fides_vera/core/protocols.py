"""
Core protocols defining contracts between the RAG components.

Every external collaborator and store is consumed through one of these
Protocols, so the orchestrator can be wired with real clients in
production and with fakes in tests.

PATTERN:
- Protocol defines the contract
- Concrete classes implement it
- Factory functions pick the implementation from configuration
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    from fides_vera.documents.document import Document, SourceReference


# ---------------------------------------------------------------------------
# EMBEDDING PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Contract for embedding generation.

    Implementations:
    - OpenAIEmbeddings (production)
    - MockEmbeddings (testing/offline)
    """

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        ...

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        ...


# ---------------------------------------------------------------------------
# COMPLETION PROVIDER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class CompletionProvider(Protocol):
    """
    Contract for chat completion.

    Messages are {"role", "content"} dicts; roles are system/user/assistant.

    Implementations:
    - OpenAICompatibleCompletions (Groq or any OpenAI-compatible endpoint)
    - PlaceholderCompletions (no API key configured)
    """

    def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.5,
        max_tokens: int = 1500,
    ) -> str:
        """Return the generated text for a message sequence."""
        ...


# ---------------------------------------------------------------------------
# RETRIEVER PROTOCOL
# ---------------------------------------------------------------------------


@runtime_checkable
class Retriever(Protocol):
    """
    Contract for relevance search over the corpus.

    Implementations:
    - InMemoryRetriever
    """

    def search(
        self,
        query: str | Sequence[float] | np.ndarray,
        limit: int = 5,
    ) -> list[SourceReference]:
        """Rank documents against a query string or query vector."""
        ...

    def get_document_by_id(self, document_id: int) -> Document | None:
        """Look up an indexed document."""
        ...
