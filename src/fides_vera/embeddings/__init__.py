"""
Embeddings module - text embedding generation.

1. Protocol (EmbeddingProvider) defines the interface
2. Production implementation (OpenAIEmbeddings)
3. Test double (MockEmbeddings)
4. Factory function (get_embedding_provider)
"""

from fides_vera.core.protocols import EmbeddingProvider
from fides_vera.embeddings.openai_embeddings import (
    MockEmbeddings,
    OpenAIEmbeddings,
    get_embedding_provider,
)

__all__ = [
    "EmbeddingProvider",
    "OpenAIEmbeddings",
    "MockEmbeddings",
    "get_embedding_provider",
]
