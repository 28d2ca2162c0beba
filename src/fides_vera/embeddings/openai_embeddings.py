"""
Embeddings Module - Single Responsibility: Generate text embeddings.

It has ONE job: convert text to vector embeddings. The retriever decides
what to do with them.
"""

from __future__ import annotations

import hashlib
import logging

import numpy as np
import openai
from openai import OpenAI

from fides_vera.config import ProviderConfig
from fides_vera.core.protocols import EmbeddingProvider
from fides_vera.errors import ProviderError

logger = logging.getLogger(__name__)


class OpenAIEmbeddings:
    """
    Embedding provider for any OpenAI-compatible /embeddings endpoint.

    Uses text-embedding-ada-002 by default (1536 dimensions).
    """

    def __init__(
        self,
        model: str = "text-embedding-ada-002",
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: OpenAI | None = None,
    ):
        self.model = model
        self._client = client or OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    @property
    def dimensions(self) -> int:
        """Return embedding dimensions for the model."""
        model_dims = {
            "text-embedding-3-small": 1536,
            "text-embedding-3-large": 3072,
            "text-embedding-ada-002": 1536,
        }
        return model_dims.get(self.model, 1536)

    def embed(self, text: str) -> np.ndarray:
        """Generate embedding for a single text."""
        try:
            response = self._client.embeddings.create(input=text, model=self.model)
        except openai.OpenAIError as e:
            logger.error("Embedding request failed: %s", e)
            raise to_provider_error("Embedding", e) from e
        return np.array(response.data[0].embedding, dtype=np.float32)

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts efficiently."""
        if not texts:
            return []

        try:
            response = self._client.embeddings.create(input=texts, model=self.model)
        except openai.OpenAIError as e:
            logger.error("Batch embedding request failed: %s", e)
            raise to_provider_error("Embedding", e) from e
        return [np.array(item.embedding, dtype=np.float32) for item in response.data]


class MockEmbeddings:
    """
    Deterministic embedding provider for tests and offline runs.

    Derives pseudo-embeddings from a SHA-256 digest of the text. Identical
    texts map to identical vectors; nothing else is meaningful.
    """

    def __init__(self, dimensions: int = 64):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> np.ndarray:
        """Generate deterministic pseudo-embedding from text hash."""
        digest = hashlib.sha256(text.encode()).digest()
        # Repeat hash to fill dimensions
        repeated = digest * (self._dimensions // len(digest) + 1)
        raw = np.frombuffer(repeated, dtype=np.uint8)[: self._dimensions]
        return raw.astype(np.float32) / 255.0 - 0.5

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate embeddings for multiple texts."""
        return [self.embed(text) for text in texts]


def to_provider_error(kind: str, error: openai.OpenAIError) -> ProviderError:
    """Map an openai SDK error onto ProviderError."""
    if isinstance(error, openai.APITimeoutError):
        return ProviderError(f"{kind} request timed out", retryable=True)
    if isinstance(error, openai.APIStatusError):
        return ProviderError(
            f"{kind} API error: {error.status_code} {error.message}",
            status=error.status_code,
        )
    if isinstance(error, openai.APIConnectionError):
        return ProviderError(f"{kind} API connection failed: {error}", retryable=True)
    return ProviderError(f"{kind} API error: {error}")


def get_embedding_provider(config: ProviderConfig | None = None) -> EmbeddingProvider | None:
    """
    Factory function to get the configured embedding provider.

    Returns None when embeddings are disabled, so the retriever falls back
    to keyword search.

    Args:
        config: Provider config (loaded from env if not provided)
    """
    config = config or ProviderConfig.from_env()

    if config.use_mock_embeddings:
        return MockEmbeddings()
    if not config.embeddings_enabled:
        return None
    if not config.has_api_key:
        logger.warning("EMBEDDINGS_ENABLED is set but no API key is configured; using keyword search")
        return None
    return OpenAIEmbeddings(
        model=config.embedding_model,
        api_key=config.api_key,
        base_url=config.base_url,
        timeout=config.request_timeout_seconds,
    )
