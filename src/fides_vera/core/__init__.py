"""
Core module - shared protocols for the entire system.

USAGE:
------
from fides_vera.core import Retriever, CompletionProvider, EmbeddingProvider
"""

from fides_vera.core.protocols import (
    CompletionProvider,
    EmbeddingProvider,
    Retriever,
)

__all__ = [
    "CompletionProvider",
    "EmbeddingProvider",
    "Retriever",
]
