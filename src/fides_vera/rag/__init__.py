"""
RAG module - context assembly and the query orchestrator.

This module provides:
- SYSTEM_PROMPT: assistant instructions
- ContextAssembler: bounded prompt construction
- RAGService: process_query() end to end
"""

from fides_vera.rag.prompts import SYSTEM_PROMPT
from fides_vera.rag.context import ContextAssembler, format_metadata
from fides_vera.rag.service import QueryResult, RAGService

__all__ = [
    "SYSTEM_PROMPT",
    "ContextAssembler",
    "format_metadata",
    "QueryResult",
    "RAGService",
]
