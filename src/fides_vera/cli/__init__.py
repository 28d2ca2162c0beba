"""
CLI module - command-line interface.

Provides entry points for:
- Browsing and searching the corpus
- Asking questions, one-shot or interactively
"""

from fides_vera.cli.commands import (
    main,
    run_ask_cli,
    run_chat_cli,
    run_documents_cli,
    run_search_cli,
)

__all__ = [
    "main",
    "run_ask_cli",
    "run_chat_cli",
    "run_documents_cli",
    "run_search_cli",
]
