"""
CLI commands - thin entry points over the application.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Build the application
4. Print results
5. Return exit code
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from fides_vera.app import Application, create_application
from fides_vera.config import Settings
from fides_vera.documents.document import SourceReference
from fides_vera.errors import QueryProcessingError
from fides_vera.logging_setup import configure_logging
from fides_vera.observability import init_tracing, shutdown_tracing


def _load_env() -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    load_dotenv()


def _build_app() -> Application:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    init_tracing()
    return create_application(settings)


def _print_sources(sources: Sequence[SourceReference]) -> None:
    if not sources:
        print("  (no sources)")
        return
    for source in sources:
        score = f"{source.relevance_score:.2f}" if source.relevance_score is not None else "-"
        category = source.category or "Uncategorized"
        print(f"  [{score}] #{source.id} {source.title} ({category}, {source.source})")


def run_documents_cli() -> int:
    """CLI entry point for listing the corpus."""
    _load_env()

    parser = argparse.ArgumentParser(description="List corpus documents")
    parser.add_argument("--category", help="Exact category name, e.g. 'Catechism'")
    args = parser.parse_args()

    app = _build_app()
    if args.category:
        documents = app.documents.get_documents_by_category(args.category)
    else:
        documents = app.documents.get_documents()

    for doc in documents:
        print(f"#{doc.id:<3} {doc.category:<18} {doc.title}")
    print(f"\nTotal: {len(documents)}")
    return 0


def run_search_cli() -> int:
    """CLI entry point for ranking sources without calling the model."""
    _load_env()

    parser = argparse.ArgumentParser(description="Rank corpus documents for a query")
    parser.add_argument("query", help="Search text")
    parser.add_argument("--limit", type=int, default=5, help="Maximum results")
    args = parser.parse_args()

    app = _build_app()
    _print_sources(app.retriever.search(args.query, args.limit))
    return 0


def run_ask_cli() -> int:
    """CLI entry point for a single question in a new chat."""
    _load_env()

    parser = argparse.ArgumentParser(description="Ask one question")
    parser.add_argument("query", help="The question")
    parser.add_argument("--title", help="Chat title")
    args = parser.parse_args()

    app = _build_app()
    try:
        _, result = app.rag.start_chat(args.query, title=args.title)
    except QueryProcessingError as e:
        print(f"{e.message}: {e.cause}", file=sys.stderr)
        return 1

    print(result.content)
    print("\nSources:")
    _print_sources(result.sources)
    return 0


def run_chat_cli() -> int:
    """CLI entry point for an interactive conversation."""
    _load_env()

    parser = argparse.ArgumentParser(description="Interactive chat")
    parser.add_argument("--title", default="New Chat", help="Chat title")
    args = parser.parse_args()

    app = _build_app()
    app.start()
    chat = app.conversations.create_chat({"title": args.title})
    print("Type 'exit' to quit.")

    try:
        while True:
            try:
                query = input("\nYou: ").strip()
            except EOFError:
                break
            if query.lower() in ("exit", "quit"):
                break
            if not query:
                continue
            try:
                result = app.rag.process_query(chat.id, query)
            except QueryProcessingError as e:
                print(f"{e.message}: {e.cause}", file=sys.stderr)
                continue
            print(f"\nFides Vera: {result.content}")
            _print_sources(result.sources)
    finally:
        app.stop()
    return 0


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        fides-vera documents [--category C]
        fides-vera search QUERY [--limit N]
        fides-vera ask QUERY [--title T]
        fides-vera chat
    """
    parser = argparse.ArgumentParser(
        description="Fides Vera teaching assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  documents   List the reference corpus
  search      Rank sources for a query (no model call)
  ask         Ask one question in a new chat
  chat        Interactive conversation

Examples:
  fides-vera documents --category Saints
  fides-vera search "faith hope charity" --limit 3
  fides-vera ask "What are the theological virtues?"
        """,
    )

    parser.add_argument(
        "command",
        choices=["documents", "search", "ask", "chat"],
        help="Command to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "documents": run_documents_cli,
        "search": run_search_cli,
        "ask": run_ask_cli,
        "chat": run_chat_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    sys.exit(main())
