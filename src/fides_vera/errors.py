"""
Error taxonomy for the RAG core.

Not-found conditions have no error type: stores report a missing
chat, message or document by returning None/False so callers can map it to
a 404-style outcome.
"""

from __future__ import annotations

from typing import Any


class FidesVeraError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(FidesVeraError):
    """A create/update request was malformed. Nothing was written."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, message: str, exc: Any) -> "ValidationError":
        """Wrap a pydantic ValidationError, keeping field locations."""
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return cls(message, errors)


class LengthMismatchError(FidesVeraError):
    """Two vectors of different dimension were compared."""

    def __init__(self, left: int, right: int):
        super().__init__(f"Vectors must be of the same length (got {left} and {right})")
        self.left = left
        self.right = right


class ProviderError(FidesVeraError):
    """A completion or embedding call failed or returned non-success."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.retryable = retryable


class QueryProcessingError(FidesVeraError):
    """process_query failed as a whole; `cause` holds the underlying error."""

    def __init__(self, cause: BaseException, message: str = "Failed to process message"):
        super().__init__(f"{message}: {cause}")
        self.message = message
        self.cause = cause
