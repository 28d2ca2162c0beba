"""
Completion module - language-model chat completions.

1. Protocol (CompletionProvider) defines the interface
2. Production implementation (OpenAICompatibleCompletions)
3. Offline fallback (PlaceholderCompletions)
4. Factory function (get_completion_provider)
"""

from fides_vera.core.protocols import CompletionProvider
from fides_vera.completion.openai_completion import (
    PLACEHOLDER_LABEL,
    OpenAICompatibleCompletions,
    PlaceholderCompletions,
    get_completion_provider,
)

__all__ = [
    "CompletionProvider",
    "OpenAICompatibleCompletions",
    "PlaceholderCompletions",
    "PLACEHOLDER_LABEL",
    "get_completion_provider",
]
