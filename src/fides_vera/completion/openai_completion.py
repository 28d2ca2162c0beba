"""
Completion Module - Single Responsibility: turn a message sequence into text.

Talks to any OpenAI-compatible chat completions endpoint (Groq by default)
through the openai SDK. When no API key is configured the factory returns
PlaceholderCompletions so the rest of the system stays usable offline.
"""

from __future__ import annotations

import logging

import openai
from openai import OpenAI

from fides_vera.config import ProviderConfig
from fides_vera.core.protocols import CompletionProvider
from fides_vera.embeddings.openai_embeddings import to_provider_error
from fides_vera.errors import ProviderError

logger = logging.getLogger(__name__)

PLACEHOLDER_LABEL = "[Placeholder response: no language model configured]"


class OpenAICompatibleCompletions:
    """
    Chat completion provider over the openai SDK.

    The client carries a request timeout; a timeout surfaces as a retryable
    ProviderError and is never retried here.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        model: str = "llama3-70b-8192",
        timeout: float = 60.0,
        client: OpenAI | None = None,
    ):
        self.model = model
        self._client = client or OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.5,
        max_tokens: int = 1500,
    ) -> str:
        """Get a chat completion for the message sequence."""
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error("Completion request failed: %s", e)
            raise to_provider_error("Completion", e) from e

        if not response.choices:
            raise ProviderError("Completion API returned no choices")

        content = response.choices[0].message.content
        if content is None:
            raise ProviderError("Completion API returned an empty message")

        if response.usage is not None:
            logger.debug(
                "Completion used %d prompt + %d completion tokens",
                response.usage.prompt_tokens,
                response.usage.completion_tokens,
            )
        return content


class PlaceholderCompletions:
    """
    Offline stand-in used when no API key is configured.

    Answers are clearly labeled so they can never be mistaken for model
    output.
    """

    def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.5,
        max_tokens: int = 1500,
    ) -> str:
        question = next(
            (m["content"] for m in reversed(messages) if m.get("role") == "user"),
            "",
        )
        return (
            f"{PLACEHOLDER_LABEL} Set GROQ_API_KEY to receive generated answers. "
            f"Your question was: {question}"
        )


def get_completion_provider(config: ProviderConfig | None = None) -> CompletionProvider:
    """
    Factory function to get the configured completion provider.

    Args:
        config: Provider config (loaded from env if not provided)
    """
    config = config or ProviderConfig.from_env()

    if not config.has_api_key:
        logger.warning("GROQ_API_KEY is not set; answers will be placeholders")
        return PlaceholderCompletions()

    return OpenAICompatibleCompletions(
        api_key=config.api_key,
        base_url=config.base_url,
        model=config.chat_model,
        timeout=config.request_timeout_seconds,
    )
