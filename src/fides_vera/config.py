"""
Runtime configuration.

Loads settings from environment variables into plain dataclasses. Every
component takes the slice it needs (ProviderConfig, PipelineConfig,
RetentionPolicy) so tests can construct them directly without touching
the environment.

Environment Variables:
    GROQ_API_KEY: Completion/embedding API key (unset -> placeholder answers)
    GROQ_BASE_URL: OpenAI-compatible base URL
    CHAT_MODEL, EMBEDDING_MODEL: Model names
    EMBEDDINGS_ENABLED: Index the corpus with embeddings (default: false)
    USE_MOCK_EMBEDDINGS: Use deterministic hash embeddings (default: false)
    REQUEST_TIMEOUT_SECONDS: Provider call timeout (default: 60)
    RETRIEVAL_LIMIT, CONTEXT_CHAR_BUDGET, HISTORY_LIMIT: Prompt budgeting
    COMPLETION_TEMPERATURE, COMPLETION_MAX_TOKENS: Completion parameters
    MAX_MESSAGES_PER_CHAT, MAX_CHATS_PER_USER, MAX_TOTAL_MESSAGES: Retention
    EVICTION_INTERVAL_SECONDS: Eviction sweep period (default: 900)
    LOG_LEVEL: Logging level (default: INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_CHAT_MODEL = "llama3-70b-8192"
DEFAULT_EMBEDDING_MODEL = "text-embedding-ada-002"

_TRUE_VALUES = ("true", "1", "yes")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class ProviderConfig:
    """Language-model backend settings."""

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    embeddings_enabled: bool = False
    use_mock_embeddings: bool = False
    request_timeout_seconds: float = 60.0

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        """Load provider config from environment variables."""
        return cls(
            api_key=os.environ.get("GROQ_API_KEY") or None,
            base_url=os.environ.get("GROQ_BASE_URL") or DEFAULT_BASE_URL,
            chat_model=os.environ.get("CHAT_MODEL") or DEFAULT_CHAT_MODEL,
            embedding_model=os.environ.get("EMBEDDING_MODEL") or DEFAULT_EMBEDDING_MODEL,
            embeddings_enabled=_env_bool("EMBEDDINGS_ENABLED", False),
            use_mock_embeddings=_env_bool("USE_MOCK_EMBEDDINGS", False),
            request_timeout_seconds=_env_float("REQUEST_TIMEOUT_SECONDS", 60.0),
        )


@dataclass
class PipelineConfig:
    """Prompt budgeting and completion parameters."""

    retrieval_limit: int = 3
    context_char_budget: int = 1000
    history_limit: int = 5
    temperature: float = 0.5
    max_tokens: int = 1500

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Load pipeline config from environment variables."""
        return cls(
            retrieval_limit=_env_int("RETRIEVAL_LIMIT", 3),
            context_char_budget=_env_int("CONTEXT_CHAR_BUDGET", 1000),
            history_limit=_env_int("HISTORY_LIMIT", 5),
            temperature=_env_float("COMPLETION_TEMPERATURE", 0.5),
            max_tokens=_env_int("COMPLETION_MAX_TOKENS", 1500),
        )


@dataclass
class RetentionPolicy:
    """
    Retention ceilings enforced by the eviction sweep.

    `history_limit` caps what get_messages_by_chat_id returns, not what is
    stored.
    """

    max_messages_per_chat: int = 20
    max_chats_per_user: int = 25
    max_total_messages: int = 500
    history_limit: int = 5
    eviction_interval_seconds: float = 900.0

    @classmethod
    def from_env(cls) -> "RetentionPolicy":
        """Load retention policy from environment variables."""
        return cls(
            max_messages_per_chat=_env_int("MAX_MESSAGES_PER_CHAT", 20),
            max_chats_per_user=_env_int("MAX_CHATS_PER_USER", 25),
            max_total_messages=_env_int("MAX_TOTAL_MESSAGES", 500),
            history_limit=_env_int("HISTORY_LIMIT", 5),
            eviction_interval_seconds=_env_float("EVICTION_INTERVAL_SECONDS", 900.0),
        )


@dataclass
class Settings:
    """All settings for one application instance."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    retention: RetentionPolicy = field(default_factory=RetentionPolicy)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load all settings from environment variables."""
        return cls(
            provider=ProviderConfig.from_env(),
            pipeline=PipelineConfig.from_env(),
            retention=RetentionPolicy.from_env(),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
