"""
Unit Tests for Runtime Configuration
"""

from unittest.mock import patch

import pytest

from fides_vera.config import (
    DEFAULT_BASE_URL,
    PipelineConfig,
    ProviderConfig,
    RetentionPolicy,
    Settings,
)


class TestDefaults:
    """Test values used when the environment is empty."""

    def test_settings_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings.from_env()

        assert settings.provider.api_key is None
        assert settings.provider.has_api_key is False
        assert settings.provider.base_url == DEFAULT_BASE_URL
        assert settings.provider.chat_model == "llama3-70b-8192"
        assert settings.provider.request_timeout_seconds == 60.0
        assert settings.pipeline == PipelineConfig()
        assert settings.retention == RetentionPolicy()
        assert settings.log_level == "INFO"

    def test_pipeline_defaults(self):
        config = PipelineConfig()

        assert config.retrieval_limit == 3
        assert config.context_char_budget == 1000
        assert config.history_limit == 5
        assert config.temperature == 0.5
        assert config.max_tokens == 1500

    def test_retention_defaults(self):
        policy = RetentionPolicy()

        assert policy.max_messages_per_chat == 20
        assert policy.max_chats_per_user == 25
        assert policy.max_total_messages == 500
        assert policy.eviction_interval_seconds == 900.0


class TestFromEnv:
    """Test environment overrides."""

    def test_provider_overrides(self):
        env = {
            "GROQ_API_KEY": "secret",
            "CHAT_MODEL": "mixtral-8x7b",
            "EMBEDDINGS_ENABLED": "yes",
            "REQUEST_TIMEOUT_SECONDS": "15",
        }
        with patch.dict("os.environ", env, clear=True):
            config = ProviderConfig.from_env()

        assert config.has_api_key is True
        assert config.chat_model == "mixtral-8x7b"
        assert config.embeddings_enabled is True
        assert config.request_timeout_seconds == 15.0

    def test_empty_api_key_means_none(self):
        with patch.dict("os.environ", {"GROQ_API_KEY": ""}, clear=True):
            assert ProviderConfig.from_env().api_key is None

    def test_numeric_overrides(self):
        env = {
            "RETRIEVAL_LIMIT": "4",
            "COMPLETION_TEMPERATURE": "0.2",
            "MAX_MESSAGES_PER_CHAT": "10",
            "EVICTION_INTERVAL_SECONDS": "30",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = Settings.from_env()

        assert settings.pipeline.retrieval_limit == 4
        assert settings.pipeline.temperature == 0.2
        assert settings.retention.max_messages_per_chat == 10
        assert settings.retention.eviction_interval_seconds == 30.0

    def test_history_limit_shared(self):
        with patch.dict("os.environ", {"HISTORY_LIMIT": "8"}, clear=True):
            settings = Settings.from_env()

        assert settings.pipeline.history_limit == 8
        assert settings.retention.history_limit == 8

    def test_invalid_integer_raises(self):
        with patch.dict("os.environ", {"RETRIEVAL_LIMIT": "three"}, clear=True):
            with pytest.raises(ValueError, match="RETRIEVAL_LIMIT"):
                PipelineConfig.from_env()

    def test_invalid_float_raises(self):
        with patch.dict("os.environ", {"COMPLETION_TEMPERATURE": "warm"}, clear=True):
            with pytest.raises(ValueError, match="COMPLETION_TEMPERATURE"):
                PipelineConfig.from_env()
