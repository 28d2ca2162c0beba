"""
Tracing Configuration

Loads tracing settings from environment variables.
Supports graceful degradation when OpenTelemetry is not set up.
"""

import os
from dataclasses import dataclass


@dataclass
class TracingConfig:
    """Configuration for OpenTelemetry tracing.

    Environment Variables:
        TRACING_ENABLED: Enable tracing (default: false)
        TRACING_SERVICE_NAME: Service name on spans (default: fides-vera)
        TRACING_EXPORTER: "console" or "otlp" (default: console)
        TRACING_COLLECTOR_ENDPOINT: OTLP endpoint (used with TRACING_EXPORTER=otlp)
        TRACING_CAPTURE_CONTENT: Record prompts/answers on spans (default: false)

    PRIVACY WARNING:
        TRACING_CAPTURE_CONTENT=true exports raw user questions and model
        answers to the trace backend.
    """

    enabled: bool = False
    service_name: str = "fides-vera"
    exporter: str = "console"
    collector_endpoint: str | None = None
    capture_content: bool = False

    @classmethod
    def from_env(cls) -> "TracingConfig":
        """Load config from environment variables."""
        return cls(
            enabled=os.environ.get("TRACING_ENABLED", "false").lower() in ("true", "1", "yes"),
            service_name=os.environ.get("TRACING_SERVICE_NAME", "fides-vera"),
            exporter=os.environ.get("TRACING_EXPORTER", "console").lower(),
            collector_endpoint=os.environ.get("TRACING_COLLECTOR_ENDPOINT") or None,
            capture_content=os.environ.get("TRACING_CAPTURE_CONTENT", "false").lower() in ("true", "1", "yes"),
        )


# Global config singleton
_config: TracingConfig | None = None


def get_config() -> TracingConfig:
    """Get the global tracing config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = TracingConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
