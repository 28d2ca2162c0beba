"""
Observability - OpenTelemetry tracing for the query pipeline.

Entry points call init_tracing() once; everything else calls get_tracer()
and opens spans:

    tracer = get_tracer()
    with tracer.start_span("rag.retrieve", attributes={...}) as span:
        span.set_attribute("rag.retrieved_doc_count", 3)

With TRACING_ENABLED unset, get_tracer() hands out a NoOpTracer and the
SDK is never imported.
"""

from __future__ import annotations

import logging

from fides_vera.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from fides_vera.observability.tracer import (
    NoOpSpan,
    NoOpTracer,
    SpanProtocol,
    TracerProtocol,
    get_tracer,
    reset_tracer,
)

logger = logging.getLogger(__name__)

_provider = None


def _build_exporter(config: TracingConfig):
    if config.exporter == "otlp":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

        logger.info("Exporting spans over OTLP to %s", config.collector_endpoint or "default endpoint")
        return OTLPSpanExporter(endpoint=config.collector_endpoint)

    from opentelemetry.sdk.trace.export import ConsoleSpanExporter

    return ConsoleSpanExporter()


def init_tracing(config: TracingConfig | None = None) -> bool:
    """
    Install a global SDK TracerProvider with a batching exporter.

    Idempotent. Returns False, installing nothing, when tracing is disabled.
    """
    global _provider
    if _provider is not None:
        return True

    config = config or get_config()
    if not config.enabled:
        logger.debug("Tracing disabled")
        return False

    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    provider = TracerProvider(resource=Resource.create({"service.name": config.service_name}))
    provider.add_span_processor(BatchSpanProcessor(_build_exporter(config)))
    trace.set_tracer_provider(provider)

    _provider = provider
    reset_tracer()
    return True


def shutdown_tracing() -> None:
    """Flush pending spans and shut the provider down."""
    global _provider
    if _provider is None:
        return

    _provider.shutdown()
    _provider = None
    reset_tracer()
    reset_config()


__all__ = [
    "init_tracing",
    "shutdown_tracing",
    "TracingConfig",
    "get_config",
    "reset_config",
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
]
