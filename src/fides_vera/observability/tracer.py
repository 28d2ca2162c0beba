"""
Span facade over OpenTelemetry.

Pipeline code talks to a TracerProtocol and never imports opentelemetry
directly. get_tracer() resolves once per process:

- TRACING_ENABLED unset/false      -> NoOpTracer
- enabled, no SDK provider yet     -> NoOpTracer
- enabled, init_tracing() has run  -> OTelTracer
"""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from typing import Any, Iterator, Protocol

STATUS_OK = "ok"
STATUS_ERROR = "error"


class SpanProtocol(Protocol):
    def set_attribute(self, key: str, value: Any) -> None: ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """`status` is STATUS_OK or STATUS_ERROR."""
        ...

    def record_exception(self, exception: BaseException) -> None: ...


class TracerProtocol(Protocol):
    def start_span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> AbstractContextManager[SpanProtocol]: ...


# ---------------------------------------------------------------------------
# DISABLED TRACING
# ---------------------------------------------------------------------------


class NoOpSpan:
    """Accepts every span call and records nothing."""

    def set_attribute(self, key: str, value: Any) -> None:
        return None

    def set_status(self, status: str, description: str | None = None) -> None:
        return None

    def record_exception(self, exception: BaseException) -> None:
        return None


_NOOP_SPAN = NoOpSpan()


class NoOpTracer:
    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[NoOpSpan]:
        yield _NOOP_SPAN


# ---------------------------------------------------------------------------
# OPENTELEMETRY-BACKED TRACING
# ---------------------------------------------------------------------------


class OTelSpan:
    """Adapts an opentelemetry Span to SpanProtocol."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_status(self, status: str, description: str | None = None) -> None:
        from opentelemetry.trace import StatusCode

        if status == STATUS_OK:
            self._span.set_status(StatusCode.OK)
        else:
            self._span.set_status(StatusCode.ERROR, description)

    def record_exception(self, exception: BaseException) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    """Starts each span as the current span, so nested spans get a parent."""

    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[OTelSpan]:
        with self._tracer.start_as_current_span(name, attributes=attributes) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# RESOLUTION
# ---------------------------------------------------------------------------

_tracer: TracerProtocol | None = None


def _resolve_tracer() -> TracerProtocol:
    from fides_vera.observability.config import get_config

    config = get_config()
    if not config.enabled:
        return NoOpTracer()

    from opentelemetry import trace
    from opentelemetry.sdk.trace import TracerProvider

    # The API's default provider is a proxy until init_tracing installs one.
    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()

    return OTelTracer(trace.get_tracer(config.service_name))


def get_tracer() -> TracerProtocol:
    """Return the process-wide tracer, resolving it on first use."""
    global _tracer
    if _tracer is None:
        _tracer = _resolve_tracer()
    return _tracer


def reset_tracer() -> None:
    """Forget the resolved tracer; the next get_tracer() resolves again."""
    global _tracer
    _tracer = None
