"""OpenTelemetry adapter – OtelTracer."""
from __future__ import annotations

import contextlib
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from mp_listing.observability.tracing import Span, Tracer


class _OtelSpan(Span):
    def __init__(self, span: Any) -> None:
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def record_exception(self, exc: BaseException) -> None:
        self._span.record_exception(exc)
        self._span.set_status(Status(StatusCode.ERROR, str(exc)))


class OtelTracer(Tracer):
    """OpenTelemetry tracer adapter.

    Uses the global tracer provider unless *tracer_provider* is given.
    """

    def __init__(self, service_name: str = "mp-listing", tracer_provider: Any | None = None) -> None:
        self._tracer = trace.get_tracer(service_name, tracer_provider=tracer_provider)

    @contextlib.contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[Span]:
        with self._tracer.start_as_current_span(
            name,
            attributes=attributes,
            record_exception=False,
            set_status_on_exception=False,
        ) as otel_span:
            span = _OtelSpan(otel_span)
            try:
                yield span
            except BaseException as exc:
                span.record_exception(exc)
                raise
            otel_span.set_status(Status(StatusCode.OK))


__all__ = ["OtelTracer"]
