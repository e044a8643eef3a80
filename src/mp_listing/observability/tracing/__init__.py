"""Observability tracing – ports and the default no-op tracer."""
from mp_listing.observability.tracing.noop import NoopTracer
from mp_listing.observability.tracing.ports import Span, Tracer

__all__ = ["NoopTracer", "Span", "Tracer"]
