"""Observability – NoopTracer."""
from __future__ import annotations

import contextlib
from typing import Any, Iterator

from mp_listing.observability.tracing.ports import Span, Tracer


class _NoopSpan(Span):
    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def record_exception(self, exc: BaseException) -> None:
        pass


class NoopTracer(Tracer):
    """Silent no-op tracer."""

    @contextlib.contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[Span]:  # noqa: ARG002
        yield _NoopSpan()


__all__ = ["NoopTracer"]
