"""Observability – Tracer and Span ports."""
from __future__ import annotations

import abc
import contextlib
from typing import Any, Iterator


class Span(abc.ABC):
    """An active trace span."""

    @abc.abstractmethod
    def set_attribute(self, key: str, value: Any) -> None: ...

    @abc.abstractmethod
    def record_exception(self, exc: BaseException) -> None: ...


class Tracer(abc.ABC):
    """Port: open spans around units of work.

    ``start_span`` records any exception leaving the block on the span and
    re-raises it.
    """

    @abc.abstractmethod
    @contextlib.contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[Span]: ...


__all__ = ["Span", "Tracer"]
