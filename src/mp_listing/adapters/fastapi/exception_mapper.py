"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

import math
from typing import Any, Callable

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from mp_listing.kernel.errors import (
    BaseError,
    DomainError,
    InfrastructureError,
    SearchQueryError,
    SearchTransientError,
    ValidationError,
)
from mp_listing.observability.logging import get_logger

_log = get_logger(__name__)


class FastAPIExceptionMapper:
    """Register mp_listing error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "validation_error", "message": "...", "detail": {...}, "errors": [...]}

    Mappings
    --------
    ``ValidationError``      → 400
    ``SearchTransientError`` → 503 (with ``Retry-After`` when known)
    ``SearchQueryError``     → 500 (query details are logged, not returned)
    ``DomainError``          → 422
    ``InfrastructureError``  → 503
    """

    def __init__(self) -> None:
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ValidationError, 400),
            (SearchTransientError, 503),
            (SearchQueryError, 500),
            (DomainError, 422),
            (InfrastructureError, 503),
        ]

    @property
    def mappings(self) -> list[tuple[type[Exception], int]]:
        return list(self._map)

    def register(self, app: FastAPI) -> None:
        """Register all error handlers on a ``FastAPI`` app."""
        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, self._make_handler(status))

    def _make_handler(self, status: int) -> Callable[[Any, Any], Any]:
        def handler(request: Any, exc: Any) -> JSONResponse:
            headers: dict[str, str] = {}
            if isinstance(exc, SearchQueryError):
                _log.error("search_query_error_response", path=str(request.url.path), error=exc.to_dict())
                body: dict[str, Any] = {
                    "code": exc.code,
                    "message": "Search query could not be executed",
                    "retryable": False,
                }
            elif isinstance(exc, BaseError):
                body = exc.to_dict()
            else:
                body = {"code": "error", "message": str(exc)}
            if isinstance(exc, SearchTransientError) and exc.retry_after_seconds is not None:
                headers["Retry-After"] = str(math.ceil(exc.retry_after_seconds))
            return JSONResponse(status_code=status, content=body, headers=headers or None)

        return handler


__all__ = ["FastAPIExceptionMapper"]
