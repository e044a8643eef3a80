"""Infrastructure errors – search index and notification transport failures."""

from __future__ import annotations

from typing import Any

from mp_listing.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a caller input problem."""

    default_code = "infrastructure_error"


class SearchError(InfrastructureError):
    """The search index could not answer a listing query.

    ``retryable`` tells the caller whether repeating the same request may
    succeed.
    """

    default_code = "search_error"
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        index: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.index = index
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["retryable"] = self.retryable
        return base


class SearchTransientError(SearchError):
    """The index is temporarily unavailable; retry with backoff."""

    default_code = "search_unavailable"
    retryable = True

    def __init__(
        self,
        message: str = "Search index temporarily unavailable",
        *,
        retry_after_seconds: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after_seconds = retry_after_seconds


SearchUnavailableError = SearchTransientError


class SearchQueryError(SearchError):
    """The constructed query was rejected by the index (a bug, never retried)."""

    default_code = "search_query_invalid"


class NotificationTaskError(InfrastructureError):
    """An email or broadcast delivery failed inside a detached notification task."""

    default_code = "notification_task_failed"

    def __init__(
        self,
        kind: str,
        task_id: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"{kind} delivery failed for task '{task_id}'", **kwargs)
        self.kind = kind
        self.task_id = task_id


__all__ = [
    "InfrastructureError",
    "NotificationTaskError",
    "SearchError",
    "SearchQueryError",
    "SearchTransientError",
    "SearchUnavailableError",
]
