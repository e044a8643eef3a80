"""Resilience – TransientSearchRetry, a tenacity policy for listing callers.

Only :class:`SearchTransientError` is retried.  :class:`SearchQueryError`
and :class:`ValidationError` surface on the first attempt.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

import tenacity

from mp_listing.kernel.errors import SearchTransientError
from mp_listing.observability.logging import get_logger

T = TypeVar("T")

_log = get_logger(__name__)


class TransientSearchRetry:
    """Retry an async listing call with exponential backoff.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call).
    wait:
        A ``tenacity`` wait strategy.  Defaults to
        ``wait_exponential(multiplier=0.2, max=5)``.
    kwargs:
        Forwarded to :class:`tenacity.AsyncRetrying` (e.g. ``sleep`` in tests).

    Example
    -------
    ::

        retry = TransientSearchRetry(max_attempts=4)
        page = await retry.execute_async(lambda: bus.ask(ListAccounts(request)))
    """

    def __init__(self, max_attempts: int = 3, wait: Any = None, **kwargs: Any) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._max_attempts = max_attempts
        self._wait = wait or tenacity.wait_exponential(multiplier=0.2, max=5)
        self._extra_kwargs = kwargs

    def _before_sleep(self, state: tenacity.RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        _log.warning("search_retry_scheduled", attempt=state.attempt_number, error=repr(exc))

    def _build_async_retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=tenacity.retry_if_exception_type(SearchTransientError),
            reraise=True,
            before_sleep=self._before_sleep,
            **self._extra_kwargs,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute *func* with retry; the last transient error is re-raised."""
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
        return result  # type: ignore[return-value]


__all__ = ["TransientSearchRetry"]
