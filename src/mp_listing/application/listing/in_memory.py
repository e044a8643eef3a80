"""Application listing – InMemorySearchIndex over plain dict documents."""
from __future__ import annotations

import time
from collections import Counter
from typing import Any, Callable, Iterable

from mp_listing.application.listing.aggregations import RangeFacet, TermsFacet
from mp_listing.application.listing.query import SearchQuery
from mp_listing.application.listing.result import FacetBucket, FacetResult, IndexResponse
from mp_listing.kernel.errors import SearchQueryError, SearchTransientError

__all__ = ["InMemorySearchIndex"]


class InMemorySearchIndex:
    """Search index that operates on a list of dict-like documents.

    Useful for tests and local development.  Set ``available = False`` to
    simulate an unreachable index.
    """

    name = "in-memory"

    def __init__(
        self,
        documents: Iterable[Any] = (),
        key_fn: Callable[[Any], dict[str, Any]] | None = None,
    ) -> None:
        self._documents = list(documents)
        self._key_fn: Callable[[Any], dict[str, Any]] = key_fn or (
            lambda x: x if isinstance(x, dict) else x.__dict__
        )
        self.available = True
        self.queries: list[SearchQuery] = []

    def add(self, document: Any) -> None:
        self._documents.append(document)

    def _matches_text(self, doc: dict[str, Any], query: SearchQuery) -> bool:
        text = query.text.strip()
        if text in ("", "*"):
            return True
        needle = text.lower()
        return any(needle in str(doc.get(f) or "").lower() for f in query.fields)

    async def query(self, query: SearchQuery) -> IndexResponse:
        if not self.available:
            raise SearchTransientError(index=self.name)
        if query.page < 1 or query.page_size < 1:
            raise SearchQueryError(
                f"invalid window page={query.page} page_size={query.page_size}", index=self.name
            )
        self.queries.append(query)
        t0 = time.monotonic()

        matched = [
            doc for doc in self._documents
            if self._matches_text(self._key_fn(doc), query) and query.filters.matches(self._key_fn(doc))
        ]

        if query.boost:
            boosted = set(query.boost.ids)
            field = query.boost.field
            # stable: boosted first, the rest keep index order
            matched.sort(key=lambda d: self._key_fn(d).get(field) not in boosted)
        else:
            for sf in reversed(query.order):
                # missing values sort last in either direction
                present = [d for d in matched if self._key_fn(d).get(sf.field) is not None]
                missing = [d for d in matched if self._key_fn(d).get(sf.field) is None]
                present.sort(
                    key=lambda d, f=sf.field: _sort_key(self._key_fn(d).get(f)),
                    reverse=(sf.direction == "desc"),
                )
                matched = present + missing

        aggregations = self._aggregate(matched, query)
        start = query.offset
        page_items = matched[start: start + query.page_size]
        took_ms = int((time.monotonic() - t0) * 1000)
        return IndexResponse(
            hits=tuple(page_items),
            total=len(matched),
            took_ms=took_ms,
            aggregations=aggregations,
        )

    def _aggregate(self, matched: list[Any], query: SearchQuery) -> dict[str, FacetResult]:
        out: dict[str, FacetResult] = {}
        docs = [self._key_fn(d) for d in matched]
        for facet in query.aggregations:
            if isinstance(facet, TermsFacet):
                counter: Counter[Any] = Counter()
                for doc in docs:
                    value = doc.get(facet.field)
                    values = value if isinstance(value, (list, tuple, set)) else [value]
                    counter.update(v for v in values if v is not None)
                out[facet.name] = FacetResult(
                    name=facet.name,
                    buckets=tuple(FacetBucket(key=k, count=c) for k, c in counter.items()),
                )
            elif isinstance(facet, RangeFacet):
                numbers = [
                    doc[facet.field] for doc in docs
                    if isinstance(doc.get(facet.field), (int, float))
                    and not isinstance(doc.get(facet.field), bool)
                ]
                out[facet.name] = FacetResult(
                    name=facet.name,
                    buckets=tuple(
                        FacetBucket(
                            key=r.key,
                            count=sum(1 for n in numbers if r.contains(n)),
                            start=r.start,
                            end=r.end,
                        )
                        for r in facet.ranges
                    ),
                )
        return out


def _sort_key(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value
