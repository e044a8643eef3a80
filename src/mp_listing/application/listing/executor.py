"""Application listing – SearchIndex port and SearchExecutor."""
from __future__ import annotations

from typing import Literal, Mapping, Protocol, Sequence, runtime_checkable

from mp_listing.application.listing.aggregations import AggregationSpec, RangeFacet, TermsFacet
from mp_listing.application.listing.query import BoostSpec, FilterSet, SearchQuery, SortField
from mp_listing.application.listing.result import FacetBucket, FacetResult, IndexResponse, ResultPage
from mp_listing.kernel.errors import SearchError, SearchQueryError, SearchTransientError
from mp_listing.observability.logging import get_logger
from mp_listing.observability.tracing import NoopTracer, Tracer

__all__ = ["SearchExecutor", "SearchIndex"]

_log = get_logger(__name__)


@runtime_checkable
class SearchIndex(Protocol):
    """Port: an externally owned full-text index.

    Implementations raise :class:`SearchTransientError` when the index cannot
    be reached and :class:`SearchQueryError` when it rejects the query.
    """

    async def query(self, query: SearchQuery) -> IndexResponse: ...


class SearchExecutor:
    """Run one combined listing query and shape the answer into a :class:`ResultPage`."""

    def __init__(
        self,
        index: SearchIndex,
        *,
        fields: Sequence[str] = ("first_name", "last_name"),
        default_order_field: str = "first_name",
        default_order_direction: Literal["asc", "desc"] = "desc",
        tracer: Tracer | None = None,
    ) -> None:
        self._index = index
        self._fields = tuple(fields)
        self._default_order = SortField(default_order_field, default_order_direction)
        self._tracer = tracer or NoopTracer()

    def resolve_order(
        self, boost: BoostSpec | None, order: Sequence[SortField] | None
    ) -> tuple[SortField, ...]:
        """Boosting disables explicit ordering; otherwise fall back to the default sort."""
        if boost:
            return ()
        if order:
            return tuple(order)
        return (self._default_order,)

    async def execute(
        self,
        text: str,
        filters: FilterSet,
        *,
        aggregations: AggregationSpec,
        boost: BoostSpec | None = None,
        order: Sequence[SortField] | None = None,
        page: int = 1,
        page_size: int = 100,
    ) -> ResultPage:
        query = SearchQuery(
            text=text or "*",
            filters=filters,
            boost=boost if boost else None,
            order=self.resolve_order(boost, order),
            aggregations=aggregations,
            fields=self._fields,
            page=page,
            page_size=page_size,
        )
        attributes = {"listing.page": page, "listing.page_size": page_size, "listing.boosted": bool(query.boost)}
        with self._tracer.start_span("listing.search", attributes=attributes) as span:
            response = await self._query_index(query)
            span.set_attribute("listing.total_count", response.total)

        result = ResultPage(
            items=response.hits,
            page=page,
            page_size=page_size,
            total_count=response.total,
            took_ms=response.took_ms,
            aggregations=complete_facets(aggregations, response.aggregations),
        )
        _log.debug(
            "listing_executed",
            total_count=result.total_count,
            returned=len(result.items),
            took_ms=result.took_ms,
            boosted=bool(query.boost),
        )
        return result

    async def _query_index(self, query: SearchQuery) -> IndexResponse:
        try:
            return await self._index.query(query)
        except SearchTransientError as exc:
            _log.warning("search_index_unavailable", error=exc.message, page=query.page)
            raise
        except SearchError as exc:
            _log.error("search_query_rejected", error=exc.message, filters=sorted(query.filters))
            raise
        except Exception as exc:
            _log.error("search_query_failed", error=repr(exc), filters=sorted(query.filters))
            raise SearchQueryError(f"Search index raised {type(exc).__name__}", cause=exc) from exc


def complete_facets(
    spec: AggregationSpec, realized: Mapping[str, FacetResult]
) -> dict[str, FacetResult]:
    """Return one :class:`FacetResult` per planned facet.

    Range facets always carry every planned bucket, in plan order, with a
    zero count where the index reported none.
    """
    out: dict[str, FacetResult] = {}
    for facet in spec:
        got = realized.get(facet.name)
        if isinstance(facet, RangeFacet):
            counts = got.counts() if got is not None else {}
            out[facet.name] = FacetResult(
                name=facet.name,
                buckets=tuple(
                    FacetBucket(key=r.key, count=counts.get(r.key, 0), start=r.start, end=r.end)
                    for r in facet.ranges
                ),
            )
        elif isinstance(facet, TermsFacet):
            buckets = got.buckets if got is not None else ()
            out[facet.name] = FacetResult(
                name=facet.name,
                buckets=tuple(
                    sorted(buckets, key=lambda b: _bucket_key(b.key), reverse=facet.order == "desc")
                ),
            )
    return out


def _bucket_key(key: object) -> tuple[int, float | str]:
    # numbers before strings; numbers compared numerically
    if isinstance(key, (int, float)) and not isinstance(key, bool):
        return (0, key)
    return (1, str(key))
