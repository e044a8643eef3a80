"""Elasticsearch adapter – ElasticsearchIndex (httpx)."""
from __future__ import annotations

from typing import Any

import httpx

from mp_listing.application.listing.aggregations import RangeFacet, TermsFacet
from mp_listing.application.listing.query import FilterSet, SearchQuery
from mp_listing.application.listing.result import FacetBucket, FacetResult, IndexResponse
from mp_listing.kernel.errors import SearchQueryError, SearchTransientError

__all__ = ["ElasticsearchIndex", "build_request_body", "parse_response"]

BOOST_WEIGHT = 1000.0


def _filter_clauses(filters: FilterSet) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    must: list[dict[str, Any]] = []
    must_not: list[dict[str, Any]] = []
    for f in filters.values():
        if f.op == "eq":
            must.append({"term": {f.field: f.value}})
        elif f.op == "in":
            must.append({"terms": {f.field: list(f.value)}})
        else:
            must_not.append({"terms": {f.field: list(f.value)}})
    return must, must_not


def _aggregation(facet: TermsFacet | RangeFacet) -> dict[str, Any]:
    if isinstance(facet, TermsFacet):
        return {"terms": {"field": facet.field, "order": {"_key": facet.order}}}
    ranges = []
    for r in facet.ranges:
        bound: dict[str, float] = {}
        if r.start is not None:
            bound["from"] = float(r.start)
        if r.end is not None:
            bound["to"] = float(r.end)
        ranges.append(bound)
    return {"range": {"field": facet.field, "ranges": ranges}}


def build_request_body(query: SearchQuery) -> dict[str, Any]:
    """Translate a :class:`SearchQuery` into an Elasticsearch ``_search`` body."""
    text = query.text.strip()
    if text in ("", "*"):
        match: dict[str, Any] = {"match_all": {}}
    else:
        match = {"multi_match": {"query": text, "fields": list(query.fields), "operator": "and"}}

    filter_clauses, must_not = _filter_clauses(query.filters)
    boolean: dict[str, Any] = {"must": [match], "filter": filter_clauses}
    if must_not:
        boolean["must_not"] = must_not
    if query.boost:
        boolean["should"] = [
            {
                "constant_score": {
                    "filter": {"terms": {query.boost.field: list(query.boost.ids)}},
                    "boost": BOOST_WEIGHT,
                }
            }
        ]

    body: dict[str, Any] = {
        "query": {"bool": boolean},
        "from": query.offset,
        "size": query.page_size,
        "track_total_hits": True,
    }
    if query.order:
        body["sort"] = [{sf.field: {"order": sf.direction}} for sf in query.order]
    if len(query.aggregations):
        body["aggs"] = {facet.name: _aggregation(facet) for facet in query.aggregations}
    return body


def parse_response(payload: dict[str, Any]) -> IndexResponse:
    """Turn an Elasticsearch ``_search`` response into an :class:`IndexResponse`."""
    hits = payload.get("hits") or {}
    total = hits.get("total", 0)
    if isinstance(total, dict):
        total = total.get("value", 0)
    documents = tuple(hit.get("_source", {}) for hit in hits.get("hits", []))

    aggregations: dict[str, FacetResult] = {}
    for name, agg in (payload.get("aggregations") or {}).items():
        raw_buckets = agg.get("buckets", [])
        if isinstance(raw_buckets, dict):
            raw_buckets = [dict(b, key=k) for k, b in raw_buckets.items()]
        aggregations[name] = FacetResult(
            name=name,
            buckets=tuple(
                FacetBucket(
                    key=b.get("key"),
                    count=int(b.get("doc_count", 0)),
                    start=b.get("from"),
                    end=b.get("to"),
                )
                for b in raw_buckets
            ),
        )
    return IndexResponse(
        hits=documents,
        total=int(total),
        took_ms=int(payload.get("took", 0)),
        aggregations=aggregations,
    )


class ElasticsearchIndex:
    """SearchIndex backed by an Elasticsearch (or OpenSearch) cluster.

    Connection failures, timeouts, ``429`` and ``5xx`` responses raise
    :class:`SearchTransientError`; any other ``4xx`` raises
    :class:`SearchQueryError`.
    """

    def __init__(
        self,
        base_url: str,
        index: str,
        *,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        self._index = index
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "ElasticsearchIndex":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def query(self, query: SearchQuery) -> IndexResponse:
        body = build_request_body(query)
        try:
            response = await self._client.post(f"/{self._index}/_search", json=body)
        except httpx.TimeoutException as exc:
            raise SearchTransientError(
                f"Search request to '{self._index}' timed out", index=self._index, cause=exc
            ) from exc
        except httpx.TransportError as exc:
            raise SearchTransientError(
                f"Could not reach search index '{self._index}'", index=self._index, cause=exc
            ) from exc

        status = response.status_code
        if status == 429 or status >= 500:
            retry_after = response.headers.get("retry-after")
            raise SearchTransientError(
                f"Search index '{self._index}' answered HTTP {status}",
                index=self._index,
                status_code=status,
                retry_after_seconds=float(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if status >= 400:
            raise SearchQueryError(
                f"Search index '{self._index}' rejected the query: {_error_reason(response)}",
                index=self._index,
                status_code=status,
                detail={"body": body},
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchQueryError(
                f"Search index '{self._index}' returned a non-JSON body",
                index=self._index,
                status_code=status,
                cause=exc,
            ) from exc
        return parse_response(payload)


def _error_reason(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    error = data.get("error") if isinstance(data, dict) else data
    if isinstance(error, dict):
        return str(error.get("reason") or error.get("type") or error)
    return str(error)
