"""Unit tests – SearchExecutor."""
from __future__ import annotations

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mp_listing.adapters.elasticsearch import parse_response
from mp_listing.application.listing import (
    AggregationPlanner,
    BoostSpec,
    FilterSet,
    InMemorySearchIndex,
    ListingFilters,
    ListingRequest,
    QueryFilterBuilder,
    SearchExecutor,
    SearchQuery,
    SortField,
)
from mp_listing.kernel.errors import SearchQueryError, SearchTransientError


def _accounts():
    return [
        {"id": 3, "tenant_id": 42, "first_name": "Carla", "last_name": "Zed", "score": "b", "limit": 10},
        {"id": 5, "tenant_id": 42, "first_name": "Ana", "last_name": "Young", "score": "a", "limit": 25},
        {"id": 7, "tenant_id": 42, "first_name": "Bruno", "last_name": "Xu", "score": "a", "limit": 60},
        {"id": 9, "tenant_id": 42, "first_name": "Dora", "last_name": "Webb", "score": "c", "limit": 50},
        {"id": 11, "tenant_id": 7, "first_name": "Eve", "last_name": "Vance", "score": "a", "limit": 5},
    ]


def _filters(tenant_id: int = 42, **kw) -> FilterSet:
    req = ListingRequest(actor_id=1, tenant_id=tenant_id, filters=ListingFilters(**kw))
    return QueryFilterBuilder().build(req)


def _run(executor, filters=None, **kw):
    kw.setdefault("aggregations", AggregationPlanner().plan())
    return asyncio.run(executor.execute(kw.pop("text", "*"), filters or _filters(), **kw))


class TestExampleScenario:
    def test_boosted_first_then_default_order(self):
        docs = [d for d in _accounts() if d["id"] in (7, 9, 3, 5)]
        docs = [next(d for d in docs if d["id"] == i) for i in (3, 7, 5, 9)]
        index = InMemorySearchIndex(docs)
        executor = SearchExecutor(index)
        page = _run(executor, boost=BoostSpec(ids=(7, 9)), page=1, page_size=100)
        ids = [d["id"] for d in page.items]
        assert set(ids[:2]) == {7, 9}
        assert ids[2:] == [3, 5]
        assert page.total_count == 4
        assert page.next_page is False


class TestOrdering:
    def test_default_order_is_first_name_desc(self):
        page = _run(SearchExecutor(InMemorySearchIndex(_accounts())))
        names = [d["first_name"] for d in page.items]
        assert names == sorted(names, reverse=True)

    def test_requested_order(self):
        page = _run(
            SearchExecutor(InMemorySearchIndex(_accounts())),
            order=[SortField("last_name", "asc")],
        )
        assert [d["last_name"] for d in page.items] == ["Webb", "Xu", "Young", "Zed"]

    def test_boost_suppresses_requested_order(self):
        index = InMemorySearchIndex(_accounts())
        _run(
            SearchExecutor(index),
            boost=BoostSpec(ids=(9,)),
            order=[SortField("last_name", "asc")],
        )
        assert index.queries[-1].order == ()
        assert index.queries[-1].boost == BoostSpec(ids=(9,))

    def test_empty_boost_is_ignored(self):
        index = InMemorySearchIndex(_accounts())
        executor = SearchExecutor(index)
        _run(executor, boost=BoostSpec(ids=()))
        assert index.queries[-1].boost is None
        assert index.queries[-1].order == (SortField("first_name", "desc"),)


class TestPagination:
    def test_slice_and_totals(self):
        page = _run(SearchExecutor(InMemorySearchIndex(_accounts())), page=2, page_size=3)
        assert len(page.items) == 1
        assert page.total_count == 4
        assert page.total_pages == 2
        assert page.next_page is False

    def test_next_page_when_more(self):
        page = _run(SearchExecutor(InMemorySearchIndex(_accounts())), page=1, page_size=3)
        assert page.next_page is True

    @settings(max_examples=50)
    @given(
        n=st.integers(min_value=0, max_value=30),
        page=st.integers(min_value=1, max_value=6),
        page_size=st.integers(min_value=1, max_value=10),
    )
    def test_next_page_iff_more_matches(self, n, page, page_size):
        docs = [{"id": i, "tenant_id": 42, "first_name": f"n{i:02d}", "limit": i} for i in range(n)]
        result = _run(SearchExecutor(InMemorySearchIndex(docs)), page=page, page_size=page_size)
        assert result.next_page is (n > page * page_size)
        assert len(result.items) <= page_size
        assert result.total_count == n


class TestAggregations:
    def test_range_buckets(self):
        page = _run(SearchExecutor(InMemorySearchIndex(_accounts())))
        assert page.aggregations["limit"].counts() == {"*-20.0": 1, "20.0-50.0": 1, "50.0-*": 2}

    def test_empty_result_has_all_buckets_with_zero(self):
        page = _run(SearchExecutor(InMemorySearchIndex([])))
        limit = page.aggregations["limit"]
        assert [b.key for b in limit.buckets] == ["*-20.0", "20.0-50.0", "50.0-*"]
        assert all(b.count == 0 for b in limit.buckets)
        assert page.aggregations["score"].buckets == ()

    def test_terms_sorted_by_key(self):
        page = _run(SearchExecutor(InMemorySearchIndex(_accounts())))
        assert [b.key for b in page.aggregations["score"].buckets] == ["a", "b", "c"]

    def test_numeric_terms_sorted_numerically(self):
        class _NumericScores:
            async def query(self, query: SearchQuery):
                return parse_response(
                    {
                        "hits": {"total": {"value": 0}, "hits": []},
                        "aggregations": {
                            "score": {
                                "buckets": [
                                    {"key": 100, "doc_count": 1},
                                    {"key": 5, "doc_count": 2},
                                    {"key": 10, "doc_count": 3},
                                ]
                            }
                        },
                    }
                )

        page = _run(SearchExecutor(_NumericScores()))
        assert [b.key for b in page.aggregations["score"].buckets] == [5, 10, 100]
        assert page.aggregations["score"].counts() == {5: 2, 10: 3, 100: 1}

    def test_missing_range_facet_filled_in(self):
        class _NoAggs(InMemorySearchIndex):
            async def query(self, query: SearchQuery):
                response = await super().query(query)
                return type(response)(hits=response.hits, total=response.total)

        page = _run(SearchExecutor(_NoAggs(_accounts())))
        assert page.aggregations["limit"].counts() == {"*-20.0": 0, "20.0-50.0": 0, "50.0-*": 0}


class TestFailures:
    def test_transient_error_propagates(self):
        index = InMemorySearchIndex(_accounts())
        index.available = False
        with pytest.raises(SearchTransientError) as exc_info:
            _run(SearchExecutor(index))
        assert exc_info.value.retryable is True

    def test_query_error_propagates(self):
        class _Rejecting:
            async def query(self, query):
                raise SearchQueryError("bad field")

        with pytest.raises(SearchQueryError) as exc_info:
            _run(SearchExecutor(_Rejecting()))
        assert exc_info.value.retryable is False

    def test_unexpected_error_is_wrapped_as_query_error(self):
        class _Broken:
            async def query(self, query):
                raise KeyError("hits")

        with pytest.raises(SearchQueryError) as exc_info:
            _run(SearchExecutor(_Broken()))
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestResultPage:
    def test_to_dict_shape(self):
        page = _run(SearchExecutor(InMemorySearchIndex(_accounts())), page_size=2)
        body = page.to_dict()
        assert set(body) == {"accounts", "next_page", "total_pages", "total_count", "took", "aggs"}
        assert body["next_page"] is True
        assert body["total_pages"] == 2
        assert body["aggs"]["limit"]["buckets"][0] == {"key": "*-20.0", "doc_count": 1, "to": 20}

    def test_immutable(self):
        page = _run(SearchExecutor(InMemorySearchIndex(_accounts())))
        with pytest.raises(Exception):
            page.total_count = 0  # type: ignore[misc]
        with pytest.raises(TypeError):
            page.aggregations["x"] = None  # type: ignore[index]
