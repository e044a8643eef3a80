"""Application listing – faceted, boosted, tenant-scoped account search."""
from mp_listing.application.listing.aggregations import (
    LIMIT_RANGES,
    AggregationPlanner,
    AggregationSpec,
    Range,
    RangeFacet,
    TermsFacet,
)
from mp_listing.application.listing.executor import SearchExecutor, SearchIndex
from mp_listing.application.listing.filters import QueryFilterBuilder, normalize_ids
from mp_listing.application.listing.in_memory import InMemorySearchIndex
from mp_listing.application.listing.query import BoostSpec, Filter, FilterSet, SearchQuery, SortField
from mp_listing.application.listing.request import ListingFilters, ListingRequest
from mp_listing.application.listing.result import FacetBucket, FacetResult, IndexResponse, ResultPage
from mp_listing.application.listing.service import (
    ListAccounts,
    ListAccountsHandler,
    build_list_accounts_handler,
)

__all__ = [
    "LIMIT_RANGES",
    "AggregationPlanner",
    "AggregationSpec",
    "BoostSpec",
    "FacetBucket",
    "FacetResult",
    "Filter",
    "FilterSet",
    "InMemorySearchIndex",
    "IndexResponse",
    "ListAccounts",
    "ListAccountsHandler",
    "ListingFilters",
    "ListingRequest",
    "QueryFilterBuilder",
    "Range",
    "RangeFacet",
    "ResultPage",
    "SearchExecutor",
    "SearchIndex",
    "SearchQuery",
    "SortField",
    "TermsFacet",
    "build_list_accounts_handler",
]
