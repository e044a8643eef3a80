"""Application listing – ListAccounts query and its handler."""
from __future__ import annotations

from dataclasses import dataclass

from mp_listing.application.cqrs import Query, QueryHandler
from mp_listing.application.listing.aggregations import AggregationPlanner
from mp_listing.application.listing.executor import SearchExecutor, SearchIndex
from mp_listing.application.listing.filters import QueryFilterBuilder, normalize_ids
from mp_listing.application.listing.query import BoostSpec, SortField
from mp_listing.application.listing.request import ListingRequest
from mp_listing.application.listing.result import ResultPage
from mp_listing.application.notifications import NotificationDispatcher, NotificationEvent
from mp_listing.config.settings import ListingSettings
from mp_listing.observability.logging import get_logger
from mp_listing.observability.tracing import Tracer

__all__ = ["ListAccounts", "ListAccountsHandler", "build_list_accounts_handler"]

_log = get_logger(__name__)


@dataclass(frozen=True)
class ListAccounts(Query):
    """List accounts of one tenant; *event* optionally rides along for notification."""
    request: ListingRequest
    event: NotificationEvent | None = None


class ListAccountsHandler(QueryHandler[ListAccounts, ResultPage]):
    """Build filters and facets, run the search once, then hand off notifications.

    The notification hand-off happens after the page is built and cannot
    change it or raise into it.
    """

    def __init__(
        self,
        executor: SearchExecutor,
        *,
        filter_builder: QueryFilterBuilder | None = None,
        planner: AggregationPlanner | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ) -> None:
        self._executor = executor
        self._filter_builder = filter_builder or QueryFilterBuilder()
        self._planner = planner or AggregationPlanner()
        self._dispatcher = dispatcher

    async def handle(self, query: ListAccounts) -> ResultPage:
        request = query.request
        filters = self._filter_builder.build(request)
        aggregations = self._planner.plan()

        boost: BoostSpec | None = None
        if request.boost_ids:
            boost = BoostSpec(ids=normalize_ids(request.boost_ids, field="boost_ids"))

        order: list[SortField] = []
        if request.filters.order_field:
            order.append(SortField(request.filters.order_field, request.filters.order_direction or "asc"))

        result = await self._executor.execute(
            request.q,
            filters,
            aggregations=aggregations,
            boost=boost,
            order=order,
            page=request.page,
            page_size=request.page_size,
        )

        if query.event is not None and self._dispatcher is not None:
            handed_off = self._dispatcher.dispatch(query.event)
            _log.debug("listing_notification_handoff", tenant_id=request.tenant_id, handed_off=handed_off)
        return result


def build_list_accounts_handler(
    index: SearchIndex,
    settings: ListingSettings | None = None,
    *,
    dispatcher: NotificationDispatcher | None = None,
    tracer: Tracer | None = None,
) -> ListAccountsHandler:
    """Wire a handler from *settings* (defaults when omitted)."""
    settings = settings or ListingSettings()
    executor = SearchExecutor(
        index,
        fields=settings.search_fields,
        default_order_field=settings.default_order_field,
        default_order_direction=settings.default_order_direction,  # type: ignore[arg-type]
        tracer=tracer,
    )
    return ListAccountsHandler(executor, dispatcher=dispatcher)
