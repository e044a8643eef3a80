"""FastAPI adapter – account listing router."""
import dataclasses
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request

from mp_listing.application.cqrs import QueryBus
from mp_listing.application.listing import ListAccounts, ListingRequest
from mp_listing.config.settings import ListingSettings


@dataclasses.dataclass(frozen=True)
class ListingContext:
    """Authenticated caller identity, resolved by the host application."""
    actor_id: int
    tenant_id: int


def _collect_params(request: Request) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        name = key[:-2] if key.endswith("[]") else key
        if name in params:
            continue
        params[name] = values if key.endswith("[]") or len(values) > 1 else values[0]
    return params


def build_listing_router(
    bus: QueryBus,
    context_dependency: Callable[..., ListingContext],
    *,
    settings: ListingSettings | None = None,
    prefix: str = "",
) -> APIRouter:
    """Return an ``APIRouter`` exposing ``GET {prefix}/accounts``.

    *context_dependency* is a FastAPI dependency returning the caller's
    :class:`ListingContext`; the router never reads tenant or actor from
    query parameters.
    """
    settings = settings or ListingSettings()
    router = APIRouter(prefix=prefix)

    @router.get("/accounts")
    async def list_accounts(
        request: Request,
        context: ListingContext = Depends(context_dependency),
    ) -> dict[str, Any]:
        listing_request = ListingRequest.from_params(
            _collect_params(request),
            actor_id=context.actor_id,
            tenant_id=context.tenant_id,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )
        page = await bus.ask(ListAccounts(listing_request))
        return page.to_dict()

    return router


__all__ = ["ListingContext", "build_listing_router"]
