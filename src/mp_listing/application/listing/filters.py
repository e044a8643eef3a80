"""Application listing – QueryFilterBuilder."""
from __future__ import annotations

from typing import Any, Iterable

from mp_listing.application.listing.query import Filter, FilterSet
from mp_listing.application.listing.request import ListingRequest
from mp_listing.kernel.errors import ValidationError

__all__ = ["QueryFilterBuilder", "normalize_ids"]

TENANT_FIELD = "tenant_id"
_BOOLEAN_FILTERS = ("admin", "chat", "on_duty")


def normalize_ids(values: Iterable[Any], *, field: str) -> tuple[int, ...]:
    """Coerce each identifier to ``int``.

    Raises:
        ValidationError: listing every entry that is not an integer id.
    """
    ids: list[int] = []
    errors: list[dict[str, Any]] = []
    for position, raw in enumerate(values):
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            errors.append({"field": field, "message": f"entry {position} ({raw!r}) is not an id"})
            continue
        try:
            ids.append(int(str(raw).strip()) if isinstance(raw, str) else int(raw))
        except (TypeError, ValueError):
            errors.append({"field": field, "message": f"entry {position} ({raw!r}) is not an id"})
    if errors:
        raise ValidationError(f"Malformed identifiers in '{field}'", errors=errors)
    return tuple(ids)


class QueryFilterBuilder:
    """Translate a :class:`ListingRequest` into a :class:`FilterSet`.

    Pure and deterministic.  The tenant constraint is always present.  When
    both ``account_ids`` and ``non_account_ids`` are supplied only the
    inclusion list is applied; the exclusion list is dropped.
    """

    def build(self, request: ListingRequest) -> FilterSet:
        opts = request.filters
        filters: dict[str, Filter] = {}

        for name in _BOOLEAN_FILTERS:
            value = getattr(opts, name)
            if value is not None:
                filters[name] = Filter(field=name, value=value)

        filters[TENANT_FIELD] = Filter(field=TENANT_FIELD, value=request.tenant_id)

        if opts.non_account_ids:
            ids = normalize_ids(opts.non_account_ids, field="non_account_ids")
            filters["id"] = Filter(field="id", value=ids, op="not_in")
        if opts.account_ids:
            ids = normalize_ids(opts.account_ids, field="account_ids")
            filters["id"] = Filter(field="id", value=ids, op="in")
        if opts.team_ids:
            ids = normalize_ids(opts.team_ids, field="team_ids")
            filters["team_ids"] = Filter(field="team_ids", value=ids, op="in")

        return FilterSet(filters)
