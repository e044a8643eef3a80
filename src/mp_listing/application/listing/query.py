"""Application listing – filter, sort, boost and SearchQuery value objects."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Literal, Mapping

from mp_listing.application.listing.aggregations import AggregationSpec

__all__ = ["BoostSpec", "Filter", "FilterSet", "SearchQuery", "SortField"]


@dataclass(frozen=True)
class Filter:
    """A field-level constraint applied to search results."""
    field: str
    value: Any
    op: Literal["eq", "in", "not_in"] = "eq"

    def matches(self, actual: Any) -> bool:
        if self.op == "eq":
            return actual == self.value
        if isinstance(actual, (list, tuple, set, frozenset)):
            overlap = any(v in self.value for v in actual)
        else:
            overlap = actual in self.value
        return overlap if self.op == "in" else not overlap


class FilterSet(Mapping[str, Filter]):
    """Read-only mapping of field name to :class:`Filter`.

    A missing key means the field is unconstrained.
    """

    __slots__ = ("_filters",)

    def __init__(self, filters: Mapping[str, Filter] | None = None) -> None:
        self._filters: dict[str, Filter] = dict(filters or {})

    def __getitem__(self, key: str) -> Filter:
        return self._filters[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"FilterSet({self._filters!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilterSet):
            return self._filters == other._filters
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def matches(self, document: Mapping[str, Any]) -> bool:
        return all(f.matches(document.get(f.field)) for f in self._filters.values())


@dataclass(frozen=True)
class SortField:
    field: str
    direction: Literal["asc", "desc"] = "asc"


@dataclass(frozen=True)
class BoostSpec:
    """Identifiers forced to the front of the result set."""
    ids: tuple[int, ...]
    field: str = "id"

    def __bool__(self) -> bool:
        return bool(self.ids)


@dataclass(frozen=True)
class SearchQuery:
    """Fully-resolved query handed to a :class:`SearchIndex`."""
    text: str = "*"
    filters: FilterSet = field(default_factory=FilterSet)
    boost: BoostSpec | None = None
    order: tuple[SortField, ...] = ()
    aggregations: AggregationSpec = field(default_factory=AggregationSpec)
    fields: tuple[str, ...] = ("first_name", "last_name")
    page: int = 1
    page_size: int = 100

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
