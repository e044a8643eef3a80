"""Application listing – index response and ResultPage containers."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

__all__ = ["FacetBucket", "FacetResult", "IndexResponse", "ResultPage"]


@dataclass(frozen=True)
class FacetBucket:
    key: Any
    count: int
    start: float | None = None
    end: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"key": self.key, "doc_count": self.count}
        if self.start is not None:
            data["from"] = self.start
        if self.end is not None:
            data["to"] = self.end
        return data


@dataclass(frozen=True)
class FacetResult:
    name: str
    buckets: tuple[FacetBucket, ...] = ()

    def counts(self) -> dict[Any, int]:
        return {b.key: b.count for b in self.buckets}

    def to_dict(self) -> dict[str, Any]:
        return {"buckets": [b.to_dict() for b in self.buckets]}


@dataclass(frozen=True)
class IndexResponse:
    """Raw answer of a :class:`SearchIndex` before the executor shapes it."""
    hits: tuple[Any, ...]
    total: int
    took_ms: int = 0
    aggregations: Mapping[str, FacetResult] = field(default_factory=dict)


@dataclass(frozen=True)
class ResultPage:
    """One page of listing results.

    ``total_count`` and ``total_pages`` describe the whole match set, not
    just ``items``.
    """

    items: tuple[Any, ...]
    page: int
    page_size: int
    total_count: int
    took_ms: int = 0
    aggregations: Mapping[str, FacetResult] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "aggregations", MappingProxyType(dict(self.aggregations)))

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0 or self.total_count <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def next_page(self) -> bool:
        return self.total_count > self.page * self.page_size

    def to_dict(self) -> dict[str, Any]:
        """Response payload of the listing endpoint."""
        return {
            "accounts": list(self.items),
            "next_page": self.next_page,
            "total_pages": self.total_pages,
            "total_count": self.total_count,
            "took": self.took_ms,
            "aggs": {name: facet.to_dict() for name, facet in self.aggregations.items()},
        }
