"""Application listing – facet definitions and the AggregationPlanner.

Facet policy lives here, apart from filter policy, so either can change
without touching the other.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

__all__ = [
    "AggregationPlanner",
    "AggregationSpec",
    "Facet",
    "LIMIT_RANGES",
    "Range",
    "RangeFacet",
    "TermsFacet",
]


@dataclass(frozen=True)
class Range:
    """Half-open numeric range ``[start, end)``; ``None`` is unbounded."""
    start: float | None = None
    end: float | None = None

    @property
    def key(self) -> str:
        lo = "*" if self.start is None else f"{float(self.start)}"
        hi = "*" if self.end is None else f"{float(self.end)}"
        return f"{lo}-{hi}"

    def contains(self, value: float) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value >= self.end:
            return False
        return True


@dataclass(frozen=True)
class TermsFacet:
    """Count documents per distinct value of *field*, ordered by key."""
    name: str
    field: str
    order: Literal["asc", "desc"] = "asc"


@dataclass(frozen=True)
class RangeFacet:
    """Count documents whose numeric *field* falls in each range."""
    name: str
    field: str
    ranges: tuple[Range, ...]


Facet = Union[TermsFacet, RangeFacet]


@dataclass(frozen=True)
class AggregationSpec:
    facets: tuple[Facet, ...] = field(default_factory=tuple)

    def __iter__(self):
        return iter(self.facets)

    def __len__(self) -> int:
        return len(self.facets)

    def get(self, name: str) -> Facet | None:
        for facet in self.facets:
            if facet.name == name:
                return facet
        return None


LIMIT_RANGES: tuple[Range, ...] = (
    Range(end=20),
    Range(start=20, end=50),
    Range(start=50),
)


class AggregationPlanner:
    """Produce the static facet plan of an account listing.

    Always two facets: ``score`` (terms, alphabetical ascending by key) and
    ``limit`` (three ranges split at 20 and 50).
    """

    def plan(self) -> AggregationSpec:
        return AggregationSpec(
            facets=(
                TermsFacet(name="score", field="score", order="asc"),
                RangeFacet(name="limit", field="limit", ranges=LIMIT_RANGES),
            )
        )
