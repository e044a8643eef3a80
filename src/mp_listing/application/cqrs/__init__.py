"""Application CQRS – read-side query bus."""
from mp_listing.application.cqrs.queries import InProcessQueryBus, Query, QueryBus, QueryHandler

__all__ = ["InProcessQueryBus", "Query", "QueryBus", "QueryHandler"]
