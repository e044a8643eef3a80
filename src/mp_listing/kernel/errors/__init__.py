"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   └── ValidationError
    └── InfrastructureError      (infrastructure.py)
        ├── SearchError
        │   ├── SearchTransientError  (alias SearchUnavailableError)
        │   └── SearchQueryError
        └── NotificationTaskError
"""

from mp_listing.kernel.errors.base import BaseError
from mp_listing.kernel.errors.domain import DomainError, ValidationError
from mp_listing.kernel.errors.infrastructure import (
    InfrastructureError,
    NotificationTaskError,
    SearchError,
    SearchQueryError,
    SearchTransientError,
    SearchUnavailableError,
)

__all__ = [
    "BaseError",
    "DomainError",
    "InfrastructureError",
    "NotificationTaskError",
    "SearchError",
    "SearchQueryError",
    "SearchTransientError",
    "SearchUnavailableError",
    "ValidationError",
]
