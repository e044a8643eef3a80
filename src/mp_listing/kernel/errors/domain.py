"""Domain errors – caller-correctable input problems."""

from __future__ import annotations

from typing import Any

from mp_listing.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a request breaks a listing rule."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Filter or pagination input does not meet validation rules.

    ``errors`` is a list of field-level failures, each a
    ``{"field": ..., "message": ...}`` dict.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(f"{field}: {message}", errors=[{"field": field, "message": message}])

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


__all__ = ["DomainError", "ValidationError"]
