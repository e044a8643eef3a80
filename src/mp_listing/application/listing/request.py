"""Application listing – ListingRequest and its optional filter struct."""
from __future__ import annotations

import dataclasses
from typing import Any, Literal, Mapping

from mp_listing.kernel.errors import ValidationError

__all__ = ["DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE", "ListingFilters", "ListingRequest"]

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000
WILDCARD = "*"

_TRUE = frozenset({"true", "1", "yes", "on", "t"})
_FALSE = frozenset({"false", "0", "no", "off", "f"})


@dataclasses.dataclass(frozen=True)
class ListingFilters:
    """Optional typed filters of a listing request.

    ``None`` on any field means *unconstrained*. It never means ``False``:

    ========================  =======  ==========================================
    field                     default  when set
    ========================  =======  ==========================================
    ``admin``                 None     ``admin == value`` (``False`` included)
    ``chat``                  None     ``chat == value``
    ``on_duty``               None     ``on_duty == value``
    ``account_ids``           None     ``id in ids``; wins over ``non_account_ids``
    ``non_account_ids``       None     ``id not in ids``
    ``team_ids``              None     ``team_ids in ids``
    ``order_field``           None     sort field, ignored while boosting
    ``order_direction``       None     ``"asc"`` / ``"desc"``
    ========================  =======  ==========================================
    """

    admin: bool | None = None
    chat: bool | None = None
    on_duty: bool | None = None
    account_ids: tuple[Any, ...] | None = None
    non_account_ids: tuple[Any, ...] | None = None
    team_ids: tuple[Any, ...] | None = None
    order_field: str | None = None
    order_direction: Literal["asc", "desc"] | None = None

    def __post_init__(self) -> None:
        if self.order_direction not in (None, "asc", "desc"):
            raise ValidationError.for_field("order_direction", "must be 'asc' or 'desc'")


@dataclasses.dataclass(frozen=True)
class ListingRequest:
    """Immutable account listing request.

    ``actor_id`` and ``tenant_id`` are passed in explicitly by the caller;
    nothing here looks up a "current" account.
    """

    actor_id: int
    tenant_id: int
    q: str = WILDCARD
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    filters: ListingFilters = dataclasses.field(default_factory=ListingFilters)
    boost_ids: tuple[Any, ...] | None = None
    max_page_size: int = dataclasses.field(default=MAX_PAGE_SIZE, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.q or not self.q.strip():
            object.__setattr__(self, "q", WILDCARD)
        if self.page < 1:
            raise ValidationError.for_field("page", "must be >= 1")
        if self.page_size < 1 or self.page_size > self.max_page_size:
            raise ValidationError.for_field(
                "page_size", f"must be between 1 and {self.max_page_size}"
            )

    @property
    def is_wildcard(self) -> bool:
        return self.q.strip() == WILDCARD

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        *,
        actor_id: int,
        tenant_id: int,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> "ListingRequest":
        """Build a request from raw query-string style parameters.

        Tenant and actor always come from the keyword arguments; a
        ``tenant_id`` key inside *params* is ignored.  All field-level
        problems are collected and raised together as one
        :class:`ValidationError`.

        ``per_page`` is accepted for ``page_size``.  ``accounts_boosted`` is
        accepted for ``boost_ids`` only together with a true
        ``account_sorted``.
        """
        errors: list[dict[str, Any]] = []

        def collect(field: str, fn: Any, raw: Any) -> Any:
            try:
                return fn(raw)
            except ValueError as exc:
                errors.append({"field": field, "message": str(exc)})
                return None

        page = collect("page", _as_int, params.get("page"))
        page_size = collect("page_size", _as_int, params.get("page_size", params.get("per_page")))
        direction = _blank_to_none(params.get("order_direction"))
        if direction is not None and str(direction).lower() not in ("asc", "desc"):
            errors.append({"field": "order_direction", "message": "must be 'asc' or 'desc'"})
            direction = None

        filters = ListingFilters(
            admin=collect("admin", _as_bool, params.get("admin")),
            chat=collect("chat", _as_bool, params.get("chat")),
            on_duty=collect("on_duty", _as_bool, params.get("on_duty")),
            account_ids=collect("account_ids", _as_list, params.get("account_ids")),
            non_account_ids=collect("non_account_ids", _as_list, params.get("non_account_ids")),
            team_ids=collect("team_ids", _as_list, params.get("team_ids")),
            order_field=_blank_to_none(params.get("order_field")),
            order_direction=str(direction).lower() if direction is not None else None,  # type: ignore[arg-type]
        )
        boost_ids = collect("boost_ids", _as_list, params.get("boost_ids"))
        # legacy form: accounts_boosted only counts when account_sorted is set
        if boost_ids is None and collect("account_sorted", _as_bool, params.get("account_sorted")):
            boost_ids = collect("accounts_boosted", _as_list, params.get("accounts_boosted"))

        if errors:
            raise ValidationError("Invalid listing parameters", errors=errors)

        return cls(
            actor_id=actor_id,
            tenant_id=tenant_id,
            q=str(params.get("q") or WILDCARD),
            page=page if page is not None else 1,
            page_size=page_size if page_size is not None else default_page_size,
            filters=filters,
            boost_ids=boost_ids,
            max_page_size=max_page_size,
        )


def _blank_to_none(raw: Any) -> Any:
    if raw is None:
        return None
    if isinstance(raw, str) and not raw.strip():
        return None
    return raw


def _as_bool(raw: Any) -> bool | None:
    raw = _blank_to_none(raw)
    if raw is None or isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{raw!r} is not a boolean")


def _as_int(raw: Any) -> int | None:
    raw = _blank_to_none(raw)
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{raw!r} is not an integer")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{raw!r} is not an integer") from None


def _as_list(raw: Any) -> tuple[Any, ...] | None:
    # id values are kept raw here; QueryFilterBuilder normalises them
    raw = _blank_to_none(raw)
    if raw is None:
        return None
    if isinstance(raw, str):
        items = [part.strip() for part in raw.split(",") if part.strip()]
    elif isinstance(raw, (list, tuple, set, frozenset)):
        items = list(raw)
    else:
        raise ValueError(f"{raw!r} is not a list")
    return tuple(items) or None
