"""Config settings – ListingSettings."""
from __future__ import annotations

import dataclasses

from mp_listing.config.settings.base import Settings
from mp_listing.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class ListingSettings(Settings):
    """Tunables for the account listing query and its notification side effects.

    Every field can be overridden from the environment with the ``LISTING_``
    prefix, e.g. ``LISTING_MAX_PAGE_SIZE=500``.
    """

    _prefix = "LISTING"

    default_page_size: int = 100
    max_page_size: int = 1000
    search_fields: list[str] = dataclasses.field(default_factory=lambda: ["first_name", "last_name"])
    default_order_field: str = "first_name"
    default_order_direction: str = "desc"
    support_mailbox: str = "support"
    broadcast_topic_prefix: str = "messages"
    notification_queue_size: int = 1000
    elasticsearch_url: str = "http://localhost:9200"
    elasticsearch_index: str = "accounts"
    search_timeout: float = 5.0
    redis_url: str = "redis://localhost:6379/0"

    def _validate(self) -> None:
        if self.max_page_size < 1:
            raise InvalidSettingValueError("max_page_size", self.max_page_size, "must be >= 1")
        if not 1 <= self.default_page_size <= self.max_page_size:
            raise InvalidSettingValueError(
                "default_page_size",
                self.default_page_size,
                f"must be between 1 and max_page_size ({self.max_page_size})",
            )
        if self.default_order_direction not in ("asc", "desc"):
            raise InvalidSettingValueError(
                "default_order_direction", self.default_order_direction, "must be 'asc' or 'desc'"
            )
        if self.notification_queue_size < 0:
            raise InvalidSettingValueError(
                "notification_queue_size", self.notification_queue_size, "must be >= 0"
            )


__all__ = ["ListingSettings"]
