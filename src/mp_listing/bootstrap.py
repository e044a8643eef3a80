"""Composition root – wire the listing query and its notification pipeline from settings."""
from __future__ import annotations

import dataclasses
from typing import Any, Awaitable, Callable

from mp_listing.adapters.elasticsearch import ElasticsearchIndex
from mp_listing.adapters.redis import RedisBroadcaster
from mp_listing.application.cqrs import InProcessQueryBus
from mp_listing.application.email import EmailSender
from mp_listing.application.listing import ListAccounts, SearchIndex, build_list_accounts_handler
from mp_listing.application.notifications import (
    NotificationDispatcher,
    NotificationQueue,
    PresenceTracker,
)
from mp_listing.application.realtime import Broadcaster
from mp_listing.config.settings import ListingSettings
from mp_listing.observability.logging import get_logger
from mp_listing.observability.tracing import Tracer

__all__ = ["ListingRuntime", "build_listing_runtime"]

_log = get_logger(__name__)


@dataclasses.dataclass
class ListingRuntime:
    """Everything a host application needs to serve ``ListAccounts``.

    ``start`` launches the notification workers; ``aclose`` drains them and
    closes the transports this runtime created itself.
    """

    settings: ListingSettings
    index: SearchIndex
    broadcaster: Broadcaster
    queue: NotificationQueue
    dispatcher: NotificationDispatcher
    bus: InProcessQueryBus
    _closers: list[Callable[[], Awaitable[Any]]] = dataclasses.field(default_factory=list, repr=False)

    async def start(self) -> None:
        await self.queue.start()
        _log.info("listing_runtime_started", queue_size=self.queue.maxsize)

    async def aclose(self) -> None:
        await self.queue.stop()
        for close in self._closers:
            await close()
        _log.info("listing_runtime_stopped")


def build_listing_runtime(
    settings: ListingSettings | None = None,
    *,
    email_sender: EmailSender,
    presence: PresenceTracker,
    index: SearchIndex | None = None,
    broadcaster: Broadcaster | None = None,
    tracer: Tracer | None = None,
) -> ListingRuntime:
    """Build a :class:`ListingRuntime` from *settings*.

    Without an explicit *index* an :class:`ElasticsearchIndex` is created from
    ``elasticsearch_url``, ``elasticsearch_index`` and ``search_timeout``;
    without a *broadcaster* a :class:`RedisBroadcaster` on ``redis_url``.
    """
    settings = settings or ListingSettings()
    closers: list[Callable[[], Awaitable[Any]]] = []

    if index is None:
        es_index = ElasticsearchIndex(
            settings.elasticsearch_url,
            settings.elasticsearch_index,
            timeout=settings.search_timeout,
        )
        closers.append(es_index.aclose)
        index = es_index
    if broadcaster is None:
        redis_broadcaster = RedisBroadcaster(settings.redis_url)
        closers.append(redis_broadcaster.close)
        broadcaster = redis_broadcaster

    queue = NotificationQueue(email_sender, broadcaster, maxsize=settings.notification_queue_size)
    dispatcher = NotificationDispatcher(
        queue,
        presence,
        support_mailbox=settings.support_mailbox,
        topic_prefix=settings.broadcast_topic_prefix,
    )
    bus = InProcessQueryBus()
    bus.register(
        ListAccounts,
        build_list_accounts_handler(index, settings, dispatcher=dispatcher, tracer=tracer),
    )
    return ListingRuntime(
        settings=settings,
        index=index,
        broadcaster=broadcaster,
        queue=queue,
        dispatcher=dispatcher,
        bus=bus,
        _closers=closers,
    )
