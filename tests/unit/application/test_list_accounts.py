"""Unit tests – ListAccounts query handler."""
from __future__ import annotations

import asyncio

import pytest

from mp_listing.application.cqrs import InProcessQueryBus
from mp_listing.application.listing import (
    InMemorySearchIndex,
    ListAccounts,
    ListingFilters,
    ListingRequest,
    build_list_accounts_handler,
)
from mp_listing.application.notifications import (
    InMemoryPresenceTracker,
    NotificationDispatcher,
    NotificationEvent,
    NotificationTask,
    Recipient,
    TenantProfile,
)
from mp_listing.config.settings import ListingSettings
from mp_listing.kernel.errors import SearchTransientError, ValidationError


class _Sink:
    def __init__(self) -> None:
        self.tasks: list[NotificationTask] = []

    def submit(self, task: NotificationTask) -> bool:
        self.tasks.append(task)
        return True


class _ExplodingSink:
    def submit(self, task: NotificationTask) -> bool:
        raise RuntimeError("queue closed")


def _index():
    return InMemorySearchIndex(
        [
            {"id": 3, "tenant_id": 42, "first_name": "Ana", "last_name": "B", "on_duty": True, "limit": 1},
            {"id": 5, "tenant_id": 42, "first_name": "Cy", "last_name": "D", "on_duty": False, "limit": 30},
            {"id": 7, "tenant_id": 42, "first_name": "Ed", "last_name": "F", "on_duty": True, "limit": 70},
            {"id": 9, "tenant_id": 8, "first_name": "Gi", "last_name": "H", "on_duty": True, "limit": 2},
        ]
    )


def _event(**kw) -> NotificationEvent:
    defaults = dict(
        tenant=TenantProfile(id=42, email_domain="acme.io", email_domain_verified=True),
        recipient=Recipient(id=3, email="ana@acme.io", email_token="tok"),
        counterpart_id=100,
        subject="New message",
        body="Hello",
        message={"id": 1},
        agent_unavailable=True,
    )
    defaults.update(kw)
    return NotificationEvent(**defaults)


def _bus(index=None, dispatcher=None):
    bus = InProcessQueryBus()
    bus.register(ListAccounts, build_list_accounts_handler(index or _index(), dispatcher=dispatcher))
    return bus


class TestListAccounts:
    def test_tenant_scoped(self):
        page = asyncio.run(_bus().ask(ListAccounts(ListingRequest(actor_id=1, tenant_id=42))))
        assert {d["id"] for d in page.items} == {3, 5, 7}
        assert page.total_count == 3

    def test_filters_applied(self):
        req = ListingRequest(actor_id=1, tenant_id=42, filters=ListingFilters(on_duty=False))
        page = asyncio.run(_bus().ask(ListAccounts(req)))
        assert [d["id"] for d in page.items] == [5]

    def test_boost_ids_normalised(self):
        index = _index()
        req = ListingRequest(actor_id=1, tenant_id=42, boost_ids=("7",))
        page = asyncio.run(_bus(index).ask(ListAccounts(req)))
        assert page.items[0]["id"] == 7
        assert index.queries[-1].boost.ids == (7,)

    def test_order_toggle(self):
        req = ListingRequest(
            actor_id=1,
            tenant_id=42,
            filters=ListingFilters(order_field="first_name", order_direction="asc"),
        )
        page = asyncio.run(_bus().ask(ListAccounts(req)))
        assert [d["first_name"] for d in page.items] == ["Ana", "Cy", "Ed"]

    def test_malformed_boost_id(self):
        req = ListingRequest(actor_id=1, tenant_id=42, boost_ids=("x",))
        with pytest.raises(ValidationError):
            asyncio.run(_bus().ask(ListAccounts(req)))

    def test_settings_drive_default_order(self):
        handler = build_list_accounts_handler(
            _index(), ListingSettings(default_order_field="first_name", default_order_direction="asc")
        )
        page = asyncio.run(handler.handle(ListAccounts(ListingRequest(actor_id=1, tenant_id=42))))
        assert [d["first_name"] for d in page.items] == ["Ana", "Cy", "Ed"]


class TestNotificationHandOff:
    def test_eligible_event_is_handed_off(self):
        sink = _Sink()
        dispatcher = NotificationDispatcher(sink, InMemoryPresenceTracker())
        req = ListingRequest(actor_id=1, tenant_id=42)
        page = asyncio.run(_bus(dispatcher=dispatcher).ask(ListAccounts(req, event=_event())))
        assert page.total_count == 3
        assert len(sink.tasks) == 1

    def test_no_event_no_task(self):
        sink = _Sink()
        dispatcher = NotificationDispatcher(sink, InMemoryPresenceTracker())
        asyncio.run(_bus(dispatcher=dispatcher).ask(ListAccounts(ListingRequest(actor_id=1, tenant_id=42))))
        assert sink.tasks == []

    def test_dispatch_failure_does_not_reach_caller(self):
        dispatcher = NotificationDispatcher(_ExplodingSink(), InMemoryPresenceTracker())
        req = ListingRequest(actor_id=1, tenant_id=42)
        page = asyncio.run(_bus(dispatcher=dispatcher).ask(ListAccounts(req, event=_event())))
        assert page.total_count == 3

    def test_search_failure_skips_hand_off(self):
        sink = _Sink()
        index = _index()
        index.available = False
        dispatcher = NotificationDispatcher(sink, InMemoryPresenceTracker())
        with pytest.raises(SearchTransientError):
            asyncio.run(
                _bus(index, dispatcher).ask(ListAccounts(ListingRequest(actor_id=1, tenant_id=42), event=_event()))
            )
        assert sink.tasks == []


class TestQueryBus:
    def test_unknown_query(self):
        from mp_listing.application.cqrs import Query

        class Other(Query):
            pass

        with pytest.raises(KeyError):
            asyncio.run(_bus().ask(Other()))

    def test_double_registration(self):
        bus = _bus()
        with pytest.raises(ValueError):
            bus.register(ListAccounts, build_list_accounts_handler(_index()))
