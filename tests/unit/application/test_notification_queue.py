"""Unit tests – NotificationQueue delivery and failure isolation."""
from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from mp_listing.application.email import EmailMessage, InMemoryEmailSender
from mp_listing.application.notifications import (
    BroadcastTask,
    EmailTask,
    InMemoryPresenceTracker,
    NotificationDispatcher,
    NotificationEvent,
    NotificationQueue,
    NotificationTask,
    Recipient,
    TaskState,
    TenantProfile,
)
from mp_listing.application.realtime import InMemoryBroadcaster
from mp_listing.kernel.errors import NotificationTaskError


class _FailingEmailSender:
    def __init__(self) -> None:
        self.attempts = 0

    async def send(self, message: EmailMessage) -> str:
        self.attempts += 1
        raise ConnectionRefusedError("smtp down")


class _FailingBroadcaster:
    async def publish(self, topic, payload) -> None:
        raise TimeoutError("redis timeout")


class _SlowEmailSender(InMemoryEmailSender):
    def __init__(self, gate: asyncio.Event) -> None:
        super().__init__()
        self._gate = gate

    async def send(self, message: EmailMessage) -> str:
        await self._gate.wait()
        return await super().send(message)


def _task(with_email: bool = True) -> NotificationTask:
    return NotificationTask(
        broadcast=BroadcastTask(topic="messages.42", payload={"message": {"id": 1}, "action": "Create"}),
        email=EmailTask(
            subject="s", to_address="a@acme.io", from_address="support@acme.io", body="b"
        ) if with_email else None,
    )


class TestRun:
    def test_both_deliveries(self):
        async def run():
            mail, bus = InMemoryEmailSender(), InMemoryBroadcaster()
            task = await NotificationQueue(mail, bus).run(_task())
            assert task.state is TaskState.COMPLETED
            assert mail.count == 1
            assert mail.last().from_address == "support@acme.io"
            assert mail.last().to == ("a@acme.io",)
            assert bus.of_topic("messages.42")[0].payload["action"] == "Create"
        asyncio.run(run())

    def test_broadcast_only(self):
        async def run():
            mail, bus = InMemoryEmailSender(), InMemoryBroadcaster()
            task = await NotificationQueue(mail, bus).run(_task(with_email=False))
            assert task.state is TaskState.COMPLETED
            assert mail.count == 0
            assert bus.count == 1
        asyncio.run(run())

    def test_email_failure_does_not_stop_broadcast(self):
        async def run():
            mail, bus = _FailingEmailSender(), InMemoryBroadcaster()
            with capture_logs() as logs:
                task = await NotificationQueue(mail, bus).run(_task())
            assert task.state is TaskState.FAILED
            assert bus.count == 1
            assert mail.attempts == 1
            assert [e.kind for e in task.errors] == ["email"]
            assert isinstance(task.errors[0], NotificationTaskError)
            assert isinstance(task.errors[0].__cause__, ConnectionRefusedError)
            assert any(entry["event"] == "notification_email_failed" for entry in logs)
        asyncio.run(run())

    def test_broadcast_failure_does_not_stop_email(self):
        async def run():
            mail = InMemoryEmailSender()
            task = await NotificationQueue(mail, _FailingBroadcaster()).run(_task())
            assert task.state is TaskState.FAILED
            assert mail.count == 1
            assert [e.kind for e in task.errors] == ["broadcast"]
        asyncio.run(run())


class TestWorkers:
    def test_submit_returns_before_delivery(self):
        async def run():
            gate = asyncio.Event()
            mail, bus = _SlowEmailSender(gate), InMemoryBroadcaster()
            queue = NotificationQueue(mail, bus)
            await queue.start()
            assert queue.submit(_task()) is True
            await asyncio.sleep(0)
            assert mail.count == 0
            gate.set()
            await queue.join()
            assert mail.count == 1
            assert bus.count == 1
            await queue.stop()
            assert not queue.running
        asyncio.run(run())

    def test_on_finished_hook_and_worker_survives_failures(self):
        async def run():
            finished: list[NotificationTask] = []
            queue = NotificationQueue(_FailingEmailSender(), InMemoryBroadcaster(), on_finished=finished.append)
            await queue.start()
            queue.submit(_task())
            queue.submit(_task(with_email=False))
            await queue.join()
            await queue.stop()
            assert sorted(t.state.value for t in finished) == ["completed", "failed"]
        asyncio.run(run())

    def test_full_queue_drops(self):
        async def run():
            queue = NotificationQueue(InMemoryEmailSender(), InMemoryBroadcaster(), maxsize=1)
            with capture_logs() as logs:
                assert queue.submit(_task()) is True
                assert queue.submit(_task()) is False
            assert queue.pending == 1
            assert any(entry["event"] == "notification_task_dropped" for entry in logs)
        asyncio.run(run())

    def test_stop_marks_interrupted_task_failed(self):
        async def run():
            submitted = _task()
            queue = NotificationQueue(_SlowEmailSender(asyncio.Event()), InMemoryBroadcaster())
            await queue.start()
            queue.submit(submitted)
            for _ in range(3):
                await asyncio.sleep(0)
            assert submitted.state is TaskState.RUNNING
            with capture_logs() as logs:
                await queue.stop(timeout=0.01)
            assert submitted.state is TaskState.FAILED
            assert not queue.running
            assert any(entry["event"] == "notification_task_cancelled" for entry in logs)
        asyncio.run(run())

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            NotificationQueue(InMemoryEmailSender(), InMemoryBroadcaster(), workers=0)


class TestEndToEnd:
    def test_dispatcher_and_queue(self):
        async def run():
            mail, bus = InMemoryEmailSender(), InMemoryBroadcaster()
            queue = NotificationQueue(mail, bus)
            await queue.start()
            dispatcher = NotificationDispatcher(queue, InMemoryPresenceTracker())
            event = NotificationEvent(
                tenant=TenantProfile(id=42, email_domain="acme.io", email_domain_verified=True),
                recipient=Recipient(id=3, email="ana@acme.io", email_token=None),
                counterpart_id=100,
                subject="s",
                body="b",
                agent_unavailable=True,
            )
            assert dispatcher.dispatch(event) is True
            await queue.stop()
            assert mail.count == 0
            assert bus.count == 1
        asyncio.run(run())
