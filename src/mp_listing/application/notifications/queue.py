"""Application notifications – NotificationQueue.

The hand-off channel between request code and notification delivery.
:meth:`NotificationQueue.submit` never blocks and never awaits delivery;
background workers drain the queue and run each task's email and broadcast
deliveries concurrently, exactly once each.
"""
from __future__ import annotations

import asyncio
from typing import Callable

from mp_listing.application.email import EmailSender
from mp_listing.application.notifications.task import NotificationTask, TaskState
from mp_listing.application.realtime import Broadcaster
from mp_listing.kernel.errors import NotificationTaskError
from mp_listing.observability.logging import get_logger

__all__ = ["NotificationQueue"]

_log = get_logger(__name__)


class NotificationQueue:
    """``asyncio.Queue``-backed worker pool for :class:`NotificationTask` objects.

    Typical usage::

        queue = NotificationQueue(smtp_sender, redis_broadcaster, maxsize=1000)
        await queue.start()
        ...
        queue.submit(task)      # from request code, returns immediately
        ...
        await queue.stop()

    Parameters
    ----------
    email_sender:
        Outbound mail transport.
    broadcaster:
        Realtime publish transport.
    maxsize:
        Maximum queue depth; ``0`` means unlimited.  When full, new tasks are
        dropped with a warning instead of blocking the submitter.
    workers:
        Number of tasks processed concurrently.
    on_finished:
        Optional hook called with every task once it reaches a final state.
    """

    def __init__(
        self,
        email_sender: EmailSender,
        broadcaster: Broadcaster,
        *,
        maxsize: int = 0,
        workers: int = 4,
        on_finished: Callable[[NotificationTask], None] | None = None,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self._email_sender = email_sender
        self._broadcaster = broadcaster
        self._queue: asyncio.Queue[NotificationTask] = asyncio.Queue(maxsize=maxsize)
        self._worker_count = workers
        self._workers: list[asyncio.Task[None]] = []
        self._on_finished = on_finished

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def submit(self, task: NotificationTask) -> bool:
        """Enqueue *task* without blocking; return ``False`` if it was dropped."""
        try:
            self._queue.put_nowait(task)
        except asyncio.QueueFull:
            _log.warning("notification_task_dropped", task_id=task.id, reason="queue_full")
            return False
        _log.info("notification_task_scheduled", task_id=task.id, kinds=list(task.kinds))
        return True

    async def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.ensure_future(self._drain()) for _ in range(self._worker_count)
        ]

    async def join(self) -> None:
        """Wait until every submitted task has reached a final state."""
        await self._queue.join()

    async def stop(self, timeout: float = 5.0) -> None:
        """Let queued tasks finish (up to *timeout* seconds), then stop the workers."""
        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            _log.warning("notification_queue_stop_timeout", pending=self.pending)
        workers, self._workers = self._workers, []
        for worker in workers:
            worker.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

    async def run(self, task: NotificationTask) -> NotificationTask:
        """Execute *task* in the current coroutine and return it in its final state."""
        task.state = TaskState.RUNNING
        deliveries = [self._deliver_broadcast(task)]
        if task.email is not None:
            deliveries.append(self._deliver_email(task))
        try:
            outcomes = await asyncio.gather(*deliveries)
        except asyncio.CancelledError:
            task.state = TaskState.FAILED
            _log.warning("notification_task_cancelled", task_id=task.id)
            raise
        task.errors.extend(err for err in outcomes if err is not None)
        task.state = TaskState.FAILED if task.errors else TaskState.COMPLETED
        if task.errors:
            _log.error(
                "notification_task_failed",
                task_id=task.id,
                failed=[err.kind for err in task.errors],
            )
        else:
            _log.info("notification_task_completed", task_id=task.id)
        if self._on_finished is not None:
            self._on_finished(task)
        return task

    async def _drain(self) -> None:
        while True:
            task = await self._queue.get()
            try:
                await self.run(task)
            except Exception as exc:  # noqa: BLE001
                _log.error("notification_worker_error", task_id=task.id, error=repr(exc))
            finally:
                self._queue.task_done()

    async def _deliver_email(self, task: NotificationTask) -> NotificationTaskError | None:
        assert task.email is not None
        try:
            await self._email_sender.send(task.email.to_message())
        except Exception as exc:  # noqa: BLE001
            _log.error("notification_email_failed", task_id=task.id, error=repr(exc))
            return NotificationTaskError("email", task.id, f"email delivery failed: {exc}", cause=exc)
        _log.info("notification_email_sent", task_id=task.id)
        return None

    async def _deliver_broadcast(self, task: NotificationTask) -> NotificationTaskError | None:
        try:
            await self._broadcaster.publish(task.broadcast.topic, task.broadcast.payload)
        except Exception as exc:  # noqa: BLE001
            _log.error("notification_broadcast_failed", task_id=task.id, error=repr(exc))
            return NotificationTaskError("broadcast", task.id, f"broadcast failed: {exc}", cause=exc)
        _log.info("notification_broadcast_published", task_id=task.id, topic=task.broadcast.topic)
        return None
