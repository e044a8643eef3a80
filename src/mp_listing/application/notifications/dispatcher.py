"""Application notifications – NotificationDispatcher."""
from __future__ import annotations

from typing import Protocol

from mp_listing.application.notifications.presence import PresenceTracker
from mp_listing.application.notifications.task import (
    BroadcastTask,
    EmailTask,
    NotificationEvent,
    NotificationTask,
)
from mp_listing.observability.logging import get_logger

__all__ = ["NotificationDispatcher", "TaskSink"]

_log = get_logger(__name__)


class TaskSink(Protocol):
    """Anything that accepts a task without blocking (see :class:`NotificationQueue`)."""

    def submit(self, task: NotificationTask) -> bool: ...


class NotificationDispatcher:
    """Decide whether an event warrants notifications and hand them off.

    The dispatcher keeps no state between events: every call plans a fresh
    :class:`NotificationTask` and gives it to *sink*.
    """

    def __init__(
        self,
        sink: TaskSink,
        presence: PresenceTracker,
        *,
        support_mailbox: str = "support",
        topic_prefix: str = "messages",
    ) -> None:
        self._sink = sink
        self._presence = presence
        self._support_mailbox = support_mailbox
        self._topic_prefix = topic_prefix

    def is_eligible(self, event: NotificationEvent) -> bool:
        return event.agent_unavailable and not self._presence.is_online(event.counterpart_id)

    def plan(self, event: NotificationEvent) -> NotificationTask | None:
        if not self.is_eligible(event):
            return None
        return NotificationTask(
            email=self._plan_email(event),
            broadcast=BroadcastTask(
                topic=f"{self._topic_prefix}.{event.tenant.id}",
                payload={"message": dict(event.message), "action": event.action},
            ),
        )

    def dispatch(self, event: NotificationEvent) -> bool:
        """Plan and submit; return ``True`` when a task was handed off.

        Never raises: a failure here must not reach the caller.
        """
        try:
            task = self.plan(event)
            if task is None:
                return False
            return self._sink.submit(task)
        except Exception as exc:  # noqa: BLE001
            _log.error("notification_dispatch_failed", tenant_id=event.tenant.id, error=repr(exc))
            return False

    def _plan_email(self, event: NotificationEvent) -> EmailTask | None:
        recipient, tenant = event.recipient, event.tenant
        token = (recipient.email_token or "").strip()
        verified = tenant.email_domain_verified and bool(tenant.email_domain)
        if not token or not verified or not recipient.email:
            _log.debug("notification_email_skipped", tenant_id=tenant.id, recipient_id=recipient.id)
            return None
        return EmailTask(
            subject=event.subject,
            to_address=recipient.email,
            from_address=f"{self._support_mailbox}@{tenant.email_domain}",
            body=event.body,
        )
