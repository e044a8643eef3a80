"""Application notifications – eligibility, task hand-off and delivery."""
from mp_listing.application.notifications.dispatcher import NotificationDispatcher, TaskSink
from mp_listing.application.notifications.presence import InMemoryPresenceTracker, PresenceTracker
from mp_listing.application.notifications.queue import NotificationQueue
from mp_listing.application.notifications.task import (
    BroadcastTask,
    EmailTask,
    NotificationEvent,
    NotificationTask,
    Recipient,
    TaskState,
    TenantProfile,
)

__all__ = [
    "BroadcastTask",
    "EmailTask",
    "InMemoryPresenceTracker",
    "NotificationDispatcher",
    "NotificationEvent",
    "NotificationQueue",
    "NotificationTask",
    "PresenceTracker",
    "Recipient",
    "TaskSink",
    "TaskState",
    "TenantProfile",
]
