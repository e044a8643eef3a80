"""Application notifications – domain event and NotificationTask models."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mp_listing.application.email import EmailMessage
from mp_listing.kernel.errors import NotificationTaskError

__all__ = [
    "BroadcastTask",
    "EmailTask",
    "NotificationEvent",
    "NotificationTask",
    "Recipient",
    "TaskState",
    "TenantProfile",
]


@dataclass(frozen=True)
class TenantProfile:
    """Mail-relevant view of a tenant."""
    id: int
    email_domain: str | None = None
    email_domain_verified: bool = False


@dataclass(frozen=True)
class Recipient:
    """Account that should be told about the event by email."""
    id: int
    email: str | None = None
    email_token: str | None = None


@dataclass(frozen=True)
class NotificationEvent:
    """A domain event that may warrant notifying people out of band.

    ``agent_unavailable`` is decided by the producer of the event;
    ``counterpart_id`` is checked against the presence tracker.
    """
    tenant: TenantProfile
    recipient: Recipient
    counterpart_id: int
    subject: str
    body: str
    message: dict[str, Any] = field(default_factory=dict)
    agent_unavailable: bool = False
    action: str = "Create"


class TaskState(str, Enum):
    SCHEDULED = "scheduled"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class EmailTask:
    subject: str
    to_address: str
    from_address: str
    body: str

    def to_message(self) -> EmailMessage:
        return EmailMessage(
            to=(self.to_address,),
            subject=self.subject,
            body=self.body,
            from_address=self.from_address,
        )


@dataclass(frozen=True)
class BroadcastTask:
    topic: str
    payload: dict[str, Any]


@dataclass
class NotificationTask:
    """Independent side effects of one event, owned by the queue once submitted."""

    broadcast: BroadcastTask
    email: EmailTask | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    state: TaskState = TaskState.SCHEDULED
    errors: list[NotificationTaskError] = field(default_factory=list)

    @property
    def kinds(self) -> tuple[str, ...]:
        return ("email", "broadcast") if self.email is not None else ("broadcast",)

    @property
    def done(self) -> bool:
        return self.state in (TaskState.COMPLETED, TaskState.FAILED)
