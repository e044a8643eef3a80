"""Application email – InMemoryEmailSender for unit tests."""
from __future__ import annotations

import uuid

from mp_listing.application.email.message import EmailMessage

__all__ = ["InMemoryEmailSender"]


class InMemoryEmailSender:
    """Fake EmailSender that captures sent messages in memory."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> str:
        self.sent.append(message)
        return str(uuid.uuid4())

    def reset(self) -> None:
        self.sent.clear()

    @property
    def count(self) -> int:
        return len(self.sent)

    def last(self) -> EmailMessage | None:
        return self.sent[-1] if self.sent else None
