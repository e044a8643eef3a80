"""Application email – EmailSender Protocol (port)."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from mp_listing.application.email.message import EmailMessage

__all__ = ["EmailSender"]


@runtime_checkable
class EmailSender(Protocol):
    """Port: outbound mail transport.

    One call is one delivery attempt; timeouts are the transport's own
    concern.
    """

    async def send(self, message: EmailMessage) -> str:
        """Send a single message; returns an opaque message-id string."""
        ...
