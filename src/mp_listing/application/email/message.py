"""Application email – EmailMessage value object."""
from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["EmailMessage"]


@dataclass(frozen=True)
class EmailMessage:
    """A fully-resolved plain-text email ready to be handed to a transport."""

    to: tuple[str, ...]
    subject: str
    body: str
    from_address: str
    reply_to: str | None = None
    headers: dict[str, str] = field(default_factory=dict, compare=False)

    def all_recipients(self) -> list[str]:
        return list(self.to)
