"""Application notifications – presence tracking port."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = ["InMemoryPresenceTracker", "PresenceTracker"]


@runtime_checkable
class PresenceTracker(Protocol):
    """Port: is *subject_id* currently connected through a realtime channel?"""

    def is_online(self, subject_id: int) -> bool: ...


class InMemoryPresenceTracker:
    def __init__(self, online: set[int] | None = None) -> None:
        self._online: set[int] = set(online or ())

    def connect(self, subject_id: int) -> None:
        self._online.add(subject_id)

    def disconnect(self, subject_id: int) -> None:
        self._online.discard(subject_id)

    def is_online(self, subject_id: int) -> bool:
        return subject_id in self._online
