"""Application realtime – Broadcaster Protocol and InMemoryBroadcaster."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

__all__ = ["Broadcaster", "InMemoryBroadcaster", "Publication"]


@runtime_checkable
class Broadcaster(Protocol):
    """Port: publish a payload to every realtime subscriber of *topic*."""

    async def publish(self, topic: str, payload: dict[str, Any]) -> None: ...


@dataclass(frozen=True)
class Publication:
    topic: str
    payload: dict[str, Any]


class InMemoryBroadcaster:
    """Fake Broadcaster that records publications."""

    def __init__(self) -> None:
        self.published: list[Publication] = []

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        self.published.append(Publication(topic=topic, payload=payload))

    def of_topic(self, topic: str) -> list[Publication]:
        return [p for p in self.published if p.topic == topic]

    def clear(self) -> None:
        self.published.clear()

    @property
    def count(self) -> int:
        return len(self.published)
