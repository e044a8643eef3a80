"""Redis adapter – RedisBroadcaster."""
from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis


class RedisBroadcaster:
    """Publish realtime events as JSON on a Redis pub/sub channel.

    Websocket gateways subscribe to the same channels and fan messages out
    to connected clients.
    """

    def __init__(self, url: str | None = None, *, client: Any | None = None, **kwargs: Any) -> None:
        if client is None and url is None:
            raise ValueError("RedisBroadcaster needs either a url or a client")
        self._client = client if client is not None else aioredis.from_url(url, **kwargs)

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        data = json.dumps(payload, separators=(",", ":"), default=str)
        await self._client.publish(topic, data)

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisBroadcaster"]
