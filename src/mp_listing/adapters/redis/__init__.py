"""Redis adapter – realtime broadcast over Redis pub/sub."""
from mp_listing.adapters.redis.broadcaster import RedisBroadcaster

__all__ = ["RedisBroadcaster"]
