"""Application realtime – broadcast port and in-memory fake."""
from mp_listing.application.realtime.broadcaster import Broadcaster, InMemoryBroadcaster, Publication

__all__ = ["Broadcaster", "InMemoryBroadcaster", "Publication"]
