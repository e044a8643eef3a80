"""Resilience – caller-side retry for transient search failures."""
from mp_listing.resilience.retry import TransientSearchRetry

__all__ = ["TransientSearchRetry"]
