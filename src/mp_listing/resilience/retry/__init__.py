"""Resilience retry – tenacity-backed policies."""
from mp_listing.resilience.retry.tenacity_adapter import TransientSearchRetry

__all__ = ["TransientSearchRetry"]
