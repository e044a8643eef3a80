"""Observability – structlog configuration and logger helper."""
from mp_listing.observability.logging.factory import JsonLoggerFactory
from mp_listing.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
