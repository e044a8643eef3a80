"""OpenTelemetry adapter – tracing through opentelemetry-api."""
from mp_listing.adapters.opentelemetry.tracer import OtelTracer

__all__ = ["OtelTracer"]
