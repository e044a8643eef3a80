"""Observability – structured logging and tracing."""
