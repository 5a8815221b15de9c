"""Observability module for structured logging."""

from prompt_batch.observability.logging import bind_run_context, configure_logging


__all__ = ["bind_run_context", "configure_logging"]
