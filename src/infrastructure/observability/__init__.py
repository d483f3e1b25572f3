"""Observability module providing OpenTelemetry tracing and structlog integration."""

from src.infrastructure.observability.setup import (
    init_observability,
    init_observability_from_settings,
    shutdown_observability,
)
from src.infrastructure.observability.structlog_processor import add_trace_context
from src.infrastructure.observability.tracing import (
    add_span_attributes,
    get_tracer,
    traced,
)

__all__ = [
    "add_span_attributes",
    "add_trace_context",
    "get_tracer",
    "init_observability",
    "init_observability_from_settings",
    "shutdown_observability",
    "traced",
]
