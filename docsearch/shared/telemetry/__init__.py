"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from docsearch.shared.telemetry.logging import get_logger, setup_logging
from docsearch.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from docsearch.shared.telemetry.tracing import add_span_attributes, get_trace_id, traced

__all__ = [
    "TelemetryConfig",
    "add_span_attributes",
    "get_logger",
    "get_telemetry",
    "get_trace_id",
    "set_telemetry",
    "setup_logging",
    "traced",
]
