"""Logging and tracing integration for plugin-compat.

- configure_logging / add_trace_context: structlog setup with trace correlation
- create_span / get_tracer / set_tracer: OpenTelemetry span helpers
"""

from __future__ import annotations

from plugin_compat.telemetry.logging import add_trace_context, configure_logging
from plugin_compat.telemetry.tracing import create_span, get_tracer, set_tracer

__all__ = [
    "add_trace_context",
    "configure_logging",
    "create_span",
    "get_tracer",
    "set_tracer",
]
