"""OpenTelemetry tracing utilities for plugin-compat.

Verification stages run inside spans created with create_span(). Only the
OpenTelemetry API is required: without an SDK configured by the host
process, the global tracer is a no-op and spans cost nothing.

Example:
    >>> from plugin_compat.telemetry.tracing import create_span
    >>> with create_span("verify.descriptors", attributes={"verify.descriptor_count": 2}):
    ...     pass
"""

from __future__ import annotations

import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer

_TRACER_NAME = "plugin_compat"

_tracer: Tracer | None = None
_lock = threading.Lock()


def get_tracer() -> Tracer:
    """Get the tracer used for plugin-compat spans.

    Returns a NoOpTracer if the OpenTelemetry API fails to initialize.
    """
    global _tracer

    if _tracer is not None:
        return _tracer

    with _lock:
        if _tracer is None:
            try:
                _tracer = trace.get_tracer(_TRACER_NAME)
            except Exception:
                _tracer = trace.NoOpTracer()
        return _tracer


def set_tracer(tracer: Tracer | None) -> None:
    """Set the module-level tracer (for testing).

    Args:
        tracer: Tracer instance to use, or None to reset to the global tracer.
    """
    global _tracer
    with _lock:
        _tracer = tracer


@contextmanager
def create_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a span as a context manager.

    Exceptions raised inside the block mark the span as failed and are
    re-raised unchanged.

    Args:
        name: The name for the span.
        attributes: Optional attributes to set on the span.

    Yields:
        The created span for additional attribute setting.
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(
        name,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.set_attribute("exception.type", type(e).__name__)
            span.set_attribute("exception.message", str(e))
            raise


__all__ = ["create_span", "get_tracer", "set_tracer"]
