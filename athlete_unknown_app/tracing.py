"""
Tracing utilities for the Athlete Unknown API.

Decorators and context managers that wrap round operations in OpenTelemetry
spans. Tracing is only active when OTEL_EXPORTER_OTLP_ENDPOINT is set;
otherwise every helper here is a no-op.
"""

import os
import time
from contextlib import contextmanager
from functools import wraps

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Cache for tracing enabled status
_TRACING_ENABLED = None


def is_tracing_enabled():
    """
    Check if an OTLP endpoint is configured.

    Returns:
        bool: True if spans should be recorded
    """
    global _TRACING_ENABLED

    if _TRACING_ENABLED is None:
        _TRACING_ENABLED = bool(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))
    return _TRACING_ENABLED


def reset_tracing_cache():
    """
    Reset the tracing enabled cache, e.g. after changing the environment in tests.
    """
    global _TRACING_ENABLED
    _TRACING_ENABLED = None


class _NoopSpan:
    def set_attribute(self, key, value):
        pass

    def set_status(self, status):
        pass

    def record_exception(self, exception):
        pass


def _record_success(span, start_time):
    span.set_attribute("operation.success", True)
    span.set_attribute("operation.execution_time_ms", (time.time() - start_time) * 1000)
    span.set_status(Status(StatusCode.OK))


def _record_failure(span, start_time, exception):
    span.set_attribute("operation.success", False)
    span.set_attribute("operation.execution_time_ms", (time.time() - start_time) * 1000)
    span.set_attribute("operation.error", str(exception))
    span.set_attribute("operation.error_type", type(exception).__name__)
    span.record_exception(exception)
    span.set_status(Status(StatusCode.ERROR, str(exception)))


@contextmanager
def trace_operation(operation_name, **attributes):
    """
    Context manager for tracing operations with OpenTelemetry.

    Args:
        operation_name (str): Name of the operation being traced
        **attributes: Additional attributes to add to the span

    Example:
        with trace_operation("round.guess", sport="baseball") as span:
            outcome = session.submit_guess(guess)
            span.set_attribute("guess.outcome", outcome.status)
    """
    if not is_tracing_enabled():
        yield _NoopSpan()
        return

    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(operation_name, attributes=attributes) as span:
        start_time = time.time()
        try:
            yield span
        except Exception as e:
            _record_failure(span, start_time, e)
            raise
        _record_success(span, start_time)


def trace_function(operation_name, **attributes):
    """
    Decorator to trace function execution with OpenTelemetry.

    Example:
        @trace_function("round.fetch", backend="athlete-unknown")
        def fetch_round(sport, play_date):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not is_tracing_enabled():
                return func(*args, **kwargs)

            with trace_operation(operation_name, **attributes) as span:
                span.set_attribute("function.name", func.__name__)
                span.set_attribute("function.module", func.__module__)
                return func(*args, **kwargs)

        return wrapper

    return decorator


def add_span_attribute(key, value):
    """
    Add an attribute to the current span.

    Example:
        add_span_attribute("round.score", 91)
    """
    if not is_tracing_enabled():
        return

    current_span = trace.get_current_span()
    if current_span:
        current_span.set_attribute(key, value)


def record_exception(exception, **attributes):
    """
    Record an exception in the current span without ending it.
    """
    if not is_tracing_enabled():
        return

    current_span = trace.get_current_span()
    if current_span:
        for key, value in attributes.items():
            current_span.set_attribute(key, value)
        current_span.record_exception(exception)
        current_span.set_status(Status(StatusCode.ERROR, str(exception)))
