"""
OpenTelemetry configuration for the Athlete Unknown API.

Sets up span export over OTLP and instruments Django and logging. Only used
when OTEL_EXPORTER_OTLP_ENDPOINT is set (see wsgi.py).
"""

import base64
import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

logger = logging.getLogger(__name__)


def get_otlp_headers():
    """Basic auth headers for the collector, if credentials are configured."""
    instance_id = os.getenv("OTEL_EXPORTER_OTLP_USER")
    api_token = os.getenv("OTEL_EXPORTER_OTLP_TOKEN")
    if not instance_id or not api_token:
        return None
    auth_b64 = base64.b64encode(f"{instance_id}:{api_token}".encode("utf-8")).decode("utf-8")
    return [("authorization", f"Basic {auth_b64}")]


def setup_opentelemetry():
    """Set up OpenTelemetry tracing."""
    service_name = os.getenv("OTEL_SERVICE_NAME", "athlete-unknown-api")
    environment = os.getenv("OTEL_ENVIRONMENT", "development")
    otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")

    logger.info(f"OpenTelemetry setup: service={service_name}, env={environment}, otlp={otlp_endpoint}")

    resource = Resource.create({"service.name": service_name, "deployment.environment": environment})
    trace_provider = TracerProvider(sampler=ALWAYS_ON, resource=resource)

    if otlp_endpoint:
        exporter = OTLPSpanExporter(
            endpoint=otlp_endpoint,
            insecure=os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true",
            headers=get_otlp_headers(),
        )
        trace_provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(trace_provider)
    return trace.get_tracer(__name__)


def instrument_django():
    """Instrument Django and logging with OpenTelemetry."""
    DjangoInstrumentor().instrument(
        response_hook=lambda span, request, response: span.set_attribute(
            "http.response_size", len(response.content) if hasattr(response, "content") else 0
        )
    )
    LoggingInstrumentor().instrument(set_logging_format=True, log_level=os.getenv("OTEL_LOG_LEVEL", "INFO"))


# Global tracer instance
tracer = None


def initialize():
    """Initialize OpenTelemetry globally."""
    global tracer

    if tracer is None:
        tracer = setup_opentelemetry()
        instrument_django()

    return tracer
