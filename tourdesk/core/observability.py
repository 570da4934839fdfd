"""Observability setup for OpenTelemetry, metrics, and structured logging."""

import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest
import structlog

from .. import __version__
from .config import settings

# Prometheus metrics
REGISTRY = CollectorRegistry()

BOOKINGS_COMMITTED = Counter(
    'bookings_committed_total',
    'Bookings whose primary durable write succeeded',
    ['resource_type'],
    registry=REGISTRY
)

BOOKINGS_ROLLED_BACK = Counter(
    'bookings_rolled_back_total',
    'Bookings compensated after a failed primary durable write',
    ['resource_type'],
    registry=REGISTRY
)

SIDE_EFFECT_FAILURES = Counter(
    'reconciliation_side_effect_failures_total',
    'Best-effort durable writes that failed and were tolerated',
    ['stage'],
    registry=REGISTRY
)

OVERRIDE_UPDATES = Counter(
    'manual_override_updates_total',
    'Administrative manual override writes',
    registry=REGISTRY
)

SLOT_UTILIZATION = Gauge(
    'slot_utilization_ratio',
    'Booked over capacity for the most recently resolved slot',
    ['resource_type'],
    registry=REGISTRY
)


def setup_structured_logging():
    """Configure structured logging with structlog."""

    def add_trace_context(logger, method_name, event_dict):
        """Add trace context to log events."""
        span = trace.get_current_span()
        if span and span.is_recording():
            ctx = span.get_span_context()
            event_dict['trace_id'] = format(ctx.trace_id, '032x')
            event_dict['span_id'] = format(ctx.span_id, '016x')
        return event_dict

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_trace_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def tracing_resource(app_name: str, version: str = __version__) -> Resource:
    """Resource attributes attached to every exported span."""
    return Resource.create({
        "service.name": app_name,
        "service.version": version,
        "environment": settings.environment,
    })


def setup_tracing(app_name: str = "tourdesk", version: str = __version__):
    """Setup OpenTelemetry tracing."""
    provider = TracerProvider(resource=tracing_resource(app_name, version))
    trace.set_tracer_provider(provider)

    if settings.otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    return trace.get_tracer(__name__)


def instrument_fastapi(app):
    """Instrument FastAPI with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app)


def instrument_sqlalchemy():
    """Instrument SQLAlchemy with OpenTelemetry."""
    SQLAlchemyInstrumentor().instrument()


class MetricsCollector:
    """Collector for reconciliation metrics."""

    @staticmethod
    def record_booking_committed(resource_type: str):
        """Record a booking whose primary write succeeded."""
        BOOKINGS_COMMITTED.labels(resource_type=resource_type).inc()

    @staticmethod
    def record_booking_rolled_back(resource_type: str):
        """Record a compensated booking."""
        BOOKINGS_ROLLED_BACK.labels(resource_type=resource_type).inc()

    @staticmethod
    def record_side_effect_failure(stage: str):
        """Record a tolerated secondary write failure."""
        SIDE_EFFECT_FAILURES.labels(stage=stage).inc()

    @staticmethod
    def record_override_update():
        """Record an administrative override write."""
        OVERRIDE_UPDATES.inc()

    @staticmethod
    def set_slot_utilization(resource_type: str, utilization: float):
        """Set utilization of the last resolved slot for a resource class."""
        SLOT_UTILIZATION.labels(resource_type=resource_type).set(utilization)


def get_prometheus_metrics():
    """Get Prometheus metrics for the /metrics endpoint."""
    return generate_latest(REGISTRY)


# Global metrics collector instance
metrics_collector = MetricsCollector()


class StructuredLogger:
    """Structured logger with business context."""

    def __init__(self, name_or_logger):
        if isinstance(name_or_logger, str):
            self.logger = structlog.get_logger(name_or_logger)
        else:
            self.logger = name_or_logger

    def info(self, message: str, **kwargs):
        """Log info message with context."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with context."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with context."""
        self.logger.error(message, **kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug message with context."""
        self.logger.debug(message, **kwargs)

    def with_context(self, **kwargs):
        """Add context to logger."""
        return StructuredLogger(self.logger.bind(**kwargs))


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)
