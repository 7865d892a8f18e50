"""OpenTelemetry setup, enabled with ``TRACING_ENABLED=true``."""
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config.settings import Settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def setup_tracing(settings: Settings) -> TracerProvider:
    resource = Resource.create(
        {
            "service.name": settings.otel_service_name,
            "service.version": settings.api_version,
            "deployment.environment": settings.environment,
            "telemetry.sdk.language": "python",
        }
    )

    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint, insecure=True)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return provider


def instrument_app(app: FastAPI, engine: AsyncEngine, settings: Settings) -> bool:
    """Instrument FastAPI, SQLAlchemy and outgoing httpx calls.

    Returns False without touching anything when tracing is disabled.
    """
    if not settings.tracing_enabled:
        return False

    provider = setup_tracing(settings)
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=provider,
        excluded_urls="health,health/.*",
    )
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=provider)
    HTTPXClientInstrumentor().instrument(tracer_provider=provider)
    logger.info("tracing_enabled", endpoint=settings.otel_exporter_otlp_endpoint)
    return True
