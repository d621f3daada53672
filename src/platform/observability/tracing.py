"""
OpenTelemetry tracing configuration for distributed observability.

Provides:
- Auto-instrumentation for FastAPI, SQLAlchemy and the httpx flight client
- OTLP export (Jaeger/Tempo collector) when OTEL_EXPORTER_OTLP_ENDPOINT is set
"""

import os
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON


class TracingConfig:
    """
    Usage:
        # Initialize once at app startup
        tracing = TracingConfig(service_name="booking-service")
        tracing.setup()

        # Get tracer for manual spans
        tracer = tracing.get_tracer(name=__name__)
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
        self.enable_console = (
            enable_console or os.getenv('OTEL_CONSOLE_EXPORT', 'false').lower() == 'true'
        )

        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        """Setup the global tracer provider. Call once at application startup."""
        resource = Resource(attributes={SERVICE_NAME: self.service_name})

        # Head sampling keeps everything; volume control belongs to the collector
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            otlp_exporter = OTLPSpanExporter(endpoint=self.otlp_endpoint)
            self._provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        if self.enable_console:
            console_exporter = ConsoleSpanExporter()
            self._provider.add_span_processor(BatchSpanProcessor(console_exporter))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        if hasattr(engine, 'sync_engine'):  # Handle AsyncEngine by instrumenting its sync_engine
            SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        else:
            SQLAlchemyInstrumentor().instrument(engine=engine)

    def instrument_httpx(self, *, client: Any) -> None:
        HTTPXClientInstrumentor.instrument_client(client)

    def get_tracer(self, *, name: str) -> trace.Tracer:
        return trace.get_tracer(name)

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()
