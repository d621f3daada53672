"""
Production FastAPI Application

Booking API backed by PostgreSQL and the remote flight inventory service.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import SERVICE_NAME, create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Booking Service] Starting up...')

    tracing = TracingConfig(service_name=SERVICE_NAME)
    tracing.setup()
    Logger.base.info('📊 [Booking Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Booking Service] Dependency injection wired')

    engine = get_engine()
    tracing.instrument_sqlalchemy(engine=engine)
    await create_db_and_tables()
    Logger.base.info('🗄️  [Booking Service] Database engine ready + instrumented')

    flight_http_client = container.flight_http_client()
    tracing.instrument_httpx(client=flight_http_client)
    Logger.base.info(
        f'✈️  [Booking Service] Flight service client -> {flight_http_client.base_url}'
    )

    Logger.base.info('✅ [Booking Service] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Booking Service] Shutting down...')

    try:
        await flight_http_client.aclose()
        Logger.base.info('✈️  [Booking Service] Flight service client closed')
    except Exception as e:
        Logger.base.error(f'❌ [Booking Service] Failed to close flight service client: {e}')

    await engine.dispose()
    Logger.base.info('🗄️  [Booking Service] Database engine disposed')

    tracing.shutdown()
    Logger.base.info('📊 [Booking Service] Tracing shutdown complete')

    container.unwire()

    Logger.base.info('👋 [Booking Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
