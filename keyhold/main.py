"""
Main FastAPI application entry point.

Builds the application: settings are resolved first so an invalid
configuration fails the boot, then middleware, exception handlers and
routers are wired. The lifespan creates tables (no migrations are
shipped) and, for the redis-streams transport, runs the event consumer
as a background task.

Run:
    uvicorn keyhold.main:app
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from keyhold.core.config import get_settings
from keyhold.core.container import get_database, get_event_bus, get_logger
from keyhold.infrastructure.events import RedisStreamEventBus
from keyhold.presentation.api.middleware.trace_middleware import TraceMiddleware
from keyhold.presentation.api.v1 import build_v1_router
from keyhold.presentation.api.v1.errors import register_exception_handlers
from keyhold.presentation.routers import system_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Startup: create tables, build the event bus, start the stream consumer.
    Shutdown: stop the consumer, close the event bus (draining in-process
    deliveries or releasing redis) and the database engine.
    """
    settings = get_settings()
    logger = get_logger()
    database = get_database()

    if settings.create_tables:
        await database.create_all()

    event_bus = get_event_bus()
    stop = asyncio.Event()
    consumer: asyncio.Task[None] | None = None
    if isinstance(event_bus, RedisStreamEventBus):
        consumer = asyncio.create_task(event_bus.run_consumer(stop))

    logger.info(
        "application_started",
        environment=settings.environment.value,
        transport=settings.messaging.transport,
    )

    yield

    stop.set()
    if consumer is not None:
        consumer.cancel()
        with suppress(asyncio.CancelledError):
            await consumer
    await event_bus.close()
    await database.close()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Account management and audit trail API",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Wire trace middleware (request correlation)
    app.add_middleware(TraceMiddleware)

    # Register global exception handlers (RFC 9457 error responses)
    register_exception_handlers(app)

    app.include_router(system_router)
    app.include_router(build_v1_router(settings.api_v1_prefix))
    return app


app = create_app()
