"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from specpilot import __version__
from specpilot.config import settings
from specpilot.logging_config import configure_logging
from specpilot.stores.base import KeyValueStore

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=settings.json_logs)

logger = logging.getLogger(__name__)


def attach_services(app: FastAPI, store: KeyValueStore, generator=None) -> None:
    """Wire the store-backed services onto ``app.state``."""
    from specpilot.integrations.config_store import IntegrationConfigStore
    from specpilot.integrations.service import IntegrationService
    from specpilot.services.generator import SpecGenerator
    from specpilot.services.review_state import SpecReviewService

    app.state.store = store
    app.state.spec_service = SpecReviewService(store)
    app.state.integration_service = IntegrationService(IntegrationConfigStore(store))
    app.state.generator = generator or SpecGenerator()


async def create_store() -> KeyValueStore:
    """Build the configured backend; SQL tables are created on first start."""
    if settings.use_memory_store:
        from specpilot.stores.memory import InMemoryStore

        return InMemoryStore()

    from specpilot.db.engine import create_db_engine, create_session_factory, create_tables
    from specpilot.stores.sql import SqlStore

    engine = create_db_engine()
    await create_tables(engine)
    return SqlStore(create_session_factory(engine), engine=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    store = await create_store()
    attach_services(app, store)
    logger.info("SpecPilot API started (store=%s)", type(store).__name__)
    yield

    await store.close()
    logger.info("SpecPilot API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="SpecPilot API",
        version=__version__,
        description="Turns CDP tracking requests into canonical specs and destination tracking plans.",
        lifespan=lifespan,
    )

    # CORS middleware for the web client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from specpilot.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    # Register error handlers
    from specpilot.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Import and mount routers
    from specpilot.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
