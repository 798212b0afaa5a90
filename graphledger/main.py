"""Graph Ledger API: FastAPI application entry point.

Invariants:
    - Routers are registered explicitly, in one place
    - The session manager exists only between lifespan startup and shutdown
    - CORS origins come from settings

Run with: uvicorn graphledger.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from graphledger.api.error_handlers import register_error_handlers
from graphledger.api.routes import health, models, simulations, users, weight_changes
from graphledger.config import Settings, get_settings
from graphledger.infrastructure.database import close_db, init_db
from graphledger.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

ROUTERS = (
    health.router,
    users.router,
    models.router,
    weight_changes.router,
    simulations.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"Graph Ledger API started (alpha={settings.smoothing_alpha})")
    try:
        yield
    finally:
        await close_db()
        logger.info("Graph Ledger API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    application = FastAPI(title="Graph Ledger API", version="1.0.0", lifespan=lifespan)
    application.state.settings = settings
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for router in ROUTERS:
        application.include_router(router)
    register_error_handlers(application)
    return application


app = create_app()
