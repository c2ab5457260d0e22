"""Application factory and process entry point."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from shipdesk import __version__
from shipdesk.auth import ensure_admin
from shipdesk.config import ShipdeskConfig
from shipdesk.exceptions import register_exception_handlers
from shipdesk.logging_config import configure_logging
from shipdesk.protocols import TrackingLookup
from shipdesk.router import create_api_router
from shipdesk.storage.gateway import Database
from shipdesk.storage.seed import seed_demo_data
from shipdesk.tracking import HTTPTrackingLookup

logger = logging.getLogger(__name__)


async def init_store(db: Database, config: ShipdeskConfig) -> None:
    """Open the store, migrate it and make sure an admin can log in."""
    await db.connect()
    await db.create_schema()
    await ensure_admin(
        db,
        config.admin_username,
        config.admin_password,
        bcrypt_rounds=config.bcrypt_rounds,
    )
    if config.seed_demo_data:
        await seed_demo_data(db)


def create_app(
    config: ShipdeskConfig | None = None,
    *,
    database: Database | None = None,
    tracking: TrackingLookup | None = None,
) -> FastAPI:
    """Create a configured application.

    ``database`` and ``tracking`` default to the ones described by
    ``config``; pass them to inject an in-memory store or a stub upstream.
    """
    config = config or ShipdeskConfig()
    database = database or Database(config.database_url)
    tracking = tracking or HTTPTrackingLookup(
        config.tracking_api_url, timeout=config.tracking_timeout
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        app.state.shipdesk_config = config
        app.state.shipdesk_database = database
        app.state.shipdesk_tracking = tracking
        try:
            await init_store(database, config)
        except Exception:
            logger.critical("Store initialization failed", exc_info=True)
            raise
        yield
        await database.close()

    app = FastAPI(title="shipdesk", version=__version__, lifespan=lifespan)
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        session_cookie="shipdesk_session",
        max_age=config.session_max_age,
    )
    register_exception_handlers(app)
    app.include_router(create_api_router(), prefix="/api")
    return app


def main() -> None:
    """Run the application with uvicorn using environment config."""
    config = ShipdeskConfig()
    configure_logging(config.log_level)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_config=None,
    )
