"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from ballot_api import __version__
from ballot_api.core.config import get_settings
from ballot_api.core.database import dispose_engine, init_engine
from ballot_api.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    if not settings.assistant_enabled:
        logger.info("GENAI_API_KEY not set; assistant endpoints will answer 503")

    yield

    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Ballot API",
        description="Election administration: elections, candidate registration, voting and results",
        version=__version__,
        lifespan=lifespan,
    )

    from ballot_api.api.errors import register_exception_handlers
    from ballot_api.api.router import create_router, setup_middleware

    register_exception_handlers(app)
    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
