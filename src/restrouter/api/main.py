"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from restrouter import __version__
from restrouter.core.config import Settings, get_settings
from restrouter.core.logging import get_logger
from restrouter.pipeline.orchestrator import RESTRouter

logger = get_logger(__name__)

HEALTH_PATH = "/health"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler.

    Runs the pipeline on startup and mounts the generated router under the
    configured prefix. Disposes the engine on shutdown. A pipeline failure
    aborts startup.
    """
    settings: Settings = app.state.settings
    rest: RESTRouter = app.state.rest

    build = await rest.create_router()
    app.include_router(build.router, prefix=settings.api_prefix)
    app.state.resources = build.resources

    shadowed = [
        r.name for r in build.resources if f"{settings.api_prefix}{r.collection_path}" == HEALTH_PATH
    ]
    if shadowed:
        logger.warning("resource_shadowed_by_health_check", resources=shadowed)

    logger.info(
        "api_ready",
        prefix=settings.api_prefix or "/",
        resources=[r.name for r in build.resources],
    )

    try:
        yield
    finally:
        await rest.close()


def create_app(
    settings: Settings | None = None,
    rest: RESTRouter | None = None,
    title: str = "restrouter",
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, read from RESTROUTER_* env vars.
        rest: Pre-built RESTRouter. If None, one is built from the settings.
        title: API title

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()
    if rest is None:
        rest = RESTRouter.from_config(settings.connection_config(), page_size=settings.page_size)

    app = FastAPI(
        title=title,
        version=__version__,
        description="REST API generated from the database schema",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.rest = rest
    app.state.resources = []

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get(HEALTH_PATH)  # type: ignore[untyped-decorator]
    async def health_check() -> dict[str, object]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "state": app.state.rest.state.value,
            "resources": len(app.state.resources),
        }

    return app
