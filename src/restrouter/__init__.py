"""restrouter - REST APIs generated from database schemas.

Example:
    from fastapi import FastAPI
    from restrouter import RESTRouter

    app = FastAPI()
    build = await RESTRouter.create("shop", "admin", "secret", dialect="mysql")
    app.include_router(build.router, prefix="/api/v1")
"""

__version__ = "0.1.0"

from restrouter.core.connections import ConnectionConfig
from restrouter.core.errors import (
    ConfigurationError,
    DatabaseConnectionError,
    IntrospectionError,
    NotFoundError,
    PathCollisionError,
    RestRouterError,
    ValidationError,
)
from restrouter.pipeline import PipelineState, RESTRouter, RouterBuild
from restrouter.synthesis import Resource

__all__ = [
    "ConfigurationError",
    "ConnectionConfig",
    "DatabaseConnectionError",
    "IntrospectionError",
    "NotFoundError",
    "PathCollisionError",
    "PipelineState",
    "RESTRouter",
    "Resource",
    "RestRouterError",
    "RouterBuild",
    "ValidationError",
    "__version__",
]
