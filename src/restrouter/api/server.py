"""API server entry point.

Usage:
    # Via script
    RESTROUTER_DIALECT=sqlite RESTROUTER_DATABASE=./shop.db restrouter-api

    # Via uvicorn directly
    uvicorn restrouter.api.main:create_app --factory --reload

    # Via this module
    python -m restrouter.api.server
"""

from restrouter.core.config import get_settings
from restrouter.core.logging import configure_logging


def main() -> None:
    """Start the API server from RESTROUTER_* settings."""
    import uvicorn

    settings = get_settings()
    configure_logging(log_level=settings.log_level, log_format=settings.log_format)

    print("Starting restrouter API server...")
    print(f"  Host: {settings.api_host}:{settings.api_port}")
    print(f"  Database: {settings.connection_config().describe()}")
    print(f"  Prefix: {settings.api_prefix or '/'}")
    print()

    uvicorn.run(
        "restrouter.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
