"""CLI for restrouter.

Provides commands for inspecting a database and serving it as a REST API.

Usage:
    restrouter inspect --dialect sqlite --database ./shop.db
    restrouter serve --dialect mysql --database shop --user admin --prefix /api/v1

Environment:
    Loads .env file from current directory if present.
    Every option falls back to its RESTROUTER_* environment variable.
"""

from restrouter.cli.main import app, main

__all__ = ["app", "main"]
