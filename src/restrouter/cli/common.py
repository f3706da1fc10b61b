"""Shared CLI utilities and constants."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console

from restrouter.core.config import Settings, get_settings
from restrouter.core.logging import configure_logging

# Load .env file from current directory (for credentials, etc.)
load_dotenv()

# Shared console instance
console = Console()

# Common type aliases for typer options
DatabaseOption = Annotated[
    str | None,
    typer.Option("--database", "-d", help="Database name (file path for sqlite)"),
]
DialectOption = Annotated[
    str | None,
    typer.Option("--dialect", help="mysql, mariadb, postgresql, sqlite or mssql"),
]
UserOption = Annotated[str | None, typer.Option("--user", "-u", help="Database user")]
PasswordOption = Annotated[
    str | None,
    typer.Option("--password", "-p", help="Database password", envvar="RESTROUTER_PASSWORD"),
]
HostOption = Annotated[str | None, typer.Option("--host", help="Database host")]
PortOption = Annotated[int | None, typer.Option("--port", help="Database port")]
UrlOption = Annotated[
    str | None,
    typer.Option("--url", help="Full SQLAlchemy URL (overrides the other connection options)"),
]
SchemaOption = Annotated[str | None, typer.Option("--schema", help="Schema to introspect")]
TablesOption = Annotated[
    list[str] | None,
    typer.Option("--table", "-t", help="Only expose this table (repeatable)"),
]
SkipTablesOption = Annotated[
    list[str] | None,
    typer.Option("--skip-table", help="Never expose this table (repeatable)"),
]
ModelsDirOption = Annotated[
    Path | None,
    typer.Option(
        "--models-dir",
        help="Write YAML model descriptions to this directory",
        file_okay=False,
        resolve_path=True,
    ),
]
VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug logs"),
]


def resolve_settings(**overrides: Any) -> Settings:
    """Settings from RESTROUTER_* env vars with non-None CLI values applied on top."""
    update = {key: value for key, value in overrides.items() if value is not None}
    return get_settings().model_copy(update=update)


def setup_logging(settings: Settings, verbose: bool = False) -> None:
    level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=level, log_format=settings.log_format)


def require_database(settings: Settings) -> None:
    """Exit with an error when no database was configured."""
    if not settings.database and not settings.database_url:
        console.print(
            "[red]No database configured. Use --database/--url or set RESTROUTER_DATABASE.[/red]"
        )
        raise typer.Exit(1)
