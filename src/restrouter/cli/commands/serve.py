"""Serve command - run the generated API under uvicorn."""

from __future__ import annotations

from typing import Annotated

import typer

from restrouter.cli.common import (
    DatabaseOption,
    DialectOption,
    HostOption,
    ModelsDirOption,
    PasswordOption,
    PortOption,
    SchemaOption,
    SkipTablesOption,
    TablesOption,
    UrlOption,
    UserOption,
    VerboseFlag,
    console,
    require_database,
    resolve_settings,
    setup_logging,
)


def serve(
    database: DatabaseOption = None,
    dialect: DialectOption = None,
    user: UserOption = None,
    password: PasswordOption = None,
    host: HostOption = None,
    port: PortOption = None,
    url: UrlOption = None,
    schema: SchemaOption = None,
    table: TablesOption = None,
    skip_table: SkipTablesOption = None,
    models_dir: ModelsDirOption = None,
    prefix: Annotated[
        str | None, typer.Option("--prefix", help="Mount the generated routes under this path")
    ] = None,
    bind: Annotated[
        str | None, typer.Option("--bind", help="Interface the API listens on")
    ] = None,
    listen_port: Annotated[
        int | None, typer.Option("--listen-port", help="Port the API listens on")
    ] = None,
    page_size: Annotated[
        int | None, typer.Option("--page-size", min=1, help="Row cap for list endpoints")
    ] = None,
    timestamps: Annotated[
        bool | None,
        typer.Option("--timestamps/--no-timestamps", help="Maintain createdAt/updatedAt"),
    ] = None,
    freeze_table_name: Annotated[
        bool | None,
        typer.Option("--freeze/--pluralize", help="Keep table names as resource names"),
    ] = None,
    verbose: VerboseFlag = False,
) -> None:
    """Expose the database as a REST API."""
    import uvicorn

    from restrouter.api.main import create_app

    settings = resolve_settings(
        database=database,
        dialect=dialect,
        user=user,
        password=password,
        host=host,
        port=port,
        database_url=url,
        schema_name=schema,
        tables=table or None,
        skip_tables=skip_table or None,
        models_directory=models_dir,
        api_prefix=prefix,
        api_host=bind,
        api_port=listen_port,
        page_size=page_size,
        timestamps=timestamps,
        freeze_table_name=freeze_table_name,
    )
    setup_logging(settings, verbose)
    require_database(settings)

    console.print(f"[bold]Serving[/bold] {settings.connection_config().describe()}")
    console.print(f"  Listening on http://{settings.api_host}:{settings.api_port}{settings.api_prefix}")

    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
