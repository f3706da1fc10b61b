"""Inspect command - show discovered tables and the routes they would get."""

from __future__ import annotations

import asyncio
import json
from typing import Annotated

import typer
from rich.table import Table as RichTable

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
from restrouter.core.connections import ConnectionConfig
from restrouter.core.errors import RestRouterError
from restrouter.pipeline.base import RouterBuild
from restrouter.pipeline.orchestrator import RESTRouter


async def _build(config: ConnectionConfig) -> RouterBuild:
    async with RESTRouter.from_config(config) as rest:
        return await rest.create_router()


def inspect(
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
    output_json: Annotated[
        bool, typer.Option("--json", help="Output as JSON for scripting")
    ] = False,
    verbose: VerboseFlag = False,
) -> None:
    """Introspect the database and list the resources that would be generated."""
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
    )
    setup_logging(settings, verbose)
    require_database(settings)

    try:
        build = asyncio.run(_build(settings.connection_config()))
    except RestRouterError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(1) from e

    if output_json:
        payload = [
            {
                "resource": r.name,
                "table": r.table_name,
                "collection_path": r.collection_path,
                "item_path": r.item_path,
                "addressable": r.addressable,
                "columns": [c.model_dump(mode="json") for c in r.model.description.columns],
            }
            for r in build.resources
        ]
        console.print_json(json.dumps(payload))
        return

    if not build.resources:
        console.print("[yellow]No tables found.[/yellow]")
        return

    console.print(f"\n[bold]{len(build.resources)} resource(s)[/bold]\n")
    for resource in build.resources:
        title = f"{resource.table_name}  ->  {resource.collection_path}, {resource.item_path}"
        if not resource.addressable:
            title += "  [yellow](no addressable id)[/yellow]"

        rich_table = RichTable(title=title, show_header=True, header_style="bold")
        rich_table.add_column("Column")
        rich_table.add_column("Type")
        rich_table.add_column("SQL type", style="dim")
        rich_table.add_column("Nullable")
        rich_table.add_column("PK")

        for column in resource.model.description.columns:
            rich_table.add_row(
                column.name,
                column.type.value,
                column.sql_type or "",
                "yes" if column.nullable else "no",
                "*" if column.primary_key else "",
            )
        console.print(rich_table)
