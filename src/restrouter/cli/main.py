"""Main CLI application entry point."""

from __future__ import annotations

from typing import Annotated

import typer

from restrouter import __version__
from restrouter.cli.commands import inspect, serve

app = typer.Typer(
    name="restrouter",
    help="restrouter - REST APIs generated from database schemas.",
    no_args_is_help=True,
)

app.command()(inspect.inspect)
app.command()(serve.serve)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"restrouter {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_print_version, is_eager=True, help="Show the version"),
    ] = False,
) -> None:
    """Expose the tables of a relational database as a REST API."""


def main() -> None:
    app()


if __name__ == "__main__":
    main()
