"""CLI command implementations."""

from restrouter.cli.commands import inspect, serve

__all__ = ["inspect", "serve"]
