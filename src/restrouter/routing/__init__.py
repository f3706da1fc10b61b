"""Router assembly."""

from restrouter.routing.assembler import RouterAssembler, RouteTarget

__all__ = ["RouteTarget", "RouterAssembler"]
