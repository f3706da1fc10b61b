"""Pipeline base types.

Defines the run states of the orchestrator and the value it delivers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from restrouter.pipeline.orchestrator import RESTRouter
    from restrouter.routing.assembler import RouteTarget
    from restrouter.synthesis.resource import Resource


class PipelineState(str, Enum):
    """State of a create_router run."""

    IDLE = "idle"
    INTROSPECTING = "introspecting"
    REGISTERING = "registering"
    SYNTHESIZING = "synthesizing"
    ASSEMBLING = "assembling"
    READY = "ready"
    FAILED = "failed"


TERMINAL_STATES = frozenset({PipelineState.READY, PipelineState.FAILED})

# Forward transitions of a successful run; FAILED is reachable from any of them
PIPELINE_STAGES: list[PipelineState] = [
    PipelineState.INTROSPECTING,
    PipelineState.REGISTERING,
    PipelineState.SYNTHESIZING,
    PipelineState.ASSEMBLING,
    PipelineState.READY,
]


@dataclass(frozen=True)
class RouterBuild:
    """What a successful run delivers, all at once."""

    rest: RESTRouter
    router: RouteTarget
    resources: list[Resource] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        """Every generated path, collection and item, in resource order."""
        return [path for resource in self.resources for path in resource.endpoints]
