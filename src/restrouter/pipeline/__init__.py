"""Pipeline - the orchestrator and its run states."""

from restrouter.pipeline.base import PIPELINE_STAGES, PipelineState, RouterBuild
from restrouter.pipeline.orchestrator import RESTRouter

__all__ = [
    "PIPELINE_STAGES",
    "PipelineState",
    "RESTRouter",
    "RouterBuild",
]
