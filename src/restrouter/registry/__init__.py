"""Model registry - live handles for introspected tables."""

from restrouter.registry.handle import ModelHandle, build_table
from restrouter.registry.registry import ModelRegistry

__all__ = [
    "ModelHandle",
    "ModelRegistry",
    "build_table",
]
