"""Resource synthesis - models into routable CRUD resources."""

from restrouter.synthesis.naming import collection_path, item_path, resource_name
from restrouter.synthesis.resource import Resource, ResourceOperations
from restrouter.synthesis.synthesizer import ResourceSynthesizer

__all__ = [
    "Resource",
    "ResourceOperations",
    "ResourceSynthesizer",
    "collection_path",
    "item_path",
    "resource_name",
]
