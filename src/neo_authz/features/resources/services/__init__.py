"""Resource services: id resolution and entity/resource lifecycle."""

from .lifecycle_manager import ResourceLifecycleManager
from .resource_resolver import PROBE_ORDER, ResourceTypeResolver, parse_resource_id

__all__ = [
    "PROBE_ORDER",
    "ResourceLifecycleManager",
    "ResourceTypeResolver",
    "parse_resource_id",
]
