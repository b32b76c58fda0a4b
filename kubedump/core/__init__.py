"""Core business logic.

``ResourceDumper`` lives in ``kubedump.core.dumper`` and is imported from
there; it depends on ``kubedump.k8s``, which itself uses the exclusion table.
"""

from .exclusions import DEFAULT_EXCLUSIONS, ExclusionPolicy
from .paths import CLUSTER_SCOPE, PathResolver, sanitize_name
from .transform import ObjectTransformer

__all__ = [
    "DEFAULT_EXCLUSIONS",
    "ExclusionPolicy",
    "CLUSTER_SCOPE",
    "PathResolver",
    "sanitize_name",
    "ObjectTransformer",
]
