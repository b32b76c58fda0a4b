"""Kubernetes resource models."""

from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

POD_KIND = "Pod"

# Untyped resource body as decoded from the API server, key order preserved.
StructuredObject = Dict[str, Any]


class ResourceType(BaseModel):
    """A server-preferred resource kind from the discovery catalog."""

    model_config = ConfigDict(frozen=True)

    group_version: str
    kind: str
    name: str
    namespaced: bool = False
    verbs: Tuple[str, ...] = Field(default_factory=tuple)

    @property
    def group(self) -> str:
        """API group, empty for the core group."""
        parts = self.group_version.split("/")
        return parts[0] if len(parts) > 1 else ""

    @property
    def version(self) -> str:
        """API version without the group."""
        return self.group_version.split("/")[-1]

    @property
    def identifier(self) -> str:
        """Identifier used in logs and failure records, e.g. ``apps/v1/replicasets``."""
        return f"{self.group_version}/{self.name}"

    @property
    def is_pod(self) -> bool:
        return self.kind == POD_KIND

    def sort_key(self) -> Tuple[str, str]:
        return (self.group_version, self.name)


def split_api_version(api_version: str) -> Tuple[str, str]:
    """Split ``group/version`` into its parts; the core group is ``""``."""
    parts = api_version.split("/")
    if len(parts) > 1:
        return parts[0], parts[-1]
    return "", parts[-1]


def container_names(pod: StructuredObject) -> List[str]:
    """Names of the init and regular containers declared by a pod body."""
    spec = pod.get("spec") or {}
    names = []
    for key in ("initContainers", "containers"):
        for container in spec.get(key) or []:
            if isinstance(container, dict) and container.get("name"):
                names.append(container["name"])
    return names
