"""Resource kinds that are never exported."""

from pathlib import Path
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Union

import yaml

from ..errors import ConfigurationError


class ExclusionPolicy:
    """Immutable table of groupVersion -> plural names to skip.

    Lookups for a groupVersion absent from the table exclude nothing.
    """

    def __init__(self, table: Mapping[str, Iterable[str]]):
        self._table = MappingProxyType(
            {group_version: frozenset(names) for group_version, names in table.items()}
        )

    @property
    def table(self) -> Mapping[str, FrozenSet[str]]:
        return self._table

    def is_excluded(self, group_version: str, plural_name: str) -> bool:
        return plural_name in self._table.get(group_version, frozenset())

    def merged(self, other: "ExclusionPolicy") -> "ExclusionPolicy":
        """Return a new policy excluding everything either policy excludes."""
        combined = {gv: set(names) for gv, names in self._table.items()}
        for group_version, names in other.table.items():
            combined.setdefault(group_version, set()).update(names)
        return ExclusionPolicy(combined)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ExclusionPolicy":
        """Load a ``groupVersion: [plural, ...]`` mapping from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read exclusion file {path}: {e}")

        if data is None:
            return cls({})
        if not isinstance(data, dict):
            raise ConfigurationError(f"Exclusion file {path} must contain a mapping")

        table = {}
        for group_version, names in data.items():
            if names is None:
                names = []
            if isinstance(names, str):
                names = [names]
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise ConfigurationError(
                    f"Exclusions for {group_version!r} in {path} must be a list of resource names"
                )
            table[str(group_version)] = names
        return cls(table)

    def __eq__(self, other):
        if not isinstance(other, ExclusionPolicy):
            return NotImplemented
        return dict(self._table) == dict(other.table)

    def __repr__(self):
        return f"ExclusionPolicy({dict(self._table)!r})"


# Ephemeral review objects, high-churn bookkeeping and kinds that cannot be listed.
DEFAULT_EXCLUSIONS = ExclusionPolicy(
    {
        "apps/v1": ["replicasets"],
        "authentication.k8s.io/v1": ["selfsubjectreviews", "tokenreviews"],
        "authorization.k8s.io/v1": [
            "selfsubjectaccessreviews",
            "subjectaccessreviews",
            "selfsubjectrulesreviews",
            "localsubjectaccessreviews",
        ],
        "coordination.k8s.io/v1": ["leases"],
        "discovery.k8s.io/v1": ["endpointslices"],
        "events.k8s.io/v1": ["events"],
        "v1": ["events", "bindings", "componentstatuses"],
    }
)
