"""Resource catalog discovery."""

from typing import Any, Dict, Iterable, List, Optional

from ..core.exclusions import DEFAULT_EXCLUSIONS, ExclusionPolicy
from ..errors import DiscoveryError, KubectlError
from ..model.kubernetes import ResourceType
from ..utils.logger import get_logger
from .client import K8sClient

logger = get_logger(__name__)


class ResourceDiscovery:
    """Builds the ordered list of resource kinds to export."""

    def __init__(self, client: K8sClient, exclusions: Optional[ExclusionPolicy] = None):
        self.client = client
        self.exclusions = exclusions if exclusions is not None else DEFAULT_EXCLUSIONS

    def discover(self) -> List[ResourceType]:
        """Return the server-preferred kinds, minus exclusions, sorted by groupVersion then name."""
        logger.info("Discovering API resources")
        try:
            raw_resources = self.client.get_preferred_resources()
        except KubectlError as e:
            raise DiscoveryError(f"failed to discover resources: {e}") from e

        resource_types = self.build_catalog(raw_resources)
        logger.info(f"Found {len(resource_types)} resource types to export")
        return resource_types

    def build_catalog(self, raw_resources: Iterable[Dict[str, Any]]) -> List[ResourceType]:
        """Filter and order raw discovery entries."""
        seen = {}
        for raw in raw_resources:
            resource_type = self._to_resource_type(raw)
            if resource_type is None:
                continue
            if self.exclusions.is_excluded(resource_type.group_version, resource_type.name):
                logger.debug(f"Skipping excluded resource {resource_type.identifier}")
                continue
            seen.setdefault(resource_type.identifier, resource_type)

        return sorted(seen.values(), key=ResourceType.sort_key)

    def _to_resource_type(self, raw: Dict[str, Any]) -> Optional[ResourceType]:
        name = raw.get("name")
        kind = raw.get("kind")
        group_version = raw.get("groupVersion")
        if not name or not kind or not group_version:
            logger.warning(f"Ignoring malformed discovery entry: {raw!r}")
            return None

        # Subresources such as pods/log are not listable kinds.
        if "/" in name:
            return None

        namespaced = raw.get("namespaced")
        if not isinstance(namespaced, bool):
            logger.warning(f"Resource {group_version}/{name} has no namespaced flag, assuming cluster scope")
            namespaced = False

        verbs = tuple(v for v in raw.get("verbs") or [] if isinstance(v, str))
        # Entries that advertise verbs but not list cannot be exported.
        if verbs and "list" not in verbs:
            logger.debug(f"Skipping {group_version}/{name}, list is not supported")
            return None

        return ResourceType(
            group_version=group_version,
            kind=kind,
            name=name,
            namespaced=namespaced,
            verbs=verbs,
        )
