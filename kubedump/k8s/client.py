"""Kubernetes client wrapper."""

import json
import subprocess
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from ..errors import KubectlError
from ..model.kubernetes import ResourceType
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30
# Grace period on top of the server-side timeout before the process is killed.
PROCESS_TIMEOUT_SLACK = 15


class K8sClient:
    """Wrapper for kubectl commands.

    kubectl owns kubeconfig loading, context selection and authentication. All
    reads go through the raw API so that discovery and listing see exactly what
    the server serves, the same way a dynamic client would.
    """

    def __init__(
        self,
        context: Optional[str] = None,
        kubeconfig: Optional[str] = None,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.context = context
        self.kubeconfig = kubeconfig
        self.request_timeout = request_timeout
        self._verify_kubectl()

    def _verify_kubectl(self):
        """Verify kubectl is available and configured."""
        try:
            subprocess.run(
                ["kubectl", "version", "--client", "-o", "json"],
                capture_output=True,
                text=True,
                check=True,
            )
            logger.debug("kubectl verified successfully")
        except FileNotFoundError:
            raise RuntimeError("kubectl command not found. Please install kubectl.")
        except subprocess.CalledProcessError:
            logger.warning("kubectl verification failed")

    @property
    def process_timeout(self) -> int:
        return self.request_timeout + PROCESS_TIMEOUT_SLACK

    def _build_command(self, args: List[str]) -> List[str]:
        """Build kubectl command with kubeconfig, context and request timeout."""
        cmd = ["kubectl"]

        if self.kubeconfig:
            cmd.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            cmd.extend(["--context", self.context])
        if self.request_timeout:
            cmd.append(f"--request-timeout={self.request_timeout}s")

        cmd.extend(args)
        return cmd

    def execute(self, args: List[str]) -> Tuple[bool, str]:
        """Execute kubectl command and return success status and output."""
        cmd = self._build_command(args)
        logger.debug(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=True, timeout=self.process_timeout
            )
            return True, result.stdout
        except subprocess.CalledProcessError as e:
            logger.debug(f"Command failed: {e.stderr}")
            return False, e.stderr
        except subprocess.TimeoutExpired:
            logger.debug(f"Command timed out after {self.process_timeout}s")
            return False, f"timed out after {self.process_timeout}s"

    def get_raw(self, path: str) -> Dict[str, Any]:
        """GET a raw API path and decode the JSON body."""
        success, output = self.execute(["get", "--raw", path])
        if not success:
            raise KubectlError(f"GET {path} failed: {output.strip()}")
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise KubectlError(f"GET {path} returned invalid JSON: {e}")

    def get_preferred_resources(self) -> List[Dict[str, Any]]:
        """Return one entry per (group, resource) across every served version.

        A resource served by the group's preferred version is reported in that
        version; resources missing from it come from the first other version
        that serves them, in the order the server lists the versions.
        """
        # (group name, [(groupVersion, path), ...]) with the preferred version first
        groups_to_read = []

        core = self.get_raw("/api")
        core_versions = [(v, f"/api/{v}") for v in core.get("versions") or []]
        groups_to_read.append(("", core_versions))

        groups = self.get_raw("/apis")
        for group in groups.get("groups") or []:
            served = [
                v["groupVersion"]
                for v in group.get("versions") or []
                if isinstance(v, dict) and v.get("groupVersion")
            ]
            preferred = (group.get("preferredVersion") or {}).get("groupVersion")
            if preferred:
                served = [preferred] + [gv for gv in served if gv != preferred]
            if served:
                groups_to_read.append(
                    (group.get("name", ""), [(gv, f"/apis/{gv}") for gv in served])
                )

        resources = {}
        for group_name, group_versions in groups_to_read:
            for group_version, path in group_versions:
                resource_list = self.get_raw(path)
                for resource in resource_list.get("resources") or []:
                    key = (group_name, resource.get("name"))
                    if key in resources:
                        continue
                    entry = dict(resource)
                    entry["groupVersion"] = resource_list.get("groupVersion", group_version)
                    resources[key] = entry

        logger.debug(f"Discovered {len(resources)} resources in {len(groups_to_read)} groups")
        return list(resources.values())

    @staticmethod
    def _resource_path(resource_type: ResourceType) -> str:
        prefix = "/apis" if resource_type.group else "/api"
        return f"{prefix}/{resource_type.group_version}/{resource_type.name}"

    def list_resource(self, resource_type: ResourceType) -> List[Dict[str, Any]]:
        """List every instance of a kind across all namespaces."""
        data = self.get_raw(self._resource_path(resource_type))

        api_version = data.get("apiVersion") or resource_type.group_version
        list_kind = data.get("kind") or ""
        item_kind = list_kind[: -len("List")] if list_kind.endswith("List") else ""
        item_kind = item_kind or resource_type.kind

        items = data.get("items") or []
        for item in items:
            # List responses omit per-item type information.
            if isinstance(item, dict):
                item.setdefault("apiVersion", api_version)
                item.setdefault("kind", item_kind)
        return items

    def get_pod(self, namespace: str, name: str) -> Dict[str, Any]:
        """Fetch a single pod."""
        return self.get_raw(f"/api/v1/namespaces/{namespace}/pods/{name}")

    def stream_logs(self, namespace: str, pod: str, container: str, destination: BinaryIO) -> None:
        """Copy a container's log stream verbatim into ``destination``."""
        cmd = self._build_command(["logs", pod, "-n", namespace, "-c", container])
        logger.debug(f"Executing: {' '.join(cmd)}")

        try:
            subprocess.run(
                cmd,
                stdout=destination,
                stderr=subprocess.PIPE,
                check=True,
                timeout=self.process_timeout,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="replace").strip()
            raise KubectlError(f"logs for {namespace}/{pod}/{container} failed: {stderr}")
        except subprocess.TimeoutExpired:
            raise KubectlError(
                f"logs for {namespace}/{pod}/{container} timed out after {self.process_timeout}s"
            )
