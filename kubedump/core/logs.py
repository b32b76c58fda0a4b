"""Container log capture for exported pods."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import KubectlError
from ..k8s.client import K8sClient
from ..model.export import ExportResult
from ..model.kubernetes import container_names
from ..utils.logger import get_logger
from .paths import PathResolver

logger = get_logger(__name__)


class LogCapturer:
    """Writes one ``<pod>_<container>_logs.txt`` file per declared container."""

    def __init__(self, client: K8sClient, resolver: PathResolver):
        self.client = client
        self.resolver = resolver

    def capture(
        self,
        namespace: str,
        pod_name: str,
        directory: Path,
        result: ExportResult,
        pod: Optional[Dict[str, Any]] = None,
    ) -> List[Path]:
        """Capture logs of every container of a pod; returns the files written.

        ``pod`` is the body obtained from the listing. When it declares no
        containers the pod is fetched again by namespace and name.
        """
        identifier = f"{namespace}/{pod_name}"
        containers = container_names(pod) if pod else []
        if not containers:
            try:
                containers = container_names(self.client.get_pod(namespace, pod_name))
            except KubectlError as e:
                logger.warning(f"Failed to get pod {identifier}: {e}")
                result.record_failure(identifier, "logs", e)
                return []

        written = []
        for container in containers:
            log_path = self.resolver.log_file(directory, pod_name, container)
            try:
                with open(log_path, "wb") as f:
                    self.client.stream_logs(namespace, pod_name, container, f)
            except (KubectlError, OSError) as e:
                logger.warning(f"Failed to capture logs for {identifier} container {container}: {e}")
                result.record_failure(f"{identifier}/{container}", "logs", e)
                log_path.unlink(missing_ok=True)
                continue
            written.append(log_path)

        return written
