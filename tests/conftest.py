"""Test configuration and fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from kubedump.core.exclusions import ExclusionPolicy
from kubedump.errors import KubectlError
from kubedump.model.export import ExportOptions
from kubedump.model.kubernetes import ResourceType


class FakeK8sClient:
    """In-memory stand-in for K8sClient."""

    def __init__(
        self,
        resources: Optional[List[Dict[str, Any]]] = None,
        items: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        pods: Optional[Dict[str, Dict[str, Any]]] = None,
        logs: Optional[Dict[str, bytes]] = None,
        list_errors: Optional[Dict[str, str]] = None,
        discovery_error: Optional[str] = None,
    ):
        self.resources = resources or []
        self.items = items or {}
        self.pods = pods or {}
        self.logs = logs or {}
        self.list_errors = list_errors or {}
        self.discovery_error = discovery_error
        self.listed: List[str] = []
        self.fetched_pods: List[str] = []

    def get_preferred_resources(self):
        if self.discovery_error:
            raise KubectlError(self.discovery_error)
        return [dict(r) for r in self.resources]

    def list_resource(self, resource_type: ResourceType):
        self.listed.append(resource_type.identifier)
        if resource_type.identifier in self.list_errors:
            raise KubectlError(self.list_errors[resource_type.identifier])
        return [dict(item) for item in self.items.get(resource_type.identifier, [])]

    def get_pod(self, namespace: str, name: str):
        key = f"{namespace}/{name}"
        self.fetched_pods.append(key)
        if key not in self.pods:
            raise KubectlError(f'pods "{name}" not found')
        return self.pods[key]

    def stream_logs(self, namespace, pod, container, destination):
        key = f"{namespace}/{pod}/{container}"
        if key not in self.logs:
            raise KubectlError(f"container {container} is not valid for pod {pod}")
        destination.write(self.logs[key])


def make_pod(name: str, namespace: str, containers: List[str]) -> Dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {"containers": [{"name": c, "image": f"{c}:latest"} for c in containers]},
    }


@pytest.fixture
def fake_client_factory():
    return FakeK8sClient


@pytest.fixture
def no_exclusions():
    return ExclusionPolicy({})


@pytest.fixture
def out_dir(tmp_path):
    """Output directory that does not exist yet."""
    return tmp_path / "out"


@pytest.fixture
def options(out_dir):
    return ExportOptions(output_dir=out_dir, quiet=True)


@pytest.fixture
def sample_discovery_entries():
    """Raw discovery entries as returned by K8sClient.get_preferred_resources."""
    return [
        {"groupVersion": "v1", "name": "pods", "kind": "Pod", "namespaced": True, "verbs": ["list"]},
        {"groupVersion": "v1", "name": "pods/log", "kind": "Pod", "namespaced": True, "verbs": ["get"]},
        {"groupVersion": "v1", "name": "namespaces", "kind": "Namespace", "namespaced": False},
        {"groupVersion": "v1", "name": "events", "kind": "Event", "namespaced": True},
        {"groupVersion": "apps/v1", "name": "replicasets", "kind": "ReplicaSet", "namespaced": True},
        {"groupVersion": "apps/v1", "name": "deployments", "kind": "Deployment", "namespaced": True},
        {"groupVersion": "apps/v1", "name": "daemonsets", "kind": "DaemonSet", "namespaced": True},
        {
            "groupVersion": "rbac.authorization.k8s.io/v1",
            "name": "clusterroles",
            "kind": "ClusterRole",
            "namespaced": False,
        },
    ]


@pytest.fixture
def sample_deployment():
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": "web",
            "namespace": "prod",
            "labels": {"app": "web"},
            "managedFields": [{"manager": "kubectl", "operation": "Apply"}],
            "resourceVersion": "1234",
        },
        "spec": {"replicas": 2},
        "status": {"readyReplicas": 2},
    }


@pytest.fixture
def pod_factory():
    return make_pod
