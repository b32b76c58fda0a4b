"""End-to-end export scenarios against an in-memory cluster."""

import pytest
import yaml

from kubedump.core.dumper import ResourceDumper
from kubedump.model.export import ExportOptions


@pytest.mark.integration
class TestExportScenarios:
    def test_cluster_scoped_kind_without_group(self, fake_client_factory, options, out_dir):
        """Namespace "demo" lands in out/_cluster/Namespace/demo.yaml."""
        client = fake_client_factory(
            resources=[{"groupVersion": "v1", "name": "namespaces", "kind": "Namespace", "namespaced": False}],
            items={"v1/namespaces": [{"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "demo"}}]},
        )

        result = ResourceDumper(client, options).run()

        assert result.files_written == 1
        assert (out_dir / "_cluster" / "Namespace" / "demo.yaml").is_file()

    def test_namespaced_kind_with_group(self, fake_client_factory, options, out_dir, sample_deployment):
        """apps/v1 Deployment "web" in "prod" lands in out/prod/apps_Deployment/web.yaml."""
        client = fake_client_factory(
            resources=[{"groupVersion": "apps/v1", "name": "deployments", "kind": "Deployment", "namespaced": True}],
            items={"apps/v1/deployments": [sample_deployment]},
        )

        result = ResourceDumper(client, options).run()

        assert result.files_written == 1
        assert (out_dir / "prod" / "apps_Deployment" / "web.yaml").is_file()

    def test_name_sanitized_only_in_file_name(self, fake_client_factory, options, out_dir):
        """The file name is sanitized while metadata.name keeps the original."""
        client = fake_client_factory(
            resources=[
                {
                    "groupVersion": "rbac.authorization.k8s.io/v1",
                    "name": "clusterroles",
                    "kind": "ClusterRole",
                    "namespaced": False,
                }
            ],
            items={
                "rbac.authorization.k8s.io/v1/clusterroles": [
                    {
                        "apiVersion": "rbac.authorization.k8s.io/v1",
                        "kind": "ClusterRole",
                        "metadata": {"name": "weird:name!"},
                    }
                ]
            },
        )

        ResourceDumper(client, options).run()

        path = out_dir / "_cluster" / "rbac.authorization.k8s.io_ClusterRole" / "weird_name_.yaml"
        assert yaml.safe_load(path.read_text())["metadata"]["name"] == "weird:name!"

    @pytest.mark.parametrize("workers", [1, 3])
    def test_forbidden_kind_does_not_abort_run(
        self, fake_client_factory, no_exclusions, out_dir, workers
    ):
        """A forbidden listing contributes zero files and one failure naming the kind."""
        client = fake_client_factory(
            resources=[
                {"groupVersion": "apps/v1", "name": "replicasets", "kind": "ReplicaSet", "namespaced": True},
                {"groupVersion": "apps/v1", "name": "deployments", "kind": "Deployment", "namespaced": True},
                {"groupVersion": "v1", "name": "configmaps", "kind": "ConfigMap", "namespaced": True},
            ],
            items={
                "apps/v1/deployments": [
                    {"apiVersion": "apps/v1", "kind": "Deployment", "metadata": {"name": "web", "namespace": "prod"}}
                ],
                "v1/configmaps": [
                    {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "a", "namespace": "prod"}},
                    {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "b", "namespace": "prod"}},
                ],
            },
            list_errors={
                "apps/v1/replicasets": 'replicasets.apps is forbidden: User "viewer" cannot list resource'
            },
        )
        options = ExportOptions(output_dir=out_dir, quiet=True, workers=workers)

        result = ResourceDumper(client, options, exclusions=no_exclusions).run()

        assert result.files_written == 3
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.identifier == "apps/v1/replicasets"
        assert failure.stage == "list"
        assert "forbidden" in failure.error
        assert not (out_dir / "prod" / "apps_ReplicaSet").exists()

    def test_pod_logs_with_failing_container(self, fake_client_factory, pod_factory, options, out_dir):
        """A pod with app and sidecar keeps the app log when the sidecar stream fails."""
        client = fake_client_factory(
            resources=[{"groupVersion": "v1", "name": "pods", "kind": "Pod", "namespaced": True}],
            items={"v1/pods": [pod_factory("web-1", "prod", ["app", "sidecar"])]},
            logs={"prod/web-1/app": b"started\n"},
        )

        result = ResourceDumper(client, options).run()

        pod_dir = out_dir / "prod" / "Pod"
        assert sorted(p.name for p in pod_dir.iterdir()) == ["web-1.yaml", "web-1_app_logs.txt"]
        assert (pod_dir / "web-1_app_logs.txt").read_bytes() == b"started\n"
        assert result.files_written == 1
        assert [(f.identifier, f.stage) for f in result.failures] == [("prod/web-1/sidecar", "logs")]

    def test_pod_logs_for_every_container(self, fake_client_factory, pod_factory, options, out_dir):
        client = fake_client_factory(
            resources=[{"groupVersion": "v1", "name": "pods", "kind": "Pod", "namespaced": True}],
            items={"v1/pods": [pod_factory("web-1", "prod", ["app", "sidecar"])]},
            logs={"prod/web-1/app": b"a\n", "prod/web-1/sidecar": b"s\n"},
        )

        result = ResourceDumper(client, options).run()

        pod_dir = out_dir / "prod" / "Pod"
        assert (pod_dir / "web-1_app_logs.txt").exists()
        assert (pod_dir / "web-1_sidecar_logs.txt").exists()
        assert result.ok

    def test_repeat_runs_are_identical(self, fake_client_factory, sample_discovery_entries, pod_factory, tmp_path):
        """Two runs against an unchanged cluster produce the same tree."""
        items = {
            "v1/pods": [pod_factory("web-1", "prod", ["app"])],
            "v1/namespaces": [{"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "prod"}}],
        }
        logs = {"prod/web-1/app": b"line\n"}

        trees = []
        for run in ("first", "second"):
            out_dir = tmp_path / run
            client = fake_client_factory(resources=sample_discovery_entries, items=items, logs=logs)
            ResourceDumper(client, ExportOptions(output_dir=out_dir, quiet=True, workers=4)).run()
            trees.append(
                {
                    str(p.relative_to(out_dir)): p.read_bytes()
                    for p in sorted(out_dir.rglob("*"))
                    if p.is_file()
                }
            )

        assert trees[0] == trees[1]
        assert "prod/Pod/web-1.yaml" in trees[0]
