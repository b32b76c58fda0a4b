"""Export of every listed instance to the output tree."""

import shutil
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

import yaml

from ..errors import InvalidObjectError, KubectlError, OutputDirectoryExistsError
from ..exporters import Exporter, get_exporter
from ..k8s.client import K8sClient
from ..k8s.discovery import ResourceDiscovery
from ..model.export import ExportOptions, ExportResult
from ..model.kubernetes import POD_KIND, ResourceType, split_api_version
from ..utils.logger import get_logger
from .exclusions import ExclusionPolicy
from .logs import LogCapturer
from .manifest_source import is_namespaced, load_manifests
from .paths import PathResolver
from .transform import ObjectTransformer

logger = get_logger(__name__)


def prepare_output_dir(options: ExportOptions) -> None:
    """Enforce a fresh output tree, removing the old one when requested."""
    output_dir = Path(options.output_dir)
    if options.remove_output_dir and output_dir.exists():
        logger.info(f"Removing existing output directory {output_dir}")
        try:
            shutil.rmtree(output_dir)
        except OSError as e:
            raise OutputDirectoryExistsError(f"failed to remove out-dir {output_dir}: {e}") from e

    if output_dir.exists():
        raise OutputDirectoryExistsError(f"output directory {str(output_dir)!r} already exists")


class ResourceDumper:
    """Lists every discovered kind and writes one file per instance.

    Kinds are handed to a bounded pool of ``options.workers`` threads in
    catalog order. Each object is transformed, written and, for pods, has its
    container logs captured by the worker that listed it.
    """

    def __init__(
        self,
        client: Optional[K8sClient],
        options: ExportOptions,
        exclusions: Optional[ExclusionPolicy] = None,
        exporter: Optional[Exporter] = None,
        resolver: Optional[PathResolver] = None,
    ):
        self.client = client
        self.options = options
        self.resolver = resolver or PathResolver(options.output_dir)
        self.transformer = ObjectTransformer(
            include_managed_fields=options.include_managed_fields,
            include_secrets=options.include_secrets,
        )
        self.exporter = exporter or get_exporter(options.export_format)
        self.discovery = ResourceDiscovery(client, exclusions) if client else None
        self.log_capturer = (
            LogCapturer(client, self.resolver) if client and options.capture_logs else None
        )
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Stop handing out kinds; work in progress finishes its current object."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def run(self, resource_types: Optional[List[ResourceType]] = None) -> ExportResult:
        """Export the cluster. Raises only for fatal errors."""
        if self.client is None:
            raise ValueError("a Kubernetes client is required to export a live cluster")

        prepare_output_dir(self.options)
        if resource_types is None:
            resource_types = self.discovery.discover()

        result = ExportResult()
        try:
            if self.options.workers <= 1 or len(resource_types) <= 1:
                for resource_type in resource_types:
                    self._dump_if_active(resource_type, result)
            else:
                self._run_pool(resource_types, result)
        except KeyboardInterrupt:
            logger.warning("Interrupted, returning partial results")
            self.cancel()
            result.mark_cancelled()

        logger.info(f"Total files written: {result.files_written}")
        return result

    def _run_pool(self, resource_types: List[ResourceType], result: ExportResult) -> None:
        workers = min(self.options.workers, len(resource_types))
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="kubedump")
        try:
            futures = [
                pool.submit(self._dump_if_active, resource_type, result)
                for resource_type in resource_types
            ]
            for future in futures:
                future.result()
        except KeyboardInterrupt:
            self.cancel()
            raise
        finally:
            pool.shutdown(wait=True, cancel_futures=self.cancelled)

    def _dump_if_active(self, resource_type: ResourceType, result: ExportResult) -> int:
        if self.cancelled:
            result.mark_cancelled()
            return 0
        return self.dump_resource_type(resource_type, result)

    def run_from_manifest(self, path: Union[str, Path]) -> ExportResult:
        """Export objects read from a ``---`` separated YAML file instead of a cluster."""
        prepare_output_dir(self.options)
        documents = load_manifests(path)

        result = ExportResult()
        self.dump_objects(documents, result)
        logger.info(f"Total files written: {result.files_written}")
        return result

    def dump_objects(self, objects: Iterable[Any], result: ExportResult) -> int:
        count = 0
        for index, obj in enumerate(objects):
            if not isinstance(obj, dict):
                logger.warning(f"Document {index} is not a mapping, skipping")
                result.record_skipped(f"document {index}", "parse", "document is not a mapping")
                continue
            if self.dump_object(obj, is_namespaced(obj), result):
                count += 1
        return count

    def dump_resource_type(self, resource_type: ResourceType, result: ExportResult) -> int:
        """Export every instance of one kind; returns the number of files written."""
        logger.debug(f"Listing {resource_type.identifier}")
        try:
            items = self.client.list_resource(resource_type)
        except KubectlError as e:
            logger.warning(f"Failed to process resource {resource_type.identifier}: {e}")
            result.record_failure(resource_type.identifier, "list", e)
            return 0

        count = 0
        for item in items:
            if self.cancelled:
                result.mark_cancelled()
                break
            if self.dump_object(item, resource_type.namespaced, result, resource_type):
                count += 1

        logger.debug(f"Wrote {count} {resource_type.kind} files")
        return count

    def dump_object(
        self,
        obj: Any,
        namespaced: bool,
        result: ExportResult,
        resource_type: Optional[ResourceType] = None,
    ) -> bool:
        """Transform and write a single object. Failures are recorded, never raised."""
        fallback_kind = resource_type.kind if resource_type else ""
        try:
            transformed = self.transformer.transform(obj)
            metadata = transformed["metadata"]
            name = metadata.get("name")
            kind = transformed.get("kind") or fallback_kind
            api_version = transformed.get("apiVersion") or ""
            namespace = metadata.get("namespace")
            if not name or not isinstance(name, str):
                raise InvalidObjectError("metadata.name not found in object")
            if not kind:
                raise InvalidObjectError(f"kind not found in object {name}")
            if not isinstance(kind, str):
                raise InvalidObjectError(f"kind of {name} is not a string")
            if not isinstance(api_version, str):
                raise InvalidObjectError(f"apiVersion of {name} is not a string")
            if namespace is not None and not isinstance(namespace, str):
                raise InvalidObjectError(f"metadata.namespace of {name} is not a string")

            group, _ = split_api_version(api_version)
            if not group and resource_type:
                group = resource_type.group
            scope = self.resolver.scope_label(namespace, namespaced)
            directory = self.resolver.resolve_directory(scope, group, kind)
            file_path = self.resolver.resolve_file(
                scope, group, kind, name, self.exporter.extension
            )
        except InvalidObjectError as e:
            identifier = resource_type.identifier if resource_type else "object"
            logger.warning(f"Failed to process item of {identifier}: {e}")
            result.record_skipped(identifier, "transform", e)
            return False

        identifier = f"{scope}/{self.resolver.kind_dir_name(group, kind)}/{name}"

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Failed to create directory {directory}: {e}")
            result.record_skipped(identifier, "mkdir", e, directory)
            return False

        try:
            self.exporter.write(file_path, transformed)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            logger.warning(f"Failed to write {file_path}: {e}")
            result.record_skipped(identifier, "write", e, file_path)
            return False

        result.record_written(identifier, file_path)
        if not self.options.quiet:
            logger.info(f"Written: {file_path}")

        if kind == POD_KIND and self.log_capturer and namespaced:
            self.log_capturer.capture(scope, name, directory, result, pod=obj)
        return True
