"""Offline input: objects read from a multi-document YAML file."""

from pathlib import Path
from typing import Any, List, Union

import yaml

from ..errors import ManifestError
from ..utils.logger import get_logger

logger = get_logger(__name__)

TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _ManifestLoader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as the strings the API server emits."""


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_manifests(path: Union[str, Path]) -> List[Any]:
    """Read every ``---`` separated document of a YAML file.

    Empty documents are dropped. Non-mapping documents are returned as they
    are so that the caller can report them individually.
    """
    try:
        with open(path, encoding="utf-8") as f:
            documents = list(yaml.load_all(f, Loader=_ManifestLoader))
    except OSError as e:
        raise ManifestError(f"failed to open file {path}: {e}")
    except yaml.YAMLError as e:
        raise ManifestError(f"failed to parse YAML in {path}: {e}")

    documents = [doc for doc in documents if doc is not None]
    logger.info(f"Read {len(documents)} documents from {path}")
    return documents


def is_namespaced(obj: Any) -> bool:
    """Objects from a file carry no discovery data; a namespace marks them as namespaced."""
    metadata = obj.get("metadata") if isinstance(obj, dict) else None
    if not isinstance(metadata, dict):
        return False
    return bool(metadata.get("namespace"))
