"""Output path resolution.

Every exported file lives at ``<root>/<scope>/<group_kind or kind>/<name>.<ext>``.
Unnamespaced kinds use the ``_cluster`` scope.

Known limitations: two names that differ only in hazardous characters
sanitize to the same file name and the later one overwrites the earlier one,
and a namespace literally named ``_cluster`` shares the cluster-scope bucket.
"""

import re
from pathlib import Path
from typing import Optional, Union

from ..errors import InvalidObjectError

CLUSTER_SCOPE = "_cluster"
PLACEHOLDER = "_"
DEFAULT_HAZARDOUS_CHARS = "\\/:*?\"'<>|!@#$%^&()+={}[];,"


def _compile(hazardous_chars: str) -> "re.Pattern[str]":
    if not hazardous_chars:
        raise ValueError("hazardous character set must not be empty")
    if PLACEHOLDER in hazardous_chars:
        raise ValueError(f"placeholder {PLACEHOLDER!r} cannot be a hazardous character")
    return re.compile("[" + re.escape(hazardous_chars) + "]")


_DEFAULT_PATTERN = _compile(DEFAULT_HAZARDOUS_CHARS)


def sanitize_name(name: str, pattern: Optional["re.Pattern[str]"] = None) -> str:
    """Replace filesystem or shell hazardous characters with ``_``."""
    return (pattern or _DEFAULT_PATTERN).sub(PLACEHOLDER, name)


class PathResolver:
    """Maps (scope, group, kind, name) to a location under the output root.

    Every path part is sanitized, and parts that would leave their parent
    directory (empty, ``.`` or ``..``) are rejected with ``InvalidObjectError``.
    """

    def __init__(self, output_root: Union[str, Path], hazardous_chars: str = DEFAULT_HAZARDOUS_CHARS):
        self.output_root = Path(output_root)
        self._pattern = _compile(hazardous_chars)

    def sanitize(self, name: str) -> str:
        return sanitize_name(name, self._pattern)

    def _part(self, value: str, what: str) -> str:
        if not isinstance(value, str):
            raise InvalidObjectError(f"{what} must be a string, got {type(value).__name__}")
        part = self.sanitize(value)
        if part in ("", ".", ".."):
            raise InvalidObjectError(f"{what} {value!r} cannot be used as a path component")
        return part

    @staticmethod
    def scope_label(namespace: Optional[str], namespaced: bool) -> str:
        if not namespaced:
            return CLUSTER_SCOPE
        return namespace or ""

    @staticmethod
    def kind_dir_name(group: str, kind: str) -> str:
        return f"{group}_{kind}" if group else kind

    def resolve_directory(self, scope: str, group: str, kind: str) -> Path:
        if not isinstance(group, str):
            raise InvalidObjectError(f"group must be a string, got {type(group).__name__}")
        kind_dir = self._part(self.kind_dir_name(group, self._part(kind, "kind")), "kind")
        directory = self.output_root / self._part(scope, "namespace") / kind_dir
        if self.output_root not in directory.parents:
            raise InvalidObjectError(f"{directory} is outside {self.output_root}")
        return directory

    def resolve_file(
        self, scope: str, group: str, kind: str, name: str, extension: str = "yaml"
    ) -> Path:
        directory = self.resolve_directory(scope, group, kind)
        return directory / f"{self._part(name, 'name')}.{extension}"

    def log_file(self, directory: Path, pod_name: str, container: str) -> Path:
        return directory / f"{self.sanitize(pod_name)}_{self.sanitize(container)}_logs.txt"
