"""YAML exporter."""

from typing import Any, Dict, TextIO

import yaml

from .base import Exporter


class YamlExporter(Exporter):
    """Export resources as YAML files.

    Keys keep the order in which the server returned them.
    """

    extension = "yaml"
    indent = 2

    def dump(self, obj: Dict[str, Any], stream: TextIO) -> None:
        yaml.safe_dump(
            obj,
            stream,
            indent=self.indent,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
