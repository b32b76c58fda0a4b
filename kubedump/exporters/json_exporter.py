"""JSON exporter."""

import json
from typing import Any, Dict, TextIO

from .base import Exporter


class JsonExporter(Exporter):
    """Export resources as JSON files."""

    extension = "json"

    def dump(self, obj: Dict[str, Any], stream: TextIO) -> None:
        json.dump(obj, stream, indent=2, ensure_ascii=False)
        stream.write("\n")
