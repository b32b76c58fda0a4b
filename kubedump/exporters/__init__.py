"""Resource exporters."""

from ..model.export import ExportFormat
from .base import Exporter
from .json_exporter import JsonExporter
from .yaml_exporter import YamlExporter

# Dictionary mapping export formats to exporter classes
EXPORTERS = {
    ExportFormat.YAML: YamlExporter,
    ExportFormat.JSON: JsonExporter,
}


def get_exporter(export_format: ExportFormat) -> Exporter:
    """Instantiate the exporter for a format, YAML when unknown."""
    return EXPORTERS.get(export_format, YamlExporter)()


__all__ = ["Exporter", "YamlExporter", "JsonExporter", "EXPORTERS", "get_exporter"]
