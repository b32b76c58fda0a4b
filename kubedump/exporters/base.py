"""Base exporter class."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, TextIO


class Exporter(ABC):
    """Serializes one resource body per file."""

    extension: str = ""

    def write(self, path: Path, obj: Dict[str, Any]) -> None:
        """Write ``obj`` to ``path``, replacing any existing file."""
        with open(path, "w", encoding="utf-8") as f:
            self.dump(obj, f)

    @abstractmethod
    def dump(self, obj: Dict[str, Any], stream: TextIO) -> None:
        """Serialize ``obj`` into an open text stream."""
        pass
