"""Export-related models."""

import threading
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExportFormat(str, Enum):
    """Supported export formats."""

    YAML = "yaml"
    JSON = "json"


class ExportOptions(BaseModel):
    """Options for a single export run, fixed once the run starts."""

    model_config = ConfigDict(frozen=True)

    output_dir: Path = Path("out")
    quiet: bool = False
    include_secrets: bool = False
    include_managed_fields: bool = False
    remove_output_dir: bool = False
    capture_logs: bool = True
    workers: int = Field(default=1, ge=1)
    export_format: ExportFormat = ExportFormat.YAML


class ItemStatus(str, Enum):
    """Outcome of exporting one instance."""

    WRITTEN = "written"
    SKIPPED = "skipped"


class ItemOutcome(BaseModel):
    """Per-instance result."""

    identifier: str
    status: ItemStatus
    path: Optional[str] = None
    reason: Optional[str] = None


class FailureRecord(BaseModel):
    """A non-fatal failure encountered during the run."""

    identifier: str
    stage: str
    error: str


class ExportResult:
    """Run-wide accumulator, safe to update from several worker threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self.files_written = 0
        self.failures: List[FailureRecord] = []
        self.outcomes: List[ItemOutcome] = []
        self.cancelled = False

    def record_written(self, identifier: str, path: Path) -> None:
        with self._lock:
            self.files_written += 1
            self.outcomes.append(
                ItemOutcome(identifier=identifier, status=ItemStatus.WRITTEN, path=str(path))
            )

    def record_skipped(
        self, identifier: str, stage: str, error, path: Optional[Path] = None
    ) -> None:
        """Record an instance that was not exported, as both an outcome and a failure."""
        with self._lock:
            self.failures.append(
                FailureRecord(
                    identifier=str(path) if path else identifier, stage=stage, error=str(error)
                )
            )
            self.outcomes.append(
                ItemOutcome(
                    identifier=identifier,
                    status=ItemStatus.SKIPPED,
                    path=str(path) if path else None,
                    reason=f"{stage}: {error}",
                )
            )

    def record_failure(self, identifier: str, stage: str, error) -> None:
        with self._lock:
            self.failures.append(FailureRecord(identifier=identifier, stage=stage, error=str(error)))

    def mark_cancelled(self) -> None:
        with self._lock:
            self.cancelled = True

    def failures_for(self, stage: str) -> List[FailureRecord]:
        with self._lock:
            return [f for f in self.failures if f.stage == stage]

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled
