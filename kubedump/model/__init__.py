"""Data models for kubedump."""

from .export import (
    ExportFormat,
    ExportOptions,
    ExportResult,
    FailureRecord,
    ItemOutcome,
    ItemStatus,
)
from .kubernetes import ResourceType, StructuredObject

__all__ = [
    "ExportFormat",
    "ExportOptions",
    "ExportResult",
    "FailureRecord",
    "ItemOutcome",
    "ItemStatus",
    "ResourceType",
    "StructuredObject",
]
