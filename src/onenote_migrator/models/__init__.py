"""Data models and enums for the OneNote migration pipeline."""

from onenote_migrator.models.fetch import (
    BatchOptions,
    BatchResult,
    BatchStatistics,
    BatchValidation,
    FetchOrigin,
    FetchOutcome,
)
from onenote_migrator.models.hierarchy import (
    DestinationPage,
    MappingOptions,
    MappingResult,
    MappingStage,
    MappingStats,
    NodeKind,
    SourceNode,
)
from onenote_migrator.models.links import (
    LinkKind,
    LinkValidation,
    LinkValidationDetail,
    ResolvedLink,
)

__all__ = [
    "LinkKind",
    "ResolvedLink",
    "LinkValidation",
    "LinkValidationDetail",
    "FetchOrigin",
    "FetchOutcome",
    "BatchOptions",
    "BatchResult",
    "BatchStatistics",
    "BatchValidation",
    "NodeKind",
    "MappingStage",
    "SourceNode",
    "DestinationPage",
    "MappingOptions",
    "MappingResult",
    "MappingStats",
]
