"""Source and destination tree models for hierarchy mapping."""

from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(str, Enum):
    """The three nesting levels of a OneNote hierarchy."""

    NOTEBOOK = "Notebook"
    SECTION = "Section"
    PAGE = "Page"


class MappingStage(str, Enum):
    """Stages reported through the mapping progress callback."""

    MAPPING = "mapping"
    VALIDATION = "validation"
    COMPLETE = "complete"


class SourceNode(BaseModel):
    """A notebook, section, or page as produced by the source parser.

    A parent exclusively owns its children; the forest is a strict tree.
    """

    model_config = ConfigDict(frozen=True)

    id: str  # Unique within the source forest
    title: str
    kind: NodeKind
    created_at: datetime
    modified_at: datetime
    content: str = ""  # Converted page body, empty for notebooks/sections
    children: list["SourceNode"] = []
    attributes: dict[str, Any] = {}  # author, tags, and other open metadata


class DestinationPage(BaseModel):
    """One node of the mapped Notion page tree."""

    id: str  # Copied from the source node
    title: str
    body_placeholder: str
    parent_id: str | None = None  # None for roots
    type_tag: NodeKind
    properties: dict[str, Any] = {}
    children: list["DestinationPage"] = []


class MappingStats(BaseModel):
    """Counts over the source forest plus wall-clock duration."""

    page_count: int = 0
    section_count: int = 0
    notebook_count: int = 0
    elapsed_ms: float = 0.0


class MappingResult(BaseModel):
    """Outcome of one mapping run. Immutable once produced."""

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    pages: list[DestinationPage] = []  # Forest of notebook pages
    database_ids: list[str] = []
    errors: list[str] = []
    stats: MappingStats = MappingStats()

    @property
    def flat_pages(self) -> list[DestinationPage]:
        """Pre-order flattening of ``pages`` for callers needing a flat list."""
        return flatten_hierarchy(self.pages)


def flatten_hierarchy(pages: list[DestinationPage]) -> list[DestinationPage]:
    """Flatten a page forest in pre-order: each page before its children."""
    flattened: list[DestinationPage] = []
    for page in pages:
        flattened.append(page)
        flattened.extend(flatten_hierarchy(page.children))
    return flattened


MappingProgressCallback = Callable[..., None]


def _noop_progress(
    stage: MappingStage,
    percentage: float,
    message: str,
    current_item: int | None = None,
    total_items: int | None = None,
) -> None:
    """Default progress sink that discards every event."""


class MappingOptions(BaseModel):
    """Options for a hierarchy mapping run."""

    create_databases: bool = False
    max_depth: int = Field(default=10, ge=1)  # 1 = notebooks only
    on_progress: MappingProgressCallback = _noop_progress
