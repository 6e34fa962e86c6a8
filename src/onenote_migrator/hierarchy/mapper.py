"""Map a OneNote source forest onto a Notion destination page tree.

Every mapped node is built bottom-up: children are mapped first and the
parent is constructed with them, so no partially built page is ever
mutated. Descendants beyond ``max_depth`` levels are dropped silently.

Stats are counted on the source forest, not the mapped output, so they
overcount sections and pages whenever ``max_depth`` truncates the tree.
"""

import logging
import time
from collections.abc import Iterable, Sequence
from typing import Any

from onenote_migrator.models.hierarchy import (
    DestinationPage,
    MappingOptions,
    MappingResult,
    MappingStage,
    MappingStats,
    NodeKind,
    SourceNode,
    flatten_hierarchy,
)

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"


def map_hierarchy(
    notebooks: Sequence[SourceNode], options: MappingOptions | None = None
) -> MappingResult:
    """Map notebooks (with their sections and pages) to destination pages.

    Validation findings block the run, so an import never receives a tree
    with duplicate ids, dangling parents, or cycles. Any exception or
    finding fails the whole run: the result has ``succeeded=False``, the
    messages in ``errors``, no pages, no database ids, and zeroed counts.
    Callers wanting advisory findings on a tree they built themselves can
    call validate_hierarchy directly.
    """
    options = options or MappingOptions()
    report = options.on_progress
    started = time.monotonic()

    try:
        report(MappingStage.MAPPING, 10, "Starting hierarchy mapping...")

        database_ids = create_database_ids(notebooks) if options.create_databases else []
        if database_ids:
            report(MappingStage.MAPPING, 20, "Database structure created")

        pages: list[DestinationPage] = []
        total = len(notebooks)
        for index, notebook in enumerate(notebooks):
            report(
                MappingStage.MAPPING,
                30 + index / total * 60,
                f"Mapping notebook: {notebook.title}",
                index + 1,
                total,
            )
            pages.append(_map_node(notebook, None, options.max_depth))

        report(MappingStage.VALIDATION, 95, "Validating hierarchy...")
        findings = validate_hierarchy(pages)
        if findings:
            for finding in findings:
                logger.warning("Hierarchy validation: %s", finding)
            return _failure(findings, started)

        report(MappingStage.COMPLETE, 100, "Hierarchy mapping completed")
    except Exception as exc:
        logger.error("Hierarchy mapping failed: %s", exc, exc_info=True)
        return _failure([str(exc) or type(exc).__name__], started)

    stats = MappingStats(
        page_count=count_nodes(notebooks, NodeKind.PAGE),
        section_count=count_nodes(notebooks, NodeKind.SECTION),
        notebook_count=len(notebooks),
        elapsed_ms=_elapsed_ms(started),
    )
    logger.info(
        "Mapped %d notebook(s), %d section(s), %d page(s) in %.1fms",
        stats.notebook_count,
        stats.section_count,
        stats.page_count,
        stats.elapsed_ms,
    )
    return MappingResult(
        succeeded=True,
        pages=pages,
        database_ids=database_ids,
        stats=stats,
    )


def create_database_ids(notebooks: Sequence[SourceNode]) -> list[str]:
    """Synthesize one database id per notebook, unique within a run.

    Format: ``db_<notebook id>_<epoch ms>_<index>``.
    """
    stamp = int(time.time() * 1000)
    return [f"db_{notebook.id}_{stamp}_{i}" for i, notebook in enumerate(notebooks)]


def build_node_properties(node: SourceNode) -> dict[str, Any]:
    """Property record for a node: fixed keys, plus attribute overrides for pages."""
    base: dict[str, Any] = {
        "Type": node.kind.value,
        "Created Date": node.created_at,
        "Last Modified": node.modified_at,
    }
    if node.kind != NodeKind.PAGE:
        return base

    base["Author"] = node.attributes.get("author") or UNKNOWN_AUTHOR
    return merge_properties(base, node.attributes.items())


def merge_properties(
    base: dict[str, Any], overrides: Iterable[tuple[str, Any]]
) -> dict[str, Any]:
    """Apply (key, value) overrides in order over a copy of ``base``. Last write wins."""
    merged = dict(base)
    for key, value in overrides:
        merged[key] = value
    return merged


def validate_hierarchy(pages: Sequence[DestinationPage]) -> list[str]:
    """Find duplicate ids, dangling parents, and cycles in a page forest or flat list.

    Returns human-readable findings; an empty list means the tree is valid.
    Cycles cannot come out of map_hierarchy itself, but appear when
    ``parent_id`` is edited or page lists are concatenated out of order.
    """
    all_pages = flatten_hierarchy(list(pages))
    by_id = {page.id: page for page in all_pages}
    errors: list[str] = []

    seen: set[str] = set()
    for page in all_pages:
        if page.id in seen:
            errors.append(f"Duplicate page id {page.id}")
        seen.add(page.id)

    for page in all_pages:
        if page.parent_id and page.parent_id not in by_id:
            errors.append(
                f"Page {page.id} references non-existent parent {page.parent_id}"
            )

    for page in all_pages:
        if _has_circular_reference(page, by_id):
            errors.append(f"Circular reference detected involving page {page.id}")

    return errors


def count_nodes(nodes: Iterable[SourceNode], kind: NodeKind) -> int:
    """Count nodes of ``kind`` at any depth of a source forest."""
    return sum(
        (1 if node.kind == kind else 0) + count_nodes(node.children, kind)
        for node in nodes
    )


def _map_node(node: SourceNode, parent_id: str | None, remaining_depth: int) -> DestinationPage:
    children: list[DestinationPage] = []
    if remaining_depth > 1:
        children = [
            _map_node(child, node.id, remaining_depth - 1) for child in node.children
        ]

    return DestinationPage(
        id=node.id,
        title=node.title,
        body_placeholder=_body_placeholder(node),
        parent_id=parent_id,
        type_tag=node.kind,
        properties=build_node_properties(node),
        children=children,
    )


def _body_placeholder(node: SourceNode) -> str:
    if node.kind == NodeKind.PAGE:
        return node.content or f"Page: {node.title}"
    return f"{node.kind.value}: {node.title}"


def _has_circular_reference(page: DestinationPage, by_id: dict[str, DestinationPage]) -> bool:
    visited: set[str] = set()
    current: DestinationPage | None = page
    while current is not None and current.parent_id:
        if current.id in visited:
            return True
        visited.add(current.id)
        current = by_id.get(current.parent_id)
    return False


def _failure(errors: list[str], started: float) -> MappingResult:
    return MappingResult(
        succeeded=False,
        errors=errors,
        stats=MappingStats(elapsed_ms=_elapsed_ms(started)),
    )


def _elapsed_ms(started: float) -> float:
    return (time.monotonic() - started) * 1000
