"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from onenote_migrator.config import get_settings
from onenote_migrator.fetching.cache import reset_link_cache
from onenote_migrator.fetching.fetcher import reset_fetcher
from onenote_migrator.models.hierarchy import NodeKind, SourceNode
from onenote_migrator.notion.client import reset_client
from onenote_migrator.notion.schema import invalidate_target_cache

CREATED = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
MODIFIED = datetime(2024, 6, 15, 17, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Clear cached settings, clients, and caches around every test."""
    get_settings.cache_clear()
    reset_fetcher()
    reset_link_cache()
    reset_client()
    invalidate_target_cache()
    yield
    get_settings.cache_clear()
    reset_fetcher()
    reset_link_cache()
    reset_client()
    invalidate_target_cache()


def make_page(node_id: str, title: str = "Page", children=(), **attributes) -> SourceNode:
    return SourceNode(
        id=node_id,
        title=title,
        kind=NodeKind.PAGE,
        created_at=CREATED,
        modified_at=MODIFIED,
        children=list(children),
        attributes=attributes,
    )


def make_section(node_id: str, pages=(), title: str = "Section") -> SourceNode:
    return SourceNode(
        id=node_id,
        title=title,
        kind=NodeKind.SECTION,
        created_at=CREATED,
        modified_at=MODIFIED,
        children=list(pages),
    )


def make_notebook(node_id: str, sections=(), title: str = "Notebook") -> SourceNode:
    return SourceNode(
        id=node_id,
        title=title,
        kind=NodeKind.NOTEBOOK,
        created_at=CREATED,
        modified_at=MODIFIED,
        children=list(sections),
        attributes={"owner": "ignored for notebooks"},
    )


@pytest.fixture
def sample_forest() -> list[SourceNode]:
    """Two notebooks: 3 sections, 4 pages, one of them with a sub-page."""
    return [
        make_notebook(
            "nb-1",
            [
                make_section("sec-1", [make_page("pg-1", "Intro"), make_page("pg-2", "Plans")]),
                make_section(
                    "sec-2",
                    [make_page("pg-3", "Parent", children=[make_page("pg-4", "Child")])],
                ),
            ],
            title="Work",
        ),
        make_notebook("nb-2", [make_section("sec-3")], title="Personal"),
    ]
