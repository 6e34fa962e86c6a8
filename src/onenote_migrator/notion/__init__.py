"""Notion output: page properties, body blocks, and hierarchy import."""

from onenote_migrator.notion.blocks import build_body_blocks
from onenote_migrator.notion.client import get_notion_client, reset_client
from onenote_migrator.notion.importer import import_hierarchy
from onenote_migrator.notion.models import ImportedPage, ImportResult
from onenote_migrator.notion.properties import build_database_properties, build_properties
from onenote_migrator.notion.schema import (
    DatabaseTarget,
    get_database_target,
    invalidate_target_cache,
)

__all__ = [
    "build_body_blocks",
    "build_database_properties",
    "build_properties",
    "DatabaseTarget",
    "get_database_target",
    "get_notion_client",
    "import_hierarchy",
    "ImportedPage",
    "ImportResult",
    "invalidate_target_cache",
    "reset_client",
]
