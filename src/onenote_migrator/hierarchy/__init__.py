"""Hierarchy mapping: OneNote notebooks/sections/pages to a Notion page tree."""

from onenote_migrator.hierarchy.mapper import (
    build_node_properties,
    count_nodes,
    create_database_ids,
    map_hierarchy,
    merge_properties,
    validate_hierarchy,
)
from onenote_migrator.models.hierarchy import flatten_hierarchy

__all__ = [
    "build_node_properties",
    "count_nodes",
    "create_database_ids",
    "flatten_hierarchy",
    "map_hierarchy",
    "merge_properties",
    "validate_hierarchy",
]
