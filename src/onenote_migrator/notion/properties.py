"""Pure functions mapping a DestinationPage to Notion API properties.

Child pages only accept a title, so build_properties returns just that.
Database entries get every mapped property the database schema knows
about, formatted for its declared type; unknown properties are dropped.
Long text is split at Notion's 2000-character rich_text limit.
"""

from datetime import datetime
from typing import Any

from onenote_migrator.models.hierarchy import DestinationPage


def split_rich_text(text: str, limit: int = 2000) -> list[dict]:
    """Split text into multiple rich_text objects respecting Notion's 2000-char limit.

    Every text field MUST go through this to avoid 400 errors on long content.
    """
    if not text:
        return [{"type": "text", "text": {"content": ""}}]
    chunks = []
    for i in range(0, len(text), limit):
        chunks.append({"type": "text", "text": {"content": text[i : i + limit]}})
    return chunks


def format_value(value: Any) -> str:
    """Render a property value as display text."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple, set)):
        return ", ".join(format_value(v) for v in value)
    return str(value)


def build_properties(page: DestinationPage) -> dict:
    """Properties for a page created under another page: the title only."""
    return {"title": {"title": split_rich_text(page.title)}}


def build_database_properties(page: DestinationPage, schema: dict[str, str]) -> dict:
    """Properties for a database entry, restricted to the database's schema.

    ``schema`` maps property names to Notion property types. The page title
    goes to whichever property has type ``title``.
    """
    properties: dict = {}
    for name, prop_type in schema.items():
        if prop_type == "title":
            properties[name] = {"title": split_rich_text(page.title)}

    for name, value in page.properties.items():
        prop_type = schema.get(name)
        if prop_type is None or prop_type == "title":
            continue
        formatted = _format_for_type(prop_type, value)
        if formatted is not None:
            properties[name] = formatted
    return properties


def _format_for_type(prop_type: str, value: Any) -> dict | None:
    if prop_type == "rich_text":
        return {"rich_text": split_rich_text(format_value(value))}
    if prop_type == "select":
        return {"select": {"name": format_value(value)}} if value is not None else None
    if prop_type == "multi_select":
        values = value if isinstance(value, (list, tuple, set)) else [value]
        return {"multi_select": [{"name": format_value(v)} for v in values if v is not None]}
    if prop_type == "date":
        if isinstance(value, datetime):
            return {"date": {"start": value.isoformat()}}
        return {"date": {"start": str(value)}} if value else None
    if prop_type == "number":
        return {"number": value} if isinstance(value, (int, float)) else None
    if prop_type == "checkbox":
        return {"checkbox": bool(value)}
    if prop_type == "url":
        return {"url": str(value) if value else None}
    # Formula, relation, people, etc. cannot be written from source attributes
    return None
