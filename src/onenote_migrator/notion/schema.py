"""Import target discovery for Notion databases, cached with a TTL.

Looks up the parent object and property schema for a database. Newer API
versions expose properties on the database's first data source rather than
on the database itself; both shapes are handled.
"""

from cachetools import TTLCache
from pydantic import BaseModel

from onenote_migrator.notion.client import get_notion_client

_target_cache: TTLCache = TTLCache(maxsize=32, ttl=300)  # 5-minute TTL


class DatabaseTarget(BaseModel):
    """Where database entries are created and which properties they accept."""

    parent: dict
    property_types: dict[str, str]  # property name -> Notion property type


async def get_database_target(database_id: str, client=None) -> DatabaseTarget:
    """Return the page parent and property schema for a database.

    Fetches from Notion on first call or after TTL expiry, caches the result.
    """
    cached = _target_cache.get(database_id)
    if cached is not None:
        return cached

    client = client or await get_notion_client()
    db = await client.databases.retrieve(database_id=database_id)

    data_sources = db.get("data_sources") or []
    if data_sources:
        data_source_id = data_sources[0]["id"]
        ds = await client.data_sources.retrieve(data_source_id=data_source_id)
        properties = ds.get("properties", {})
        parent = {"type": "data_source_id", "data_source_id": data_source_id}
    else:
        properties = db.get("properties", {})
        parent = {"type": "database_id", "database_id": database_id}

    target = DatabaseTarget(
        parent=parent,
        property_types={name: prop["type"] for name, prop in properties.items()},
    )
    _target_cache[database_id] = target
    return target


def invalidate_target_cache() -> None:
    """Clear the cached targets. Used for testing."""
    _target_cache.clear()
