"""Tests for database import target discovery."""

from unittest.mock import AsyncMock, MagicMock, patch

from onenote_migrator.notion.schema import get_database_target, invalidate_target_cache

PROPERTIES = {
    "Name": {"id": "title", "type": "title"},
    "Type": {"id": "abc", "type": "select"},
    "Created Date": {"id": "def", "type": "date"},
}


def _mock_client(database: dict, data_source: dict | None = None) -> MagicMock:
    client = MagicMock()
    client.databases.retrieve = AsyncMock(return_value=database)
    client.data_sources.retrieve = AsyncMock(return_value=data_source or {})
    return client


async def test_database_with_inline_properties():
    client = _mock_client({"id": "db-1", "properties": PROPERTIES})

    target = await get_database_target("db-1", client)

    assert target.parent == {"type": "database_id", "database_id": "db-1"}
    assert target.property_types == {"Name": "title", "Type": "select", "Created Date": "date"}
    client.data_sources.retrieve.assert_not_awaited()


async def test_database_with_data_source():
    client = _mock_client(
        {"id": "db-1", "data_sources": [{"id": "ds-9", "name": "Main"}]},
        {"id": "ds-9", "properties": PROPERTIES},
    )

    target = await get_database_target("db-1", client)

    assert target.parent == {"type": "data_source_id", "data_source_id": "ds-9"}
    assert target.property_types["Type"] == "select"
    client.data_sources.retrieve.assert_awaited_once_with(data_source_id="ds-9")


async def test_target_is_cached():
    client = _mock_client({"id": "db-1", "properties": PROPERTIES})

    first = await get_database_target("db-1", client)
    second = await get_database_target("db-1", client)

    assert first is second
    client.databases.retrieve.assert_awaited_once()


async def test_invalidate_forces_refetch():
    client = _mock_client({"id": "db-1", "properties": PROPERTIES})

    await get_database_target("db-1", client)
    invalidate_target_cache()
    await get_database_target("db-1", client)

    assert client.databases.retrieve.await_count == 2


@patch("onenote_migrator.notion.schema.get_notion_client", new_callable=AsyncMock)
async def test_shared_client_used_by_default(mock_get_client):
    client = _mock_client({"id": "db-2", "properties": {}})
    mock_get_client.return_value = client

    target = await get_database_target("db-2")

    assert target.property_types == {}
    mock_get_client.assert_awaited_once()
