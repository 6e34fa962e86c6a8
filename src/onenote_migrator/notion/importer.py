"""Import service writing a mapped page forest into Notion.

Pages are created parent-first (pre-order) so every child can reference the
Notion id of its already-created parent. Root pages go under the configured
database or parent page; descendants go under their parent's Notion page.
A page that fails to create is recorded and its subtree skipped, while its
siblings continue.
"""

import logging
from collections.abc import Sequence

from notion_client import errors as notion_errors
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from onenote_migrator.models.hierarchy import DestinationPage, flatten_hierarchy
from onenote_migrator.notion.blocks import build_body_blocks
from onenote_migrator.notion.client import get_notion_client
from onenote_migrator.notion.models import ImportedPage, ImportResult
from onenote_migrator.notion.properties import build_database_properties, build_properties
from onenote_migrator.notion.schema import get_database_target

logger = logging.getLogger(__name__)

_BLOCK_BATCH_SIZE = 100


def _is_retryable(error: BaseException) -> bool:
    """Rate limits (429), server errors (5xx), and request timeouts are transient."""
    if isinstance(error, notion_errors.APIResponseError):
        return error.status == 429 or error.status >= 500
    return isinstance(error, notion_errors.RequestTimeoutError)


_notion_retry = retry(
    retry=retry_if_exception(_is_retryable),
    wait=wait_exponential_jitter(initial=1, max=30, jitter=2),
    stop=stop_after_attempt(4),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


@_notion_retry
async def _create_page(client, parent: dict, properties: dict, children: list[dict]) -> dict:
    return await client.pages.create(parent=parent, properties=properties, children=children)


@_notion_retry
async def _append_blocks(client, block_id: str, children: list[dict]) -> None:
    await client.blocks.children.append(block_id=block_id, children=children)


async def import_hierarchy(
    pages: Sequence[DestinationPage],
    *,
    parent_page_id: str | None = None,
    database_id: str | None = None,
    dry_run: bool = False,
    client=None,
) -> ImportResult:
    """Create every page of the forest in Notion.

    With ``dry_run`` no API call is made; the result lists the pages that
    would be created. Otherwise a database or parent page is required.

    Raises:
        ValueError: If neither ``database_id`` nor ``parent_page_id`` is given
            outside a dry run.
    """
    if dry_run:
        planned = [
            ImportedPage(source_id=p.id, title=p.title, parent_source_id=p.parent_id)
            for p in flatten_hierarchy(list(pages))
        ]
        logger.info("Dry run: %d page(s) would be imported", len(planned))
        return ImportResult(succeeded=True, dry_run=True, imported=planned)

    if not database_id and not parent_page_id:
        raise ValueError("An import target is required: set a database id or parent page id")

    client = client or await get_notion_client()
    if database_id:
        target = await get_database_target(database_id, client)
        root_parent = target.parent
        property_types = target.property_types
    else:
        root_parent = {"type": "page_id", "page_id": parent_page_id}
        property_types = {}

    imported: list[ImportedPage] = []
    errors: list[str] = []
    skipped = 0

    # (page, Notion id of its created parent, or None for roots)
    stack: list[tuple[DestinationPage, str | None]] = [(p, None) for p in reversed(pages)]
    while stack:
        page, parent_notion_id = stack.pop()

        if parent_notion_id is None:
            parent = root_parent
            properties = (
                build_database_properties(page, property_types)
                if database_id
                else build_properties(page)
            )
        else:
            parent = {"type": "page_id", "page_id": parent_notion_id}
            properties = build_properties(page)

        try:
            created = await _create_with_blocks(client, parent, properties, page)
        except Exception as exc:
            descendants = len(flatten_hierarchy(page.children))
            logger.error(
                "Failed to create Notion page for %s, skipping %d descendant(s): %s",
                page.id,
                descendants,
                exc,
                exc_info=True,
            )
            errors.append(f"Page {page.id} ({page.title}): {exc}")
            skipped += descendants
            continue

        imported.append(
            ImportedPage(
                source_id=page.id,
                title=page.title,
                parent_source_id=page.parent_id,
                notion_page_id=created["id"],
                url=created.get("url"),
            )
        )
        stack.extend((child, created["id"]) for child in reversed(page.children))

    logger.info(
        "Imported %d page(s) into Notion, %d failed, %d skipped",
        len(imported),
        len(errors),
        skipped,
    )
    return ImportResult(
        succeeded=not errors,
        imported=imported,
        errors=errors,
        skipped_count=skipped,
    )


async def _create_with_blocks(client, parent: dict, properties: dict, page: DestinationPage) -> dict:
    """Create one page, sending the first 100 blocks inline and appending the rest."""
    blocks = build_body_blocks(page)
    first_batch = blocks[:_BLOCK_BATCH_SIZE]
    overflow = blocks[_BLOCK_BATCH_SIZE:]

    created = await _create_page(client, parent, properties, first_batch)

    for i in range(0, len(overflow), _BLOCK_BATCH_SIZE):
        await _append_blocks(client, created["id"], overflow[i : i + _BLOCK_BATCH_SIZE])

    logger.debug("Created Notion page %s for %s", created["id"], page.id)
    return created
