"""End-to-end migration: references -> fetched files -> source forest -> Notion.

Wires the batch scheduler, the (injected) OneNote parser, the hierarchy
mapper, and the Notion importer. Partial success is a normal outcome: each
stage records its itemized failures, logs them, and lets the remaining
items through.
"""

import logging
from collections.abc import Callable, Sequence

from pydantic import BaseModel, Field

from onenote_migrator.config import get_settings
from onenote_migrator.fetching.batch import process_batch
from onenote_migrator.fetching.cache import LinkCache, get_link_cache
from onenote_migrator.fetching.fetcher import ContentFetcher
from onenote_migrator.hierarchy.mapper import map_hierarchy
from onenote_migrator.models.fetch import BatchOptions, BatchResult, FetchOutcome
from onenote_migrator.models.hierarchy import MappingOptions, MappingResult, SourceNode
from onenote_migrator.notion.importer import import_hierarchy
from onenote_migrator.notion.models import ImportResult

logger = logging.getLogger(__name__)

SourceParser = Callable[[FetchOutcome], list[SourceNode]]


class MigrationOptions(BaseModel):
    """Knobs for one migration run."""

    dry_run: bool = False
    create_databases: bool = False
    max_depth: int = Field(default=10, ge=1)
    parent_page_id: str | None = None
    database_id: str | None = None
    batch: BatchOptions = BatchOptions()

    @classmethod
    def from_settings(cls, dry_run: bool = False) -> "MigrationOptions":
        settings = get_settings()
        return cls(
            dry_run=dry_run,
            create_databases=settings.create_databases,
            max_depth=settings.max_depth,
            parent_page_id=settings.notion_parent_page_id or None,
            database_id=settings.notion_database_id or None,
            batch=BatchOptions.from_settings(settings),
        )


class MigrationReport(BaseModel):
    """What happened at each stage of a migration run."""

    batch: BatchResult
    parse_errors: list[str] = []
    mapping: MappingResult | None = None
    import_result: ImportResult | None = None

    @property
    def succeeded(self) -> bool:
        return (
            self.batch.overall_succeeded
            and not self.parse_errors
            and self.mapping is not None
            and self.mapping.succeeded
            and self.import_result is not None
            and self.import_result.succeeded
        )


async def migrate(
    references: Sequence[str],
    parse_source: SourceParser,
    *,
    options: MigrationOptions | None = None,
    fetcher: ContentFetcher | None = None,
    cache: LinkCache | None = None,
    client=None,
) -> MigrationReport:
    """Fetch, parse, map, and import the given references.

    ``parse_source`` turns one successful fetch outcome into notebook nodes.
    Fetches go through ``cache`` (the shared link cache by default), so
    references already fetched in this process are not downloaded again.
    Parser errors are recorded per file and do not stop the other files.
    Mapping is skipped when nothing parsed; import is skipped when mapping
    fails.
    """
    options = options or MigrationOptions.from_settings()

    batch = await process_batch(
        references, options.batch, fetcher=fetcher, cache=cache or get_link_cache()
    )
    for message in batch.failure_messages:
        logger.warning("Fetch failure: %s", message)

    notebooks: list[SourceNode] = []
    parse_errors: list[str] = []
    for outcome in batch.outcomes:
        if not outcome.succeeded:
            continue
        try:
            notebooks.extend(parse_source(outcome))
        except Exception as exc:
            name = outcome.display_name or outcome.file_path or "unnamed source"
            logger.error("Failed to parse %s: %s", name, exc, exc_info=True)
            parse_errors.append(f"{name}: {exc}")

    logger.info(
        "Fetched %d/%d reference(s), parsed %d notebook(s)",
        batch.succeeded_count,
        batch.total_count,
        len(notebooks),
    )

    if not notebooks:
        return MigrationReport(batch=batch, parse_errors=parse_errors)

    mapping = map_hierarchy(
        notebooks,
        MappingOptions(
            create_databases=options.create_databases,
            max_depth=options.max_depth,
        ),
    )
    if not mapping.succeeded:
        for error in mapping.errors:
            logger.error("Mapping error: %s", error)
        return MigrationReport(batch=batch, parse_errors=parse_errors, mapping=mapping)

    import_result = await import_hierarchy(
        mapping.pages,
        parent_page_id=options.parent_page_id,
        database_id=options.database_id,
        dry_run=options.dry_run,
        client=client,
    )
    for error in import_result.errors:
        logger.error("Import error: %s", error)

    return MigrationReport(
        batch=batch,
        parse_errors=parse_errors,
        mapping=mapping,
        import_result=import_result,
    )
