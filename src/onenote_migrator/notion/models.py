"""Result types for Notion import operations."""

from pydantic import BaseModel


class ImportedPage(BaseModel):
    """One page created in Notion, or planned for creation in a dry run."""

    source_id: str
    title: str
    parent_source_id: str | None = None
    notion_page_id: str | None = None  # None in dry runs
    url: str | None = None


class ImportResult(BaseModel):
    """Returned after importing a mapped page forest."""

    succeeded: bool
    dry_run: bool = False
    imported: list[ImportedPage] = []  # Pre-order
    errors: list[str] = []
    skipped_count: int = 0  # Descendants of pages that failed to create
