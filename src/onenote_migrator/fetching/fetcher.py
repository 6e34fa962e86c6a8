"""Content fetcher contract and the default local/OneDrive implementation."""

import asyncio
from pathlib import Path
from typing import Protocol

from onenote_migrator.config import get_settings
from onenote_migrator.fetching.onedrive import DEFAULT_GRAPH_BASE_URL, download_onenote_file
from onenote_migrator.models.fetch import FetchOrigin, FetchOutcome
from onenote_migrator.models.links import LinkKind, ResolvedLink


class ContentFetcher(Protocol):
    """Retrieves the bytes or file handle behind a resolved link.

    Implementations may raise; the batch scheduler converts exceptions
    into failed outcomes.
    """

    async def fetch(self, link: ResolvedLink) -> FetchOutcome: ...


class CloudDownloadFetcher:
    """Serves local paths from disk and OneDrive links through Graph."""

    def __init__(
        self,
        access_token: str = "",
        base_url: str = DEFAULT_GRAPH_BASE_URL,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.access_token = access_token
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds

    async def fetch(self, link: ResolvedLink) -> FetchOutcome:
        if not link.valid:
            return FetchOutcome.failure(
                f"Invalid OneNote link: {link.validation_error or 'Unknown error'}"
            )

        if link.kind == LinkKind.LOCAL_PATH:
            return await self._fetch_local(link)

        if link.kind == LinkKind.CLOUD_SHARE:
            return await download_onenote_file(
                link,
                access_token=self.access_token,
                base_url=self.base_url,
                timeout_seconds=self.timeout_seconds,
            )

        # onenote: links name a section on a sync server we cannot read from
        return FetchOutcome.failure("Link is not a OneDrive URL", FetchOrigin.CLOUD_SHARE)

    async def _fetch_local(self, link: ResolvedLink) -> FetchOutcome:
        path = Path(link.source_path or link.original_reference).expanduser()
        is_file = await asyncio.to_thread(path.is_file)
        if not is_file:
            return FetchOutcome.failure(f"File not found: {path}", FetchOrigin.LOCAL_PATH)

        stat = await asyncio.to_thread(path.stat)
        return FetchOutcome(
            succeeded=True,
            display_name=path.name,
            file_path=str(path),
            byte_length=stat.st_size,
            origin=FetchOrigin.LOCAL_PATH,
        )


_fetcher: CloudDownloadFetcher | None = None


def get_content_fetcher() -> CloudDownloadFetcher:
    """Return a cached fetcher configured from settings."""
    global _fetcher
    if _fetcher is None:
        settings = get_settings()
        _fetcher = CloudDownloadFetcher(
            access_token=settings.graph_access_token,
            base_url=settings.graph_base_url,
            timeout_seconds=settings.fetch_timeout_seconds,
        )
    return _fetcher


def reset_fetcher() -> None:
    """Reset the cached fetcher. Used for testing."""
    global _fetcher
    _fetcher = None
