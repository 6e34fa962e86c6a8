"""Content retrieval: fetchers, link cache, and the batch scheduler.

Public API:
    process_batch(references, options) -> BatchResult
        Resolve and fetch many references under a concurrency bound,
        preserving input order in the result.
"""

from onenote_migrator.fetching.batch import (
    get_batch_statistics,
    process_batch,
    process_batch_with_progress,
    process_single_link,
    validate_batch,
)
from onenote_migrator.fetching.cache import (
    CacheStatistics,
    LinkCache,
    get_link_cache,
    reset_link_cache,
)
from onenote_migrator.fetching.fetcher import (
    CloudDownloadFetcher,
    ContentFetcher,
    get_content_fetcher,
    reset_fetcher,
)

__all__ = [
    "CacheStatistics",
    "CloudDownloadFetcher",
    "ContentFetcher",
    "LinkCache",
    "get_batch_statistics",
    "get_content_fetcher",
    "get_link_cache",
    "process_batch",
    "process_batch_with_progress",
    "process_single_link",
    "reset_fetcher",
    "reset_link_cache",
    "validate_batch",
]
