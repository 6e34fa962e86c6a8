"""TTL cache for resolved links and successful fetch outcomes.

Repeated references within a run (or across runs in one process) skip both
resolution and download. Entries expire after ``ttl_seconds`` and the least
recently used entries are evicted once ``max_size`` is reached.
"""

from cachetools import TTLCache
from pydantic import BaseModel

from onenote_migrator.config import get_settings
from onenote_migrator.models.fetch import FetchOutcome
from onenote_migrator.models.links import ResolvedLink


class CacheStatistics(BaseModel):
    """Snapshot of cache size and hit rate."""

    entries: int
    resolved_links: int
    outcomes: int
    hits: int
    misses: int
    hit_rate: float  # 0.0 when nothing has been looked up yet


class LinkCache:
    """Two TTL caches keyed by the trimmed reference string."""

    def __init__(self, max_size: int = 1000, ttl_seconds: float = 300) -> None:
        self._resolved: TTLCache = TTLCache(maxsize=max_size, ttl=ttl_seconds)
        self._outcomes: TTLCache = TTLCache(maxsize=max_size, ttl=ttl_seconds)
        self._hits = 0
        self._misses = 0

    @classmethod
    def from_settings(cls) -> "LinkCache":
        settings = get_settings()
        return cls(
            max_size=settings.link_cache_max_size,
            ttl_seconds=settings.link_cache_ttl_seconds,
        )

    def get_resolved(self, reference: str) -> ResolvedLink | None:
        return self._lookup(self._resolved, reference)

    def put_resolved(self, reference: str, link: ResolvedLink) -> None:
        self._resolved[reference.strip()] = link

    def get_outcome(self, reference: str) -> FetchOutcome | None:
        return self._lookup(self._outcomes, reference)

    def put_outcome(self, reference: str, outcome: FetchOutcome) -> None:
        """Cache a fetch outcome. Failed outcomes are not cached so they get retried."""
        if outcome.succeeded:
            self._outcomes[reference.strip()] = outcome

    def clear(self) -> None:
        self._resolved.clear()
        self._outcomes.clear()
        self._hits = 0
        self._misses = 0

    def statistics(self) -> CacheStatistics:
        lookups = self._hits + self._misses
        return CacheStatistics(
            entries=len(self._resolved) + len(self._outcomes),
            resolved_links=len(self._resolved),
            outcomes=len(self._outcomes),
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / lookups if lookups else 0.0,
        )

    def _lookup(self, cache: TTLCache, reference: str):
        value = cache.get(reference.strip())
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value


_cache: LinkCache | None = None


def get_link_cache() -> LinkCache:
    """Return the process-wide link cache, configured from settings."""
    global _cache
    if _cache is None:
        _cache = LinkCache.from_settings()
    return _cache


def reset_link_cache() -> None:
    """Reset the shared cache. Used for testing."""
    global _cache
    _cache = None
