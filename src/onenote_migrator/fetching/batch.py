"""Bounded-concurrency batch fetching of OneNote references.

Each reference is resolved, then fetched through a ContentFetcher with at
most ``concurrency`` fetches in flight. Every input index owns exactly one
result slot, so ``outcomes`` keeps input order no matter which fetch
finishes first. One failing reference never blocks or aborts the others.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential_jitter,
)

from onenote_migrator.config import get_settings
from onenote_migrator.fetching.cache import LinkCache
from onenote_migrator.fetching.fetcher import ContentFetcher, get_content_fetcher
from onenote_migrator.links.resolver import can_process, resolve_link
from onenote_migrator.links.validation import build_recommendations, validate_link
from onenote_migrator.models.fetch import (
    BatchOptions,
    BatchResult,
    BatchStatistics,
    BatchValidation,
    FetchOutcome,
)
from onenote_migrator.models.links import LinkValidationDetail, ResolvedLink

logger = logging.getLogger(__name__)

BatchProgressCallback = Callable[[int, int, FetchOutcome], None]

_TIMEOUT_MESSAGE = "Operation timeout"
_RETRY_WAIT = wait_exponential_jitter(initial=1, max=10, jitter=1)


async def process_batch(
    references: Sequence[str],
    options: BatchOptions | None = None,
    *,
    fetcher: ContentFetcher | None = None,
    cache: LinkCache | None = None,
) -> BatchResult:
    """Fetch every reference and aggregate the outcomes.

    Returns immediately, without touching the fetcher, for an empty list.
    """
    return await _run_batch(references, options, fetcher, cache, on_progress=None)


async def process_batch_with_progress(
    references: Sequence[str],
    on_progress: BatchProgressCallback,
    options: BatchOptions | None = None,
    *,
    fetcher: ContentFetcher | None = None,
    cache: LinkCache | None = None,
) -> BatchResult:
    """Like process_batch, calling ``on_progress(completed, total, outcome)``.

    The callback fires exactly once per item, in completion order, before
    this coroutine returns.
    """
    return await _run_batch(references, options, fetcher, cache, on_progress=on_progress)


async def _run_batch(
    references: Sequence[str],
    options: BatchOptions | None,
    fetcher: ContentFetcher | None,
    cache: LinkCache | None,
    on_progress: BatchProgressCallback | None,
) -> BatchResult:
    if not references:
        return BatchResult.empty()

    options = options or BatchOptions.from_settings(get_settings())
    fetcher = fetcher or get_content_fetcher()

    total = len(references)
    slots: list[FetchOutcome | None] = [None] * total
    failure_messages: list[str] = []
    completed = 0
    semaphore = asyncio.Semaphore(options.concurrency)

    async def run_slot(index: int, reference: str) -> None:
        nonlocal completed
        async with semaphore:
            outcome = await _fetch_reference(
                reference, fetcher, cache, options.timeout_seconds
            )

        slots[index] = outcome
        if not outcome.succeeded:
            failure_messages.append(outcome.failure_reason)
            logger.warning("Fetch failed for %s: %s", reference, outcome.failure_reason)

        completed += 1
        if on_progress is not None:
            _notify(on_progress, completed, total, outcome)

    await asyncio.gather(*(run_slot(i, ref) for i, ref in enumerate(references)))

    outcomes = [outcome for outcome in slots if outcome is not None]
    succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
    failed = total - succeeded

    logger.info("Batch complete: %d/%d succeeded, %d failed", succeeded, total, failed)
    return BatchResult(
        overall_succeeded=failed == 0,
        total_count=total,
        succeeded_count=succeeded,
        failed_count=failed,
        outcomes=outcomes,
        failure_messages=failure_messages,
    )


async def _fetch_reference(
    reference: str,
    fetcher: ContentFetcher,
    cache: LinkCache | None,
    timeout_seconds: float,
) -> FetchOutcome:
    """Resolve and fetch one reference, converting every error into an outcome."""
    link = _resolve_cached(reference, cache)
    if not link.valid:
        return FetchOutcome.failure(link.validation_error)

    if cache is not None:
        cached = cache.get_outcome(reference)
        if cached is not None:
            return cached

    try:
        async with asyncio.timeout(timeout_seconds):
            outcome = await fetcher.fetch(link)
    except TimeoutError:
        outcome = FetchOutcome.failure(_TIMEOUT_MESSAGE)
    except Exception as exc:
        outcome = FetchOutcome.failure(_error_message(exc))

    if cache is not None:
        cache.put_outcome(reference, outcome)
    return outcome


def _resolve_cached(reference: str, cache: LinkCache | None) -> ResolvedLink:
    if cache is None:
        return resolve_link(reference)
    link = cache.get_resolved(reference)
    if link is None:
        link = resolve_link(reference)
        cache.put_resolved(reference, link)
    return link


def _notify(
    on_progress: BatchProgressCallback, completed: int, total: int, outcome: FetchOutcome
) -> None:
    """Invoke the progress sink; a failing sink is logged and never aborts the batch."""
    try:
        on_progress(completed, total, outcome)
    except Exception:
        logger.error("Batch progress callback failed", exc_info=True)


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def validate_batch(references: Sequence[str]) -> BatchValidation:
    """Classify and validate references up front without fetching anything.

    Local paths are checked on disk; nothing is downloaded.
    """
    links = [resolve_link(ref) for ref in references]
    details = [
        LinkValidationDetail(reference=ref, result=validate_link(link))
        for ref, link in zip(references, links)
    ]
    total = len(details)
    passed = sum(1 for detail in details if detail.result.valid)
    warnings = [warning for detail in details for warning in detail.result.warnings]

    return BatchValidation(
        valid_links=[link for link in links if link.valid],
        invalid_links=[link for link in links if not link.valid],
        deferred_links=[link for link in links if link.valid and not can_process(link)],
        details=details,
        success_rate=round(passed / total * 100) if total else 0,
        warnings=warnings,
        recommendations=build_recommendations(total, passed, len(warnings)),
    )


def get_batch_statistics(outcomes: Sequence[FetchOutcome]) -> BatchStatistics:
    """Summarize outcomes: counts, rounded success rate, and a per-origin breakdown."""
    total = len(outcomes)
    successful = sum(1 for outcome in outcomes if outcome.succeeded)

    by_origin: dict[str, int] = {}
    for outcome in outcomes:
        by_origin[outcome.origin.value] = by_origin.get(outcome.origin.value, 0) + 1

    return BatchStatistics(
        total=total,
        successful=successful,
        failed=total - successful,
        success_rate=round(successful / total * 100) if total else 0,
        by_origin=by_origin,
    )


async def process_single_link(
    reference: str,
    retry_attempts: int | None = None,
    *,
    fetcher: ContentFetcher | None = None,
) -> FetchOutcome:
    """Fetch one reference, retrying on exceptions and unsuccessful outcomes.

    Makes up to ``retry_attempts + 1`` attempts. Invalid links fail at once.
    Once attempts are exhausted, returns the last outcome, or a failed
    outcome carrying the last exception's message.
    """
    link = resolve_link(reference)
    if not link.valid:
        return FetchOutcome.failure(link.validation_error)

    fetcher = fetcher or get_content_fetcher()
    if retry_attempts is None:
        retry_attempts = get_settings().fetch_retry_attempts

    retrying = AsyncRetrying(
        stop=stop_after_attempt(retry_attempts + 1),
        wait=_RETRY_WAIT,
        retry=retry_if_exception_type(Exception) | retry_if_result(_is_failed),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        retry_error_callback=_exhausted_outcome,
    )
    return await retrying(fetcher.fetch, link)


def _is_failed(outcome: FetchOutcome) -> bool:
    return not outcome.succeeded


def _exhausted_outcome(retry_state: RetryCallState) -> FetchOutcome:
    last = retry_state.outcome
    if last.failed:
        return FetchOutcome.failure(_error_message(last.exception()))
    return last.result()
