"""Tests for fetch outcome, batch result, and batch option models."""

import pytest
from pydantic import ValidationError

from onenote_migrator.config import Settings
from onenote_migrator.models.fetch import BatchOptions, BatchResult, FetchOrigin, FetchOutcome


def _ok() -> FetchOutcome:
    return FetchOutcome(succeeded=True, display_name="a.one", origin=FetchOrigin.LOCAL_PATH)


# -- FetchOutcome --


def test_failure_factory():
    outcome = FetchOutcome.failure("boom", FetchOrigin.CLOUD_SHARE)
    assert outcome.succeeded is False
    assert outcome.failure_reason == "boom"
    assert outcome.origin == FetchOrigin.CLOUD_SHARE


def test_failure_defaults_to_unresolved_origin():
    assert FetchOutcome.failure("boom").origin == FetchOrigin.UNRESOLVED


def test_failed_outcome_requires_reason():
    with pytest.raises(ValidationError):
        FetchOutcome(succeeded=False)


def test_successful_outcome_rejects_reason():
    with pytest.raises(ValidationError):
        FetchOutcome(succeeded=True, failure_reason="nope")


# -- BatchResult --


def test_empty_result():
    result = BatchResult.empty()
    assert result.overall_succeeded is True
    assert result.total_count == 0
    assert result.outcomes == []
    assert result.failure_messages == []


def test_consistent_result():
    result = BatchResult(
        overall_succeeded=False,
        total_count=2,
        succeeded_count=1,
        failed_count=1,
        outcomes=[_ok(), FetchOutcome.failure("x")],
        failure_messages=["x"],
    )
    assert result.failed_count == 1


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"succeeded_count": 2}, "must equal total_count"),
        ({"outcomes": [_ok()]}, "one entry per processed reference"),
        ({"failure_messages": []}, "one entry per failed item"),
        ({"overall_succeeded": True}, "iff no item failed"),
    ],
)
def test_inconsistent_result_is_rejected(overrides, message):
    fields = {
        "overall_succeeded": False,
        "total_count": 2,
        "succeeded_count": 1,
        "failed_count": 1,
        "outcomes": [_ok(), FetchOutcome.failure("x")],
        "failure_messages": ["x"],
    }
    fields.update(overrides)
    with pytest.raises(ValidationError, match=message):
        BatchResult(**fields)


# -- BatchOptions --


def test_batch_option_defaults():
    options = BatchOptions()
    assert options.concurrency == 5
    assert options.timeout_seconds == 30.0
    assert options.retry_attempts == 2


@pytest.mark.parametrize(
    "field, value",
    [("concurrency", 0), ("timeout_seconds", 0), ("retry_attempts", -1)],
)
def test_batch_option_bounds(field, value):
    with pytest.raises(ValidationError):
        BatchOptions(**{field: value})


def test_batch_options_from_settings():
    settings = Settings(batch_concurrency=2, fetch_timeout_seconds=5, fetch_retry_attempts=0)
    options = BatchOptions.from_settings(settings)
    assert options == BatchOptions(concurrency=2, timeout_seconds=5.0, retry_attempts=0)
