"""Fetch outcome and batch result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from onenote_migrator.config import Settings
from onenote_migrator.models.links import LinkValidationDetail, ResolvedLink


class FetchOrigin(str, Enum):
    """Where fetched content came from."""

    CLOUD_SHARE = "onedrive"
    LOCAL_PATH = "local"
    UNRESOLVED = "unknown"


class FetchOutcome(BaseModel):
    """Result of retrieving one reference. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    display_name: str | None = None
    content: bytes | None = None  # In-memory payload (cloud downloads)
    file_path: str | None = None  # Local file reference
    byte_length: int | None = None
    origin: FetchOrigin = FetchOrigin.UNRESOLVED
    failure_reason: str | None = None

    @model_validator(mode="after")
    def _reason_iff_failed(self) -> "FetchOutcome":
        if not self.succeeded and not self.failure_reason:
            raise ValueError("failure_reason is required when succeeded is False")
        if self.succeeded and self.failure_reason is not None:
            raise ValueError("failure_reason must be absent when succeeded is True")
        return self

    @classmethod
    def failure(
        cls, reason: str, origin: FetchOrigin = FetchOrigin.UNRESOLVED
    ) -> "FetchOutcome":
        """Build a failed outcome carrying the given reason."""
        return cls(succeeded=False, failure_reason=reason, origin=origin)


class BatchResult(BaseModel):
    """Aggregate over a list of references processed together."""

    model_config = ConfigDict(frozen=True)

    overall_succeeded: bool
    total_count: int
    succeeded_count: int
    failed_count: int
    outcomes: list[FetchOutcome] = []  # Input order
    failure_messages: list[str] = []  # Completion order of the failures

    @model_validator(mode="after")
    def _counts_consistent(self) -> "BatchResult":
        if self.succeeded_count + self.failed_count != self.total_count:
            raise ValueError("succeeded_count + failed_count must equal total_count")
        if len(self.outcomes) != self.total_count:
            raise ValueError("outcomes must contain one entry per processed reference")
        if len(self.failure_messages) != self.failed_count:
            raise ValueError("failure_messages must contain one entry per failed item")
        if self.overall_succeeded != (self.failed_count == 0):
            raise ValueError("overall_succeeded must be True iff no item failed")
        return self

    @classmethod
    def empty(cls) -> "BatchResult":
        return cls(
            overall_succeeded=True,
            total_count=0,
            succeeded_count=0,
            failed_count=0,
        )


class BatchOptions(BaseModel):
    """Scheduling knobs for a batch run."""

    concurrency: int = Field(default=5, ge=1)
    timeout_seconds: float = Field(default=30.0, gt=0)  # Per item
    retry_attempts: int = Field(default=2, ge=0)  # Used by process_single_link

    @classmethod
    def from_settings(cls, settings: Settings) -> "BatchOptions":
        return cls(
            concurrency=settings.batch_concurrency,
            timeout_seconds=settings.fetch_timeout_seconds,
            retry_attempts=settings.fetch_retry_attempts,
        )


class BatchValidation(BaseModel):
    """Pre-flight classification and validation of a batch of references.

    The link lists partition references by resolution alone. ``details``,
    ``success_rate`` and ``recommendations`` come from the deeper per-link
    checks, which also look at local files.
    """

    valid_links: list[ResolvedLink] = []
    invalid_links: list[ResolvedLink] = []
    deferred_links: list[ResolvedLink] = []  # Valid, but need a download step
    details: list[LinkValidationDetail] = []  # Input order
    success_rate: int = 0  # Rounded percentage of details that passed
    warnings: list[str] = []
    recommendations: list[str] = []


class BatchStatistics(BaseModel):
    """Summary counts over a list of fetch outcomes."""

    total: int
    successful: int
    failed: int
    success_rate: int  # Rounded percentage, 0 for an empty list
    by_origin: dict[str, int] = {}
