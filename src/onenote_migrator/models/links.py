"""Resolved link model and link kind enum."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class LinkKind(str, Enum):
    """Kinds of references the link resolver classifies input into."""

    CLOUD_SHARE = "onedrive"
    PROTOCOL_LINK = "onenote"
    LOCAL_PATH = "filepath"


class ResolvedLink(BaseModel):
    """A classified, validated reference to OneNote content. Immutable."""

    model_config = ConfigDict(frozen=True)

    kind: LinkKind
    display_name: str = ""
    source_path: str | None = None  # LocalPath and ProtocolLink only
    section_id: str | None = None  # Target section encoded in the URL
    resource_id: str | None = None  # OneDrive resid, needed for download
    original_reference: str
    valid: bool
    validation_error: str | None = None

    @model_validator(mode="after")
    def _error_iff_invalid(self) -> "ResolvedLink":
        if not self.valid and not self.validation_error:
            raise ValueError("validation_error is required when valid is False")
        if self.valid and self.validation_error is not None:
            raise ValueError("validation_error must be absent when valid is True")
        return self


class LinkValidation(BaseModel):
    """Checks run against one resolved link, beyond classification."""

    valid: bool
    errors: list[str] = []
    warnings: list[str] = []
    suggestions: list[str] = []  # Corrective hints for the user


class LinkValidationDetail(BaseModel):
    """Validation result for one reference as given by the user."""

    reference: str
    result: LinkValidation
