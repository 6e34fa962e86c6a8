"""Tests for the ResolvedLink model."""

import pytest
from pydantic import ValidationError

from onenote_migrator.models.links import LinkKind, ResolvedLink


def test_valid_link_without_error():
    link = ResolvedLink(
        kind=LinkKind.LOCAL_PATH,
        display_name="Work",
        source_path="/notes/Work.one",
        original_reference="/notes/Work.one",
        valid=True,
    )
    assert link.validation_error is None
    assert link.kind.value == "filepath"


def test_invalid_link_requires_error():
    with pytest.raises(ValidationError, match="validation_error is required"):
        ResolvedLink(kind=LinkKind.LOCAL_PATH, original_reference="x", valid=False)


def test_valid_link_rejects_error():
    with pytest.raises(ValidationError, match="must be absent"):
        ResolvedLink(
            kind=LinkKind.CLOUD_SHARE,
            original_reference="x",
            valid=True,
            validation_error="oops",
        )


def test_link_is_immutable():
    link = ResolvedLink(kind=LinkKind.PROTOCOL_LINK, original_reference="x", valid=True)
    with pytest.raises(ValidationError):
        link.display_name = "changed"
