"""Tests for reference classification and normalization."""

import pytest

from onenote_migrator.links.resolver import can_process, get_display_name, resolve_link
from onenote_migrator.models.links import LinkKind, ResolvedLink

ONEDRIVE_URL = (
    "https://onedrive.live.com/view.aspx?resid=4E9CB9390373063C%211126&id=documents"
    "&wd=target%28Zequin%20Isles%20Campaign%20%28Lycanthropes%5C%29.one%7C"
    "E306FB3E-F4BF-3749-BB49-B1121D326A3A%2F%29"
)

PROTOCOL_URL = (
    "onenote:https://d.docs.live.net/4e9cb9390373063c/Documents/Campaign/"
    "Session%20Notes.one#section-id={E306FB3E-F4BF-3749-BB49-B1121D326A3A}&end"
)


# -- OneDrive share URLs --


def test_onedrive_url_resolves_name_and_section():
    """The canonical OneDrive share link yields display name and section id."""
    link = resolve_link(ONEDRIVE_URL)
    assert link.kind == LinkKind.CLOUD_SHARE
    assert link.valid is True
    assert link.validation_error is None
    assert link.display_name == "Zequin Isles Campaign (Lycanthropes)"
    assert link.section_id == "E306FB3E-F4BF-3749-BB49-B1121D326A3A"
    assert link.original_reference == ONEDRIVE_URL


def test_onedrive_url_keeps_decoded_resid():
    link = resolve_link(ONEDRIVE_URL)
    assert link.resource_id == "4E9CB9390373063C!1126"


def test_onedrive_url_missing_resid():
    link = resolve_link("https://onedrive.live.com/view.aspx?wd=target%28a.one%7Cabc%2F%29")
    assert link.valid is False
    assert link.kind == LinkKind.CLOUD_SHARE
    assert link.validation_error == "Missing resid parameter in OneDrive URL"


def test_onedrive_url_without_target():
    """No wd parameter means no filename can be extracted."""
    link = resolve_link("https://onedrive.live.com/view.aspx?resid=ABC%21123")
    assert link.valid is False
    assert link.validation_error == "Could not extract filename from OneDrive URL"


def test_onedrive_url_target_without_pipe():
    link = resolve_link("https://onedrive.live.com/view.aspx?resid=ABC%21123&wd=target%28a.one%29")
    assert link.valid is False
    assert link.validation_error == "Could not extract filename from OneDrive URL"


def test_onedrive_url_without_scheme_is_rejected():
    """A share link missing its https:// prefix cannot be parsed as a URL."""
    link = resolve_link("onedrive.live.com/view.aspx?resid=X&wd=target(a.one%7Cb%2F)")
    assert link.valid is False
    assert link.kind == LinkKind.CLOUD_SHARE
    assert link.validation_error == "Failed to parse OneDrive URL: Invalid URL"


def test_onedrive_url_empty_section_id():
    link = resolve_link(
        "https://onedrive.live.com/view.aspx?resid=ABC%21123&wd=target%28Notes.one%7C%29"
    )
    assert link.valid is True
    assert link.display_name == "Notes"
    assert link.section_id == ""


# -- Local paths --


def test_unix_path_strips_onepkg_extension():
    link = resolve_link("/path/to/notebook.onepkg")
    assert link.kind == LinkKind.LOCAL_PATH
    assert link.display_name == "notebook"
    assert link.source_path == "/path/to/notebook.onepkg"
    assert link.valid is True


@pytest.mark.parametrize(
    "reference, expected_name",
    [
        ("C:\\Users\\me\\Notes\\Work.one", "Work"),
        ("./exports/Journal.one", "Journal"),
        ("../backup/Archive.onepkg", "Archive"),
        ("Notes\\Meetings.one", "Meetings"),
        ("Recipes.one", "Recipes"),
        ("/var/data/notebook-folder", "notebook-folder"),
    ],
)
def test_local_path_variants(reference, expected_name):
    link = resolve_link(reference)
    assert link.kind == LinkKind.LOCAL_PATH
    assert link.valid is True
    assert link.display_name == expected_name


def test_input_is_trimmed():
    link = resolve_link("   /notes/Work.one  \n")
    assert link.original_reference == "/notes/Work.one"
    assert link.display_name == "Work"


# -- onenote: protocol links --


def test_protocol_link_extracts_name_and_section():
    link = resolve_link(PROTOCOL_URL)
    assert link.kind == LinkKind.PROTOCOL_LINK
    assert link.valid is True
    assert link.display_name == "Session Notes"
    assert link.section_id == "E306FB3E-F4BF-3749-BB49-B1121D326A3A"
    assert link.source_path == PROTOCOL_URL.removeprefix("onenote:")


def test_protocol_link_without_section_fragment():
    link = resolve_link("onenote:https://d.docs.live.net/abc/Notes/Todo.one#page-id={1}")
    assert link.valid is True
    assert link.display_name == "Todo"
    assert link.section_id == ""


def test_protocol_link_missing_filename():
    link = resolve_link("onenote:https://d.docs.live.net/abc/Notes/#section-id={X}")
    assert link.valid is False
    assert link.validation_error == "Invalid onenote: URL - missing or invalid filename"


def test_protocol_link_not_absolute_url():
    link = resolve_link("onenote:not a url#x")
    assert link.valid is False
    assert link.kind == LinkKind.PROTOCOL_LINK
    assert link.validation_error.startswith("Failed to parse onenote: URL:")


def test_protocol_link_ending_in_extension_is_local_path():
    """Local-path detection runs first, so a bare trailing .one wins."""
    link = resolve_link("onenote:https://d.docs.live.net/abc/Notes/Todo.one")
    assert link.kind == LinkKind.LOCAL_PATH


# -- Invalid input --


def test_unrecognized_reference():
    link = resolve_link("not-a-valid-url")
    assert link.valid is False
    assert link.validation_error == "Invalid OneNote link format"
    assert link.kind == LinkKind.LOCAL_PATH


def test_empty_reference():
    link = resolve_link("")
    assert link.valid is False
    assert link.validation_error == "Invalid OneNote link format"


# -- Helpers --


def test_display_name_prefers_extracted_name():
    assert get_display_name(resolve_link("/notes/Work.one")) == "Work"


@pytest.mark.parametrize(
    "kind, label",
    [
        (LinkKind.CLOUD_SHARE, "OneDrive OneNote File"),
        (LinkKind.PROTOCOL_LINK, "OneNote Protocol File"),
        (LinkKind.LOCAL_PATH, "Local OneNote File"),
    ],
)
def test_display_name_falls_back_to_kind_label(kind, label):
    link = ResolvedLink(kind=kind, original_reference="x", valid=False, validation_error="bad")
    assert get_display_name(link) == label


def test_can_process_only_valid_local_paths():
    assert can_process(resolve_link("/notes/Work.one")) is True
    assert can_process(resolve_link(ONEDRIVE_URL)) is False
    assert can_process(resolve_link(PROTOCOL_URL)) is False
    assert can_process(resolve_link("not-a-valid-url")) is False
