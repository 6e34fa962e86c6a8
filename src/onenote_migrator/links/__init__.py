"""Link resolution: classify local paths, OneDrive URLs, and onenote: links."""

from onenote_migrator.links.resolver import can_process, get_display_name, resolve_link
from onenote_migrator.links.validation import suggest_corrections, validate_link

__all__ = [
    "can_process",
    "get_display_name",
    "resolve_link",
    "suggest_corrections",
    "validate_link",
]
