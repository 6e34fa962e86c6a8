"""Per-link validation with warnings and corrective suggestions.

Goes beyond classification: local paths are checked on disk (existence,
extension, size), cloud and protocol links are checked for the parts a
download needs, and every invalid link gets kind-specific hints.
"""

import re
from pathlib import Path
from urllib.parse import unquote

from onenote_migrator.links.resolver import SOURCE_EXTENSIONS
from onenote_migrator.models.links import LinkKind, LinkValidation, ResolvedLink

MAX_REFERENCE_LENGTH = 2048
MAX_FILENAME_LENGTH = 255
LARGE_FILE_BYTES = 100 * 1024 * 1024
PROTOCOL_HOST = "d.docs.live.net"

_PROBLEM_CHARACTERS = re.compile(r'[<>:"|?*]')

_CORRECTIONS = {
    LinkKind.CLOUD_SHARE: [
        "Add wd parameter with filename",
        "Ensure URL includes target(filename.one|sectionId/)",
        "Check that resid parameter is present",
    ],
    LinkKind.PROTOCOL_LINK: [
        "Ensure URL follows onenote:https://d.docs.live.net/... format",
        "Include section-id in hash if needed",
    ],
    LinkKind.LOCAL_PATH: [
        "Add .one or .onepkg extension",
        "Check file path is correct",
    ],
}


def suggest_corrections(link: ResolvedLink) -> list[str]:
    """Kind-specific hints for fixing an invalid link. Empty for valid links."""
    if link.valid:
        return []
    return list(_CORRECTIONS.get(link.kind, ["Ensure URL is a valid OneNote link"]))


def validate_link(link: ResolvedLink) -> LinkValidation:
    """Run kind-specific and general checks on a resolved link.

    Errors make the link invalid; warnings and suggestions are advisory.
    Local paths are checked against the filesystem.
    """
    if not link.valid:
        return LinkValidation(
            valid=False,
            errors=[link.validation_error or "Invalid OneNote link format"],
            suggestions=suggest_corrections(link),
        )

    errors: list[str] = []
    warnings: list[str] = []
    suggestions: list[str] = []

    if link.kind == LinkKind.CLOUD_SHARE:
        if not link.display_name:
            errors.append("Missing filename in OneDrive URL")
        decoded = unquote(link.original_reference)
        if "&wd=" in decoded and "target(" not in decoded:
            suggestions.append(
                "OneDrive URL should include target(filename.one|sectionId/) in wd parameter"
            )
    elif link.kind == LinkKind.PROTOCOL_LINK:
        if not link.display_name:
            errors.append("Missing filename in onenote: URL")
        if PROTOCOL_HOST not in link.original_reference:
            warnings.append(f"onenote: URL should point to {PROTOCOL_HOST}")
    else:
        _check_local_file(link, errors, warnings, suggestions)

    if len(link.display_name) > MAX_FILENAME_LENGTH:
        warnings.append("Filename is very long")
    if _PROBLEM_CHARACTERS.search(link.display_name):
        warnings.append("Filename contains potentially problematic characters")
    if len(link.original_reference) > MAX_REFERENCE_LENGTH:
        warnings.append("URL is unusually long")

    return LinkValidation(
        valid=not errors, errors=errors, warnings=warnings, suggestions=suggestions
    )


def _check_local_file(
    link: ResolvedLink, errors: list[str], warnings: list[str], suggestions: list[str]
) -> None:
    if not link.source_path:
        errors.append("Missing file path")
        return

    path = Path(link.source_path).expanduser()
    exists = path.is_file()
    if not exists:
        errors.append("File does not exist")

    extension = path.suffix.lower()
    if extension not in SOURCE_EXTENSIONS:
        errors.append(f"Unsupported file extension: {extension}")
        suggestions.append(f"Use one of: {', '.join(SOURCE_EXTENSIONS)}")

    if exists:
        try:
            size = path.stat().st_size
        except OSError:
            warnings.append("Could not read file stats")
            return
        if size == 0:
            warnings.append("File is empty")
        elif size > LARGE_FILE_BYTES:
            warnings.append("File is very large (>100MB)")


def build_recommendations(total: int, valid: int, warning_count: int) -> list[str]:
    """Batch-level advice derived from validation counts."""
    recommendations: list[str] = []
    invalid = total - valid
    if invalid > 0:
        recommendations.append(f"Fix {invalid} invalid links before processing")
    if warning_count > 0:
        recommendations.append("Review warnings for potential issues")
    if valid == 0:
        recommendations.append("No valid links found - check input format")
    elif valid < total:
        recommendations.append("Some links are invalid - consider fixing or removing them")
    return recommendations
