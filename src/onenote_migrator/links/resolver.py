"""Reference classification and normalization.

Turns an arbitrary user-supplied reference into a ResolvedLink. Three kinds
are recognized, checked in this order (first match wins):

1. Local paths: ``/notes/work.onepkg``, ``C:\\Notes\\work.one``, ``./a.one``
2. OneDrive share URLs: ``https://onedrive.live.com/...?resid=...&wd=target(...)``
3. Protocol links: ``onenote:https://d.docs.live.net/.../Section.one#section-id={...}``

Resolution is pure and total: nothing here touches the network or the
filesystem, and every failure is reported through ``valid`` and
``validation_error`` instead of an exception.
"""

import re
from urllib.parse import parse_qs, unquote, urlsplit

from onenote_migrator.models.links import LinkKind, ResolvedLink

CLOUD_HOST = "onedrive.live.com"
PROTOCOL_PREFIX = "onenote:"
SOURCE_EXTENSIONS = (".one", ".onepkg")

_DRIVE_ROOT_PATTERN = re.compile(r"^[A-Za-z]:\\")
_RELATIVE_PREFIXES = ("/", "./", "../")
_EXTENSION_PATTERN = re.compile(r"\.(?:one|onepkg)$")
_SECTION_FILE_PATTERN = re.compile(r"\.one$")
_SECTION_ID_PATTERN = re.compile(r"section-id=\{([^}]+)\}")
_TARGET_MARKER = "target("

_KIND_LABELS = {
    LinkKind.CLOUD_SHARE: "OneDrive OneNote File",
    LinkKind.PROTOCOL_LINK: "OneNote Protocol File",
    LinkKind.LOCAL_PATH: "Local OneNote File",
}


def resolve_link(reference: str) -> ResolvedLink:
    """Classify and validate a reference. Never raises."""
    reference = reference.strip()

    if _is_local_path(reference):
        return _resolve_local_path(reference)
    if CLOUD_HOST in reference:
        return _resolve_cloud_share(reference)
    if reference.startswith(PROTOCOL_PREFIX):
        return _resolve_protocol_link(reference)

    return _invalid(LinkKind.LOCAL_PATH, reference, "Invalid OneNote link format")


def get_display_name(link: ResolvedLink) -> str:
    """Return the link's display name, or a kind-specific label when empty."""
    if link.display_name:
        return link.display_name
    return _KIND_LABELS.get(link.kind, "Unknown OneNote Link")


def can_process(link: ResolvedLink) -> bool:
    """True iff the link is valid and points at a local file.

    Cloud and protocol links are classified but not processable yet: they
    need a download step before the parser can read them.
    """
    return link.valid and link.kind == LinkKind.LOCAL_PATH


def _is_local_path(reference: str) -> bool:
    return (
        reference.startswith(_RELATIVE_PREFIXES)
        or bool(_DRIVE_ROOT_PATTERN.match(reference))
        or "\\" in reference
        or reference.endswith(SOURCE_EXTENSIONS)
    )


def _resolve_local_path(reference: str) -> ResolvedLink:
    last_segment = re.split(r"[/\\]", reference)[-1]
    return ResolvedLink(
        kind=LinkKind.LOCAL_PATH,
        display_name=_EXTENSION_PATTERN.sub("", last_segment),
        source_path=reference,
        original_reference=reference,
        valid=True,
    )


def _resolve_cloud_share(url: str) -> ResolvedLink:
    try:
        parsed = urlsplit(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("Invalid URL")
        params = parse_qs(parsed.query, keep_blank_values=True)

        resid = params.get("resid", [""])[0]
        if not resid:
            return _invalid(
                LinkKind.CLOUD_SHARE, url, "Missing resid parameter in OneDrive URL"
            )

        file_name, section_id = _parse_target(params.get("wd", [""])[0])
        if not file_name:
            return _invalid(
                LinkKind.CLOUD_SHARE, url, "Could not extract filename from OneDrive URL"
            )

        return ResolvedLink(
            kind=LinkKind.CLOUD_SHARE,
            display_name=file_name,
            section_id=section_id,
            resource_id=resid,
            original_reference=url,
            valid=True,
        )
    except Exception as exc:
        return _invalid(LinkKind.CLOUD_SHARE, url, f"Failed to parse OneDrive URL: {exc}")


def _parse_target(wd: str) -> tuple[str, str]:
    """Split a ``target(<file>.one|<section id>/)`` value into its two parts.

    The inner content runs to the *last* closing parenthesis, since file
    names may contain escaped parentheses themselves.
    """
    start = wd.find(_TARGET_MARKER)
    if start == -1:
        return "", ""
    inner = wd[start + len(_TARGET_MARKER) :]
    end = inner.rfind(")")
    if end == -1:
        return "", ""

    parts = inner[:end].split("|")
    if len(parts) < 2:
        return "", ""

    file_name = ""
    if parts[0]:
        file_name = _SECTION_FILE_PATTERN.sub("", unquote(parts[0])).replace("\\", "")
    section_id = parts[1].removesuffix("/")
    return file_name, section_id


def _resolve_protocol_link(reference: str) -> ResolvedLink:
    remainder = reference[len(PROTOCOL_PREFIX) :]
    try:
        parsed = urlsplit(remainder)
        if not parsed.scheme:
            raise ValueError("Invalid URL")

        file_name = parsed.path.split("/")[-1]
        if not file_name.endswith(".one"):
            return _invalid(
                LinkKind.PROTOCOL_LINK,
                reference,
                "Invalid onenote: URL - missing or invalid filename",
            )

        section_id = ""
        match = _SECTION_ID_PATTERN.search(unquote(parsed.fragment))
        if match:
            section_id = match.group(1)

        return ResolvedLink(
            kind=LinkKind.PROTOCOL_LINK,
            display_name=_SECTION_FILE_PATTERN.sub("", unquote(file_name)),
            source_path=remainder,
            section_id=section_id,
            original_reference=reference,
            valid=True,
        )
    except ValueError as exc:
        return _invalid(
            LinkKind.PROTOCOL_LINK, reference, f"Failed to parse onenote: URL: {exc}"
        )


def _invalid(kind: LinkKind, reference: str, error: str) -> ResolvedLink:
    return ResolvedLink(
        kind=kind,
        original_reference=reference,
        valid=False,
        validation_error=error,
    )
