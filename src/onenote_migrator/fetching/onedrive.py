"""OneDrive section download via the Microsoft Graph API using httpx."""

import logging

import httpx

from onenote_migrator.models.fetch import FetchOrigin, FetchOutcome
from onenote_migrator.models.links import LinkKind, ResolvedLink

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"


async def download_onenote_file(
    link: ResolvedLink,
    access_token: str,
    base_url: str = DEFAULT_GRAPH_BASE_URL,
    timeout_seconds: float = 30.0,
) -> FetchOutcome:
    """Download the .one file behind a OneDrive share link into memory.

    Uses the link's resid as the drive item id. Graph answers the content
    request with a redirect to a pre-authenticated URL, so redirects are
    followed.

    Returns FetchOutcome with:
    - succeeded: bytes in ``content``, ``display_name`` set to ``<name>.one``
    - failed: missing token, non-OneDrive link, non-2xx status, or network error
    """
    if link.kind != LinkKind.CLOUD_SHARE or not link.resource_id:
        return FetchOutcome.failure("Link is not a OneDrive URL", FetchOrigin.CLOUD_SHARE)
    if not access_token:
        return FetchOutcome.failure(
            "Microsoft Graph access token is not configured", FetchOrigin.CLOUD_SHARE
        )

    url = f"{base_url.rstrip('/')}/me/drive/items/{link.resource_id}/content"
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Accept": "application/octet-stream",
    }

    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds), follow_redirects=True
        ) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("OneDrive download failed for %s: %s", link.original_reference, exc)
        return FetchOutcome.failure(f"Network error: {exc}", FetchOrigin.CLOUD_SHARE)

    if not response.is_success:
        return FetchOutcome.failure(
            f"Failed to download file: {response.status_code} {response.reason_phrase}",
            FetchOrigin.CLOUD_SHARE,
        )

    content = response.content
    logger.info("Downloaded %s (%d bytes)", link.display_name, len(content))
    return FetchOutcome(
        succeeded=True,
        display_name=f"{link.display_name}.one",
        content=content,
        byte_length=len(content),
        origin=FetchOrigin.CLOUD_SHARE,
    )
