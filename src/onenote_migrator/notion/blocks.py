"""Pure function converting a DestinationPage into Notion block objects.

Builds the page body: a bulleted summary of the mapped properties (child
pages cannot carry database properties, so they are shown inline), a
divider, then the body placeholder parsed line by line into headings,
bullets, and paragraphs. The caller handles the 100-block batch limit.
"""

from onenote_migrator.models.hierarchy import DestinationPage
from onenote_migrator.notion.properties import format_value, split_rich_text


def _heading_block(text: str, level: int = 2) -> dict:
    """Create a heading block (heading_2 or heading_3). Truncates to 2000 chars."""
    key = f"heading_{level}"
    return {
        "object": "block",
        "type": key,
        key: {"rich_text": [{"type": "text", "text": {"content": text[:2000]}}]},
    }


def _paragraph_block(text: str) -> dict:
    return {
        "object": "block",
        "type": "paragraph",
        "paragraph": {"rich_text": split_rich_text(text)},
    }


def _bulleted_item_block(text: str) -> dict:
    return {
        "object": "block",
        "type": "bulleted_list_item",
        "bulleted_list_item": {"rich_text": split_rich_text(text)},
    }


def _labeled_bulleted_item_block(label: str, text: str) -> dict:
    """Create a bullet with a bold label followed by plain text.

    Example: **Author:** Jane Doe
    """
    rich_text: list[dict] = [
        {
            "type": "text",
            "text": {"content": f"{label}: "},
            "annotations": {"bold": True},
        }
    ]
    rich_text.extend(split_rich_text(text) if text else [])
    return {
        "object": "block",
        "type": "bulleted_list_item",
        "bulleted_list_item": {"rich_text": rich_text},
    }


def _divider_block() -> dict:
    return {"object": "block", "type": "divider", "divider": {}}


def build_body_blocks(page: DestinationPage) -> list[dict]:
    """Build the page body as a list of Notion block dicts.

    Returns list[dict]. Caller handles the 100-block batch limit.
    """
    blocks: list[dict] = []

    for name, value in page.properties.items():
        blocks.append(_labeled_bulleted_item_block(name, format_value(value)))
    if blocks:
        blocks.append(_divider_block())

    # Converted page content arrives as light markdown
    for line in page.body_placeholder.split("\n"):
        line = line.strip()
        if not line:
            continue
        if line.startswith("### ") or line.startswith("## "):
            blocks.append(_heading_block(line.split(" ", 1)[1], level=3))
        elif line.startswith("# "):
            blocks.append(_heading_block(line[2:], level=2))
        elif line.startswith("- ") or line.startswith("* "):
            blocks.append(_bulleted_item_block(line[2:].strip()))
        else:
            blocks.append(_paragraph_block(line))

    return blocks
