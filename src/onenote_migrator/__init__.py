"""Migrate OneNote notebooks into a Notion page tree."""
