"""JSON parser for feed exports.

This module turns feed exports into ContentItem objects. Accepted shapes:
- A bare JSON array of item objects
- An object holding the array under "items"
- A Folo export holding the array under "articles"

Each item object needs a title and a url ("link" is accepted for url).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .core.types import ContentItem

logger = logging.getLogger(__name__)

_LIST_KEYS = ("items", "articles")


def load_items(path: Path) -> list[ContentItem]:
    """Read a JSON feed export from disk and parse its items."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return parse_items(data)


def parse_items(data: Any) -> list[ContentItem]:
    """Parse a decoded feed export into a list of ContentItem objects.

    Example input:
        {
            "items": [
                {
                    "id": "241476308963169281",
                    "title": "Article Title",
                    "url": "https://example.com/article",
                    "publishedAt": "2026-02-03T11:44:10.702Z",
                    "feedTitle": "Example News"
                }
            ]
        }

    Args:
        data: The parsed JSON content

    Returns:
        A list of ContentItem objects in input order. Entries with missing
        required fields (title, url) are skipped with a warning.

    Raises:
        ValueError: If the top-level shape holds no item list
    """
    raw_items = _item_list(data)
    items: list[ContentItem] = []

    for raw in raw_items:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping entry of type {type(raw).__name__}: expected an object")
            continue

        title = raw.get("title")
        url = raw.get("url") or raw.get("link")

        if not title or not url:
            item_id = raw.get("id", "unknown")
            logger.warning(f"Skipping item {item_id}: missing required fields (title or url)")
            continue

        item_id = raw.get("id")
        source = raw.get("source") or raw.get("feedTitle")
        published_at = raw.get("published_at") or raw.get("publishedAt")
        items.append(
            ContentItem(
                url=str(url),
                title=str(title),
                id=str(item_id) if item_id is not None else None,
                source=str(source) if source else None,
                published_at=str(published_at) if published_at else None,
            )
        )

    return items


def _item_list(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in _LIST_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
    raise ValueError("Invalid JSON format: expected a list or an object with 'items' or 'articles'")


def item_to_dict(item: ContentItem) -> dict[str, Any]:
    """Serialize an item back to the export shape, omitting empty metadata."""
    payload: dict[str, Any] = {"title": item.title, "url": item.url}
    if item.id is not None:
        payload["id"] = item.id
    if item.source is not None:
        payload["source"] = item.source
    if item.published_at is not None:
        payload["published_at"] = item.published_at
    return payload
