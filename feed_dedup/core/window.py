"""
Ingestion time window.

Items published before the window start are too old to ingest and are
dropped before duplicate detection. Items without a usable timestamp are
treated as just published.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable

from .types import ContentItem


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO 8601 timestamp string into a timezone-aware datetime."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def split_by_window(
    items: Iterable[ContentItem],
    window_hours: float,
    now: datetime,
) -> tuple[list[ContentItem], list[ContentItem]]:
    """Split items into those inside the ingestion window and those older.

    Args:
        items: Items in arrival order
        window_hours: Window length counted back from `now`
        now: Timezone-aware reference time

    Returns:
        (recent, stale), each preserving input order
    """
    window_start = now - timedelta(hours=window_hours)
    recent: list[ContentItem] = []
    stale: list[ContentItem] = []

    for item in items:
        published = _published_at(item)
        if published is not None and published < window_start:
            stale.append(item)
        else:
            recent.append(item)

    return recent, stale


def _published_at(item: ContentItem) -> datetime | None:
    if not item.published_at:
        return None
    try:
        return parse_iso8601(item.published_at)
    except ValueError:
        return None
