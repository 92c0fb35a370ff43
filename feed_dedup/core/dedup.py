"""
Duplicate detection using URL matching and title similarity.

A candidate is a duplicate of an existing item when:
1. Its raw URL equals the existing item's URL exactly
2. Its title is at least `similarity_threshold` similar to the existing title

URLs are compared as given. Canonicalization is a separate step, see
feed_dedup.core.canonical.
"""

from __future__ import annotations

from typing import Iterable

from .similarity import title_similarity
from .types import ContentItem, DedupResult, DuplicateMatch


def find_duplicate(
    candidate_url: str,
    candidate_title: str,
    existing_items: Iterable[ContentItem],
    similarity_threshold: float,
) -> DuplicateMatch | None:
    """Find the first existing item the candidate duplicates.

    All URLs are checked before any title is scored, so a URL match always
    wins over a title match further up the collection.

    Args:
        candidate_url: Raw URL of the new item
        candidate_title: Title of the new item
        existing_items: Previously accepted items; not modified
        similarity_threshold: Minimum title similarity (0-1) counted as a
                              duplicate. Values above 1 disable title matching.

    Returns:
        The first match found, or None if the candidate is new
    """
    existing = list(existing_items)

    for item in existing:
        if item.url == candidate_url:
            return DuplicateMatch(reason="url", existing=item, score=1.0)

    for item in existing:
        score = title_similarity(item.title, candidate_title)
        if score >= similarity_threshold:
            return DuplicateMatch(reason="title", existing=item, score=score)

    return None


def is_duplicate(
    candidate_url: str,
    candidate_title: str,
    existing_items: Iterable[ContentItem],
    similarity_threshold: float,
) -> bool:
    """Return True if the candidate duplicates any existing item."""
    match = find_duplicate(candidate_url, candidate_title, existing_items, similarity_threshold)
    return match is not None


def dedup_items(
    items: Iterable[ContentItem],
    similarity_threshold: float,
    existing: Iterable[ContentItem] = (),
) -> DedupResult:
    """Remove duplicates from a batch of items.

    Each item is checked against the `existing` items plus every item kept
    so far in this batch, so the first occurrence wins.

    Args:
        items: New items in arrival order
        similarity_threshold: Minimum title similarity (0-1) counted as a duplicate
        existing: Items accepted before this batch

    Returns:
        DedupResult with kept items in input order and the rejected items
        paired with the match that rejected them
    """
    known = list(existing)
    result = DedupResult()

    for item in items:
        match = find_duplicate(item.url, item.title, known, similarity_threshold)
        if match is not None:
            result.duplicates.append((item, match))
            continue
        known.append(item)
        result.kept.append(item)

    return result
