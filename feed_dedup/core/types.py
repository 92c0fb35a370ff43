"""
Core data types for duplicate content detection.

This module defines the records passed through the detector:
- ContentItem: A news article or social post reduced to url and title
- DuplicateMatch: Why a candidate was classified as a duplicate
- DedupResult: Outcome of a batch deduplication pass
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class ContentItem:
    """A content item as seen by the duplicate detector.

    Only url and title take part in detection. The remaining fields are
    carried through from the feed export so batch output keeps them.

    Attributes:
        url: The raw item URL, compared verbatim for exact duplicates
        title: The item headline, compared by token similarity
        id: Optional identifier from the feed export
        source: Optional feed or site name
        published_at: Optional ISO 8601 published timestamp
    """
    url: str
    title: str
    id: str | None = None
    source: str | None = None
    published_at: str | None = None


@dataclass(frozen=True)
class DuplicateMatch:
    """Explanation of a positive duplicate decision.

    Attributes:
        reason: "url" for an exact URL match, "title" for a similarity match
        existing: The already-known item the candidate matched
        score: Title similarity score; always 1.0 for URL matches
    """
    reason: Literal["url", "title"]
    existing: ContentItem
    score: float


@dataclass
class DedupResult:
    """Items kept and items dropped by a batch deduplication pass.

    Attributes:
        kept: Accepted items in input order
        duplicates: Dropped items paired with the match that rejected them
    """
    kept: list[ContentItem] = field(default_factory=list)
    duplicates: list[tuple[ContentItem, DuplicateMatch]] = field(default_factory=list)
