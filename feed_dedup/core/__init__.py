"""
Core duplicate detection logic.

This package contains the data types and pure functions that decide
whether a content item duplicates one already known. Nothing here does
I/O or logging.
"""

from .types import ContentItem, DedupResult, DuplicateMatch
from .canonical import TRACKING_PARAMS, canonicalize_url
from .similarity import clean_title, normalize_title, title_similarity
from .dedup import dedup_items, find_duplicate, is_duplicate
from .window import parse_iso8601, split_by_window

__all__ = [
    "ContentItem",
    "DedupResult",
    "DuplicateMatch",
    "TRACKING_PARAMS",
    "canonicalize_url",
    "clean_title",
    "normalize_title",
    "title_similarity",
    "dedup_items",
    "find_duplicate",
    "is_duplicate",
    "parse_iso8601",
    "split_by_window",
]
