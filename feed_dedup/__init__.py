"""
Feed Dedup - duplicate detection for news and social feed items.

This package decides whether a newly ingested content item duplicates one
already known, by exact URL match or title word-overlap similarity, and
canonicalizes URLs by stripping tracking parameters.

Main entry point is the CLI via `feed-dedup run` command.

Example:
    $ feed-dedup run -i feed.json -e accepted.json -o output/
"""

__all__ = [
    "__version__",
    "ContentItem",
    "canonicalize_url",
    "title_similarity",
    "is_duplicate",
    "dedup_items",
]
__version__ = "0.1.0"

from .core.canonical import canonicalize_url
from .core.dedup import dedup_items, is_duplicate
from .core.similarity import title_similarity
from .core.types import ContentItem
