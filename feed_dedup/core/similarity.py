"""
Title normalization and word-overlap similarity.

Titles are lowercased and stripped of punctuation, then compared as sets
of whitespace-separated tokens using Jaccard similarity.
"""

from __future__ import annotations

import re


_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_BRACKETED_RE = re.compile(r"\[.*?\]")
_PARENTHESIZED_RE = re.compile(r"\(.*?\)")


def normalize_title(title: str) -> str:
    """Lowercase a title and drop everything except word characters and whitespace."""
    return _NON_WORD_RE.sub("", title.lower()).strip()


def title_similarity(title_a: str, title_b: str) -> float:
    """Compute the Jaccard similarity of two titles.

    Both titles are normalized with normalize_title() and split into sets
    of unique tokens. The score is the size of the intersection divided by
    the size of the union.

    Args:
        title_a: First title
        title_b: Second title

    Returns:
        A score in [0, 1]. Exactly 1.0 when the normalized titles are equal
        (two empty titles included), 0.0 when they share no token.
    """
    normalized_a = normalize_title(title_a)
    normalized_b = normalize_title(title_b)
    if normalized_a == normalized_b:
        return 1.0

    tokens_a = set(normalized_a.split())
    tokens_b = set(normalized_b.split())
    union = tokens_a | tokens_b
    if not union:
        return 1.0
    return len(tokens_a & tokens_b) / len(union)


def clean_title(title: str) -> str:
    """Tidy a raw feed title for display and storage.

    Collapses whitespace runs and removes [bracketed] and (parenthesized)
    segments such as "[Video]" or "(Updated)".
    """
    title = _WHITESPACE_RE.sub(" ", title)
    title = _BRACKETED_RE.sub("", title)
    title = _PARENTHESIZED_RE.sub("", title)
    return title.strip()
