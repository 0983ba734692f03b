"""Text normalization shared by queries, catalog fields and lexicons."""

from __future__ import annotations

import re
from typing import Any

# Word characters, whitespace and the Bengali block survive; everything else
# (punctuation, symbols, underscore) becomes a separator.
_STRIP_RE = re.compile(r"[^\w\s\u0980-\u09FF]|_")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: Any) -> str:
    """Lowercase, strip punctuation and collapse whitespace.

    Non-string input normalizes to an empty string so callers never have to
    guard against ``None`` or numbers coming from loosely shaped records.
    """
    if not isinstance(text, str):
        return ""
    lowered = _STRIP_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", lowered).strip()


def tokenize(text: Any) -> list[str]:
    return normalize(text).split()


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\S){re.escape(phrase)}(?!\S)")


def contains_phrase(haystack: str, needle: str) -> bool:
    """Return True if *needle* occurs in *haystack* on token boundaries.

    Both arguments are expected to be normalized already.
    """
    if not needle or not haystack:
        return False
    return _phrase_pattern(needle).search(haystack) is not None


def replace_phrase(text: str, old: str, new: str) -> str:
    """Replace every token-bounded occurrence of *old* with *new*."""
    if not old:
        return text
    return _phrase_pattern(old).sub(lambda _: new, text)
