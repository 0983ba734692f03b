"""Text primitives shared by the search engine."""

from .edit_distance import levenshtein_distance, similarity
from .text import contains_phrase, normalize, replace_phrase, tokenize

__all__ = [
    "levenshtein_distance",
    "similarity",
    "contains_phrase",
    "normalize",
    "replace_phrase",
    "tokenize",
]
