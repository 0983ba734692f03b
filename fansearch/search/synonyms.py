"""Synonym and alias expansion of a corrected query."""

from __future__ import annotations

from fansearch.core.text import contains_phrase, normalize, replace_phrase
from fansearch.data.lexicon import SynonymTable


class SynonymExpander:
    """Generates equivalent query strings from a synonym table.

    "snk" becomes ("snk", "attack on titan"); "attack on titan" becomes
    ("attack on titan", "shingeki no kyojin", "aot", "snk"). Expansion is one
    level deep: variants are not expanded again.

    With ``token_boundary=False`` keys and aliases match anywhere inside the
    query (so "op" also fires inside "top"), which mirrors plain substring
    replacement.
    """

    def __init__(self, table: SynonymTable, *, token_boundary: bool = True) -> None:
        self._table = table
        self._token_boundary = token_boundary

    def expand(self, query: str) -> tuple[str, ...]:
        normalized = normalize(query)
        variants: dict[str, None] = {normalized: None}
        if not normalized:
            return (normalized,)

        for key, aliases in self._table.items():
            if self._contains(normalized, key):
                for alias in aliases:
                    variants.setdefault(self._replace(normalized, key, alias), None)
            for alias in aliases:
                if self._contains(normalized, alias):
                    variants.setdefault(self._replace(normalized, alias, key), None)

        return tuple(variants)

    def _contains(self, text: str, term: str) -> bool:
        if self._token_boundary:
            return contains_phrase(text, term)
        return term in text

    def _replace(self, text: str, old: str, new: str) -> str:
        if self._token_boundary:
            return replace_phrase(text, old, new)
        return text.replace(old, new)


def expand_synonyms(query: str, table: SynonymTable, *, token_boundary: bool = True) -> tuple[str, ...]:
    return SynonymExpander(table, token_boundary=token_boundary).expand(query)
