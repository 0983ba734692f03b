"""Typo correction against a domain typo table."""

from __future__ import annotations

from fansearch.core.edit_distance import levenshtein_distance
from fansearch.core.text import normalize, replace_phrase
from fansearch.data.lexicon import TypoTable

# A correction can line tokens up into a misspelled phrase ("hunter hunter"),
# so passes repeat until the text is stable.
_MAX_PASSES = 8


class TypoCorrector:
    """Rewrites known misspellings to their canonical spelling.

    Order of operations, repeated until nothing changes:
    1. Multi-word corrections ("one peice" -> "one piece"), longest first
    2. Per token, exact lookup ("nuruto" -> "naruto")
    3. Per token, first single-word key within edit distance 1
       ("nurato" -> "naruto"), unless the token already is a word some
       correction produces
    """

    def __init__(self, table: TypoTable) -> None:
        self._table = table

    def correct(self, query: str) -> str:
        text = normalize(query)
        if not text or not len(self._table):
            return text

        for _ in range(_MAX_PASSES):
            corrected = self._correct_once(text)
            if corrected == text:
                break
            text = corrected
        return text

    def _correct_once(self, text: str) -> str:
        for phrase in self._table.phrases:
            text = replace_phrase(text, phrase, self._table.get(phrase) or phrase)

        return " ".join(self._correct_token(token) for token in text.split())

    def _correct_token(self, token: str) -> str:
        exact = self._table.get(token)
        if exact is not None:
            return exact

        if token in self._table.canonical_tokens:
            return token

        for typo, correction in self._table.words:
            if abs(len(typo) - len(token)) > 1:
                continue
            if levenshtein_distance(token, typo) <= 1:
                return correction
        return token


def correct_typos(query: str, table: TypoTable) -> str:
    return TypoCorrector(table).correct(query)
