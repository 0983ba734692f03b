"""Per-field relevance scoring of one query variant against one item.

Rules, strongest first (each score is multiplied by the field weight):

- exact: normalized field value equals the term -> 1.0
- partial: value contains the term, or the term contains a value of at least
  ``min_keyword_length`` chars -> length ratio, floored at ``partial_floor``
- fuzzy: whole value (or, for one-word terms, a single word of it) within
  ``max_fuzzy_distance`` edits -> similarity * ``fuzzy_discount``
- semantic: keyword fields (genres, tags, creator, cast, ...) containing the
  term or contained in it -> flat field weight
"""

from __future__ import annotations

from fansearch.core.edit_distance import levenshtein_distance
from fansearch.core.text import contains_phrase, normalize
from fansearch.data.catalog import CatalogItem
from fansearch.data.profiles import DomainProfile, FieldKind, FieldSpec

from .results import FieldMatch, MatchType

# (score, match_type, reason)
_Candidate = tuple[float, MatchType, str]


def _beats(candidate: _Candidate, best: _Candidate | None) -> bool:
    if best is None:
        return True
    if candidate[0] != best[0]:
        return candidate[0] > best[0]
    return candidate[1].rank < best[1].rank


class FieldMatchScorer:
    """Scores catalog items against query variants using a domain profile."""

    def __init__(self, profile: DomainProfile) -> None:
        self._profile = profile

    @property
    def profile(self) -> DomainProfile:
        return self._profile

    def score(self, item: CatalogItem, term: str) -> FieldMatch | None:
        """Return the best field match for *term*, or None below ``min_score``."""
        term = normalize(term)
        if not term:
            return None

        best: _Candidate | None = None
        best_field = ""
        matched_fields: list[str] = []

        for spec in self._profile.fields:
            values = [v for v in (normalize(raw) for raw in item.field_values(spec.name)) if v]
            if not values:
                continue

            if spec.kind is FieldKind.TEXT:
                candidate = self._score_text(spec, values, term)
            else:
                candidate = self._score_keyword(spec, values, term)
            if candidate is None:
                continue

            if candidate[0] >= self._profile.min_score:
                matched_fields.append(spec.name)
            if _beats(candidate, best):
                best = candidate
                best_field = spec.name

        if best is None or best[0] < self._profile.min_score:
            return None

        return FieldMatch(
            score=best[0],
            match_type=best[1],
            field=best_field,
            matched_fields=tuple(matched_fields),
            reason=best[2],
            term=term,
        )

    def _contains(self, value: str, term: str) -> bool:
        # Very short terms only match at the start of a word ("na" -> "naruto").
        if len(term) >= self._profile.min_keyword_length:
            return term in value
        return any(token.startswith(term) for token in value.split())

    def _score_text(self, spec: FieldSpec, values: list[str], term: str) -> _Candidate | None:
        profile = self._profile
        best: _Candidate | None = None

        for value in values:
            if value == term:
                return spec.weight, MatchType.EXACT, f"{spec.name} exact match"

            candidate: _Candidate | None = None
            if self._contains(value, term):
                ratio = max(len(term) / len(value), profile.partial_floor)
                candidate = ratio * spec.weight, MatchType.PARTIAL, f"{spec.name} contains '{term}'"
            elif len(value) >= profile.min_keyword_length and contains_phrase(term, value):
                ratio = max(len(value) / len(term), profile.partial_floor)
                candidate = ratio * spec.weight, MatchType.PARTIAL, f"'{term}' contains {spec.name}"
            if candidate and _beats(candidate, best):
                best = candidate

            if spec.fuzzy:
                fuzzy = self._score_fuzzy(spec, value, term)
                if fuzzy and _beats(fuzzy, best):
                    best = fuzzy

        return best

    def _score_fuzzy(self, spec: FieldSpec, value: str, term: str) -> _Candidate | None:
        profile = self._profile
        targets = [value]
        if " " not in term and " " in value:
            targets.extend(value.split())

        best: _Candidate | None = None
        for target in targets:
            if abs(len(target) - len(term)) > profile.max_fuzzy_distance:
                continue
            distance = levenshtein_distance(term, target)
            if distance == 0 or distance > profile.max_fuzzy_distance:
                continue
            sim = 1.0 - distance / max(len(term), len(target))
            if sim < profile.fuzzy_min_similarity:
                continue
            candidate = (
                sim * profile.fuzzy_discount * spec.weight,
                MatchType.FUZZY,
                f"{spec.name} fuzzy match '{target}' ({distance} edit{'s' if distance > 1 else ''})",
            )
            if _beats(candidate, best):
                best = candidate
        return best

    def _score_keyword(self, spec: FieldSpec, values: list[str], term: str) -> _Candidate | None:
        for value in values:
            if self._contains(value, term) or (
                len(value) >= self._profile.min_keyword_length and contains_phrase(term, value)
            ):
                return spec.weight, MatchType.SEMANTIC, f"{spec.name} keyword '{value}'"
        return None
