"""Autocomplete suggestions and similar-item recommendations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from fansearch.core.text import normalize
from fansearch.data.catalog import CatalogItem, load_catalog
from fansearch.data.lexicon import Lexicon


def suggest(
    partial: Any,
    catalog: Iterable[Any] | None,
    lexicon: Lexicon,
    *,
    limit: int = 5,
    rating_threshold: float = 8.5,
    min_length: int = 2,
) -> list[str]:
    """Return up to *limit* completions for a partially typed query.

    Candidates, in order: synonym terms containing the input, titles of highly
    rated items containing it, then the domain's popular search terms.
    """
    needle = normalize(partial)
    if len(needle) < min_length or limit <= 0:
        return []

    # normalized form -> first display form seen
    suggestions: dict[str, str] = {}

    for term in lexicon.synonyms.terms():
        if needle in term:
            suggestions.setdefault(term, term)

    for item in load_catalog(catalog):
        if item.quality_score <= rating_threshold:
            continue
        for title in (item.title, item.alternate_title):
            if title and needle in normalize(title):
                suggestions.setdefault(normalize(title), title)

    for term in lexicon.popular_terms:
        if needle in term:
            suggestions.setdefault(term, term)

    return list(suggestions.values())[:limit]


@dataclass(frozen=True)
class RecommendationWeights:
    genre: float = 0.3     # per shared genre
    tag: float = 0.2       # per shared tag
    creator: float = 0.2
    rating: float = 0.2    # scaled by rating closeness on a 0-10 scale
    year: float = 0.1      # scaled by release-year closeness over 20 years


def _shared(left: Iterable[str], right: Iterable[str]) -> int:
    return len({normalize(v) for v in left} & {normalize(v) for v in right} - {""})


def similarity_score(
    base: CatalogItem,
    other: CatalogItem,
    weights: RecommendationWeights = RecommendationWeights(),
) -> float:
    """Content similarity of two items, higher is more alike."""
    score = weights.genre * _shared(base.genres, other.genres)
    score += weights.tag * _shared(base.tags, other.tags)

    if base.creator and normalize(base.creator) == normalize(other.creator):
        score += weights.creator

    score += weights.rating * max(0.0, 1 - abs(base.quality_score - other.quality_score) / 10)

    if base.year is not None and other.year is not None:
        score += weights.year * max(0.0, 1 - abs(base.year - other.year) / 20)

    return score


def recommend(
    item: Any,
    catalog: Iterable[Any] | None,
    *,
    limit: int = 6,
    weights: RecommendationWeights = RecommendationWeights(),
) -> list[CatalogItem]:
    """Items most similar to *item*, excluding the item itself."""
    base = CatalogItem.from_record(item)
    if base is None or limit <= 0:
        return []

    scored = [
        (similarity_score(base, candidate, weights), index, candidate)
        for index, candidate in enumerate(load_catalog(catalog))
        if candidate.id != base.id
    ]
    scored.sort(key=lambda entry: (-entry[0], entry[1]))
    return [candidate for _, _, candidate in scored[:limit]]


def recommend_for_preferences(
    catalog: Iterable[Any] | None,
    preferences: Mapping[str, Any] | None = None,
    *,
    limit: int = 6,
) -> list[CatalogItem]:
    """Items at the preferred difficulty the user has not seen recently.

    ``preferences`` may carry ``difficulty`` (default ``"medium"``) and
    ``recent``, a list of item ids to leave out.
    """
    preferences = preferences or {}
    difficulty = normalize(preferences.get("difficulty") or "medium")
    recent = {str(item_id) for item_id in preferences.get("recent") or ()}

    candidates = [
        (index, item)
        for index, item in enumerate(load_catalog(catalog))
        if normalize(item.attribute("difficulty")) == difficulty and item.id not in recent
    ]
    candidates.sort(key=lambda entry: (-entry[1].quality_score, entry[0]))
    return [item for _, item in candidates[:limit]]
