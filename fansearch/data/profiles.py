"""Per-domain field weights and scoring thresholds."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from .config import SearchConfig


class FieldKind(StrEnum):
    """How a field is matched against a query term."""

    TEXT = "text"        # exact / partial / fuzzy
    KEYWORD = "keyword"  # cross-field keyword containment


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.TEXT
    weight: float = 1.0
    fuzzy: bool = False


@dataclass(frozen=True)
class DomainProfile:
    """Which fields a domain searches and how strictly.

    Attributes:
        name: Domain name, also the lexicon file stem
        fields: Searchable fields in priority order
        result_cap: Maximum number of results returned
        min_score: Results (and matched fields) below this are noise
        partial_floor: Lowest score a substring match can get before weighting
        fuzzy_discount: Multiplier applied to edit-distance similarity
        max_fuzzy_distance: Largest edit distance (and length gap) considered fuzzy
        fuzzy_min_similarity: Smallest similarity considered fuzzy
        min_keyword_length: Shortest field value a query may contain to match
        blank_query_returns_catalog: Blank query lists the catalog instead of nothing
        suggestion_rating_threshold: Titles above this rating are suggested
        token_boundary_synonyms: Expand synonyms on token boundaries only
    """

    name: str
    fields: tuple[FieldSpec, ...]
    result_cap: int = 50
    min_score: float = 0.3
    partial_floor: float = 0.7
    fuzzy_discount: float = 0.6
    max_fuzzy_distance: int = 2
    fuzzy_min_similarity: float = 0.6
    min_keyword_length: int = 3
    blank_query_returns_catalog: bool = False
    suggestion_rating_threshold: float = 8.5
    token_boundary_synonyms: bool = True

    def with_overrides(self, config: SearchConfig) -> "DomainProfile":
        """Apply environment overrides (min score, result cap)."""
        changes: dict[str, float | int] = {}
        if config.min_score is not None:
            changes["min_score"] = config.min_score
        if config.result_cap is not None:
            changes["result_cap"] = max(1, config.result_cap)
        return replace(self, **changes) if changes else self


ANIME = DomainProfile(
    name="anime",
    fields=(
        FieldSpec("title", FieldKind.TEXT, 1.0, fuzzy=True),
        FieldSpec("alternate_title", FieldKind.TEXT, 0.95, fuzzy=True),
        FieldSpec("description", FieldKind.TEXT, 0.8),
        FieldSpec("alternate_description", FieldKind.TEXT, 0.8),
        FieldSpec("genres", FieldKind.KEYWORD, 0.7),
        FieldSpec("tags", FieldKind.KEYWORD, 0.7),
        FieldSpec("creator", FieldKind.KEYWORD, 0.5),
        FieldSpec("cast", FieldKind.KEYWORD, 0.5),
    ),
    result_cap=50,
    blank_query_returns_catalog=True,
)

MANGA = DomainProfile(
    name="manga",
    fields=(
        FieldSpec("title", FieldKind.TEXT, 1.0, fuzzy=True),
        FieldSpec("alternate_title", FieldKind.TEXT, 0.95, fuzzy=True),
        FieldSpec("creator", FieldKind.KEYWORD, 0.6),
        FieldSpec("description", FieldKind.TEXT, 0.8),
        FieldSpec("alternate_description", FieldKind.TEXT, 0.8),
        FieldSpec("genres", FieldKind.KEYWORD, 0.7),
        FieldSpec("tags", FieldKind.KEYWORD, 0.7),
    ),
    result_cap=50,
)

QUIZ = DomainProfile(
    name="quiz",
    fields=(
        FieldSpec("title", FieldKind.TEXT, 1.0, fuzzy=True),
        FieldSpec("alternate_title", FieldKind.TEXT, 0.95, fuzzy=True),
        FieldSpec("description", FieldKind.TEXT, 0.8),
        FieldSpec("alternate_description", FieldKind.TEXT, 0.8),
        FieldSpec("tags", FieldKind.KEYWORD, 0.8),
        FieldSpec("difficulty", FieldKind.KEYWORD, 0.4),
    ),
    result_cap=20,
    partial_floor=0.6,
)

PROFILES: dict[str, DomainProfile] = {p.name: p for p in (ANIME, MANGA, QUIZ)}
