"""Search result types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from fansearch.data.catalog import CatalogItem


class MatchType(StrEnum):
    """Why an item matched, strongest first."""

    EXACT = "exact"
    PARTIAL = "partial"
    FUZZY = "fuzzy"
    SEMANTIC = "semantic"

    @property
    def rank(self) -> int:
        """Tier priority; lower wins ties."""
        return _RANKS[self]


_RANKS = {MatchType.EXACT: 0, MatchType.PARTIAL: 1, MatchType.FUZZY: 2, MatchType.SEMANTIC: 3}


@dataclass(frozen=True)
class FieldMatch:
    """Best match of one query variant against one item."""

    score: float
    match_type: MatchType
    field: str
    matched_fields: tuple[str, ...]
    reason: str
    term: str


@dataclass(frozen=True)
class SearchResult:
    item: CatalogItem
    score: float
    match_type: MatchType
    matched_fields: tuple[str, ...] = ()
    reason: str = ""

    @classmethod
    def from_match(cls, item: CatalogItem, match: FieldMatch) -> "SearchResult":
        return cls(
            item=item,
            score=match.score,
            match_type=match.match_type,
            matched_fields=match.matched_fields,
            reason=match.reason,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.item.id,
            "title": self.item.title,
            "score": round(self.score, 3),
            "match_type": self.match_type.value,
            "matched_fields": list(self.matched_fields),
            "reason": self.reason,
        }
