"""Search pipeline: normalize, correct, expand, score, rank."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from fansearch.core.text import normalize
from fansearch.data.catalog import CatalogItem, load_catalog
from fansearch.data.lexicon import Lexicon
from fansearch.data.profiles import DomainProfile

from .filters import CatalogFilter
from .results import FieldMatch, MatchType, SearchResult
from .scoring import FieldMatchScorer
from .synonyms import SynonymExpander
from .typos import TypoCorrector

logger = logging.getLogger(__name__)


class SearchEngine:
    """Fuzzy/semantic search over an in-memory catalog for one domain.

    The engine keeps no per-search state; one instance can serve concurrent
    searches over different catalog snapshots.

    Pipeline:
    1. Normalize the raw query (lowercase, punctuation, whitespace)
    2. Correct known typos ("nuruto" -> "naruto")
    3. Expand synonyms/aliases ("snk" -> "attack on titan")
    4. Score every item against every variant, keep each item's best match
    5. Drop matches under the profile's minimum score
    6. Sort by score, then matches of the query itself before alias matches,
       then rating, then catalog order, and cap
    """

    def __init__(self, profile: DomainProfile, lexicon: Lexicon) -> None:
        self._profile = profile
        self._lexicon = lexicon
        self._corrector = TypoCorrector(lexicon.typos)
        self._expander = SynonymExpander(lexicon.synonyms, token_boundary=profile.token_boundary_synonyms)
        self._scorer = FieldMatchScorer(profile)

    @property
    def profile(self) -> DomainProfile:
        return self._profile

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def correct(self, query: Any) -> str:
        """Return the typo-corrected, normalized query."""
        return self._corrector.correct(query if isinstance(query, str) else "")

    def expand(self, query: Any) -> tuple[str, ...]:
        """Return the query variants searched for *query*."""
        return self._expander.expand(self.correct(query))

    def cap(self, limit: int | None = None) -> int:
        if limit is None or limit <= 0:
            return self._profile.result_cap
        return min(limit, self._profile.result_cap)

    def search(
        self,
        catalog: Iterable[Any] | None,
        query: Any,
        *,
        filters: CatalogFilter | None = None,
        limit: int | None = None,
    ) -> list[SearchResult]:
        """Rank catalog items against a raw query.

        Args:
            catalog: Catalog snapshot; malformed entries are skipped
            query: Raw user input; non-strings are treated as blank
            filters: Optional predicate applied before scoring
            limit: Optional cap, never above the profile's result cap

        Returns:
            Results, most relevant first (may be empty)
        """
        items = load_catalog(catalog)
        if filters is not None:
            items = filters.apply(items)
        cap = self.cap(limit)

        if not normalize(query):
            if not self._profile.blank_query_returns_catalog:
                return []
            return [
                SearchResult(item=item, score=1.0, match_type=MatchType.EXACT, reason="blank query")
                for item in items[:cap]
            ]

        variants = self.expand(query)
        # (via_alias, catalog index, result)
        ranked: list[tuple[bool, int, SearchResult]] = []
        for index, item in enumerate(items):
            best, variant = self._best_match(item, variants)
            if best is not None:
                ranked.append((variant > 0, index, SearchResult.from_match(item, best)))

        ranked.sort(key=lambda entry: (-entry[2].score, entry[0], -entry[2].item.quality_score, entry[1]))
        results = [result for _, _, result in ranked[:cap]]

        logger.debug(
            "[SearchEngine] %s query=%r variants=%s matched=%d returned=%d",
            self._profile.name,
            query,
            variants,
            len(ranked),
            len(results),
        )
        return results

    def _best_match(self, item: CatalogItem, variants: tuple[str, ...]) -> tuple[FieldMatch | None, int]:
        """Best match over all variants and the index of the variant that produced it."""
        best: FieldMatch | None = None
        best_index = -1
        for index, variant in enumerate(variants):
            match = self._scorer.score(item, variant)
            if match is None:
                continue
            if (
                best is None
                or match.score > best.score
                or (match.score == best.score and match.match_type.rank < best.match_type.rank)
            ):
                best = match
                best_index = index
        return best, best_index
