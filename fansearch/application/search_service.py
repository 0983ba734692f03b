"""Application service for catalog search, suggestion and recommendation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fansearch.data import CatalogItem, RemoteSearchClient, RemoteSearchConfig, load_catalog
from fansearch.search import (
    CatalogFilter,
    FallbackPreferenceRecommender,
    FallbackSearchStrategy,
    LocalPreferenceRecommender,
    LocalSearchStrategy,
    PreferenceRecommender,
    RemotePreferenceRecommender,
    RemoteSearchStrategy,
    SearchEngine,
    SearchResult,
    SearchStrategy,
    recommend,
    recommend_for_preferences,
    suggest,
)

logger = logging.getLogger(__name__)


class CatalogSearchService:
    """Single entry point for every catalog domain (anime, manga, quiz)."""

    def __init__(
        self,
        *,
        engines: Mapping[str, SearchEngine],
        remote_config: RemoteSearchConfig | None = None,
        enhanced_strategies: Mapping[str, SearchStrategy] | None = None,
        enhanced_recommenders: Mapping[str, PreferenceRecommender] | None = None,
    ) -> None:
        self._engines = dict(engines)
        self._remote_config = remote_config or RemoteSearchConfig()
        self._local = {domain: LocalSearchStrategy(engine) for domain, engine in self._engines.items()}
        self._enhanced = dict(enhanced_strategies or {})
        self._local_recommender = LocalPreferenceRecommender()
        self._enhanced_recommenders = dict(enhanced_recommenders or {})

    def domains(self) -> list[str]:
        return list(self._engines)

    def engine(self, domain: str) -> SearchEngine:
        engine = self._engines.get(domain)
        if engine is None:
            raise ValueError(f"Unknown catalog domain {domain!r}; expected one of {self.domains()}")
        return engine

    @property
    def remote_active(self) -> bool:
        return self._remote_config.active

    async def search(
        self,
        domain: str,
        catalog: Iterable[Any] | None,
        query: Any,
        *,
        filters: CatalogFilter | Mapping[str, Any] | None = None,
        limit: int | None = None,
        enhanced: bool = False,
    ) -> list[SearchResult]:
        """Search one domain's catalog.

        Remote enhancement is attempted only when requested and configured;
        its failures always end in a local search.
        """
        self.engine(domain)
        if isinstance(filters, Mapping):
            filters = CatalogFilter.from_dict(dict(filters))

        strategy: SearchStrategy = self._local[domain]
        if enhanced:
            if self.remote_active and domain in self._enhanced:
                strategy = self._enhanced[domain]
            else:
                logger.debug("[SearchService] Enhanced search requested but remote is not configured")

        return await strategy.search(catalog, query, filters=filters, limit=limit)

    def correct(self, domain: str, query: Any) -> str:
        return self.engine(domain).correct(query)

    def suggest(self, domain: str, partial: Any, catalog: Iterable[Any] | None, *, limit: int = 5) -> list[str]:
        engine = self.engine(domain)
        return suggest(
            partial,
            catalog,
            engine.lexicon,
            limit=limit,
            rating_threshold=engine.profile.suggestion_rating_threshold,
        )

    def recommend(
        self,
        domain: str,
        item: Any,
        catalog: Iterable[Any] | None,
        *,
        limit: int = 6,
    ) -> list[CatalogItem]:
        self.engine(domain)
        items = load_catalog(catalog)
        if isinstance(item, str):
            base = next((candidate for candidate in items if candidate.id == item), None)
            if base is None:
                return []
            item = base
        return recommend(item, items, limit=limit)

    def recommend_for_preferences(
        self,
        domain: str,
        catalog: Iterable[Any] | None,
        preferences: Mapping[str, Any] | None = None,
        *,
        limit: int = 6,
    ) -> list[CatalogItem]:
        self.engine(domain)
        return recommend_for_preferences(catalog, preferences, limit=limit)

    async def recommend_personalized(
        self,
        domain: str,
        catalog: Iterable[Any] | None,
        preferences: Mapping[str, Any] | None = None,
        *,
        limit: int = 6,
        enhanced: bool = False,
    ) -> list[CatalogItem]:
        """Pick items for a user's preferences.

        With *enhanced* and a configured recommendation endpoint the remote
        recommender is tried first; any failure ends in the local preference
        ranking.
        """
        self.engine(domain)
        recommender: PreferenceRecommender = self._local_recommender
        if enhanced:
            if self._remote_config.recommend_active and domain in self._enhanced_recommenders:
                recommender = self._enhanced_recommenders[domain]
            else:
                logger.debug("[SearchService] Enhanced recommendations requested but remote is not configured")

        return await recommender.recommend(catalog, preferences, limit=limit)


def build_enhanced_strategy(engine: SearchEngine, remote_config: RemoteSearchConfig) -> SearchStrategy:
    """Remote search guarded by a local fallback for one domain."""
    local = LocalSearchStrategy(engine)
    remote = RemoteSearchStrategy(
        lambda: RemoteSearchClient(
            url=remote_config.url,
            timeout_s=remote_config.timeout_s,
            api_key=remote_config.api_key,
        ),
        engine,
    )
    return FallbackSearchStrategy(remote, local, timeout_s=remote_config.timeout_s)


def build_enhanced_recommender(remote_config: RemoteSearchConfig) -> PreferenceRecommender:
    """Remote preference recommendations guarded by the local ranking."""
    remote = RemotePreferenceRecommender(
        lambda: RemoteSearchClient(
            recommend_url=remote_config.recommend_url,
            timeout_s=remote_config.timeout_s,
            api_key=remote_config.api_key,
        )
    )
    return FallbackPreferenceRecommender(remote, LocalPreferenceRecommender(), timeout_s=remote_config.timeout_s)
