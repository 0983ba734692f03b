"""Local, remote and fallback search and recommendation strategies.

The remote strategies ask an external endpoint to score or pick from a
catalog summary. They are only ever used behind the fallback wrappers, which
turn any remote failure into the local result.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from fansearch.core.text import normalize
from fansearch.data.catalog import CatalogItem, load_catalog
from fansearch.data.remote_client import RemoteSearchClient, RemoteSearchError

from .filters import CatalogFilter
from .ranker import SearchEngine
from .results import MatchType, SearchResult
from .suggestions import recommend_for_preferences

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class SearchStrategy(ABC):
    """Produces ranked results for a catalog snapshot and a raw query."""

    @abstractmethod
    async def search(
        self,
        catalog: Iterable[Any] | None,
        query: Any,
        *,
        filters: CatalogFilter | None = None,
        limit: int | None = None,
    ) -> list[SearchResult]:
        raise NotImplementedError


class LocalSearchStrategy(SearchStrategy):
    def __init__(self, engine: SearchEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> SearchEngine:
        return self._engine

    async def search(self, catalog, query, *, filters=None, limit=None) -> list[SearchResult]:
        return self._engine.search(catalog, query, filters=filters, limit=limit)


class RemoteSearchStrategy(SearchStrategy):
    """Scores the catalog through the remote relevance endpoint.

    Args:
        client_factory: Returns a fresh (not yet entered) RemoteSearchClient
        engine: Local engine of the same domain, used for the result cap and
            for blank queries, which never reach the endpoint
    """

    def __init__(self, client_factory: Callable[[], RemoteSearchClient], engine: SearchEngine) -> None:
        self._client_factory = client_factory
        self._engine = engine

    async def search(self, catalog, query, *, filters=None, limit=None) -> list[SearchResult]:
        if not normalize(query):
            # Blank-query policy belongs to the domain profile.
            return self._engine.search(catalog, query, filters=filters, limit=limit)

        items = load_catalog(catalog)
        if filters is not None:
            items = filters.apply(items)
        if not items:
            return []

        summary = [{"id": item.id, "title": item.title, "description": item.description} for item in items]
        by_id = {item.id: item for item in items}

        async with self._client_factory() as client:
            response = await client.search(query, summary)

        results: list[SearchResult] = []
        seen: set[str] = set()
        for match in response.results:
            item = by_id.get(match.item_id)
            if item is None or match.item_id in seen:
                continue
            seen.add(match.item_id)
            results.append(
                SearchResult(
                    item=item,
                    score=max(0.0, match.relevance_score),
                    match_type=MatchType.SEMANTIC,
                    matched_fields=tuple(dict.fromkeys(match.matched_fields)),
                    reason=match.reasoning,
                )
            )

        dropped = len(response.results) - len(results)
        if dropped:
            logger.debug("[RemoteSearch] Ignored %d result(s) with unknown or repeated ids", dropped)

        results.sort(key=lambda result: -result.score)
        return results[: self._engine.cap(limit)]


async def _with_fallback(
    primary: Awaitable[_T],
    fallback: Callable[[], Awaitable[_T]],
    *,
    timeout_s: float,
    label: str,
) -> _T:
    """Await *primary* under a deadline; on any failure log a warning and await *fallback*."""
    try:
        return await asyncio.wait_for(primary, timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.warning("[RemoteSearch] Timed out after %.1fs, falling back to local %s", timeout_s, label)
    except RemoteSearchError as exc:
        logger.warning("[RemoteSearch] %s (status=%s), falling back to local %s", exc, exc.status_code, label)
    except (httpx.HTTPError, ValidationError) as exc:
        logger.warning("[RemoteSearch] %s: %s, falling back to local %s", type(exc).__name__, exc, label)
    except Exception as exc:
        logger.warning("[RemoteSearch] Unexpected error, falling back to local %s: %s", label, exc, exc_info=True)
    return await fallback()


class FallbackSearchStrategy(SearchStrategy):
    """Runs *primary* under a deadline and falls back on any failure."""

    def __init__(self, primary: SearchStrategy, fallback: SearchStrategy, *, timeout_s: float) -> None:
        self._primary = primary
        self._fallback = fallback
        self._timeout_s = timeout_s

    async def search(self, catalog, query, *, filters=None, limit=None) -> list[SearchResult]:
        # Materialize once so both strategies see the same snapshot.
        snapshot = list(catalog) if catalog is not None else []
        return await _with_fallback(
            self._primary.search(snapshot, query, filters=filters, limit=limit),
            lambda: self._fallback.search(snapshot, query, filters=filters, limit=limit),
            timeout_s=self._timeout_s,
            label="search",
        )


class PreferenceRecommender(ABC):
    """Picks catalog items for a user's stated preferences."""

    @abstractmethod
    async def recommend(
        self,
        catalog: Iterable[Any] | None,
        preferences: Mapping[str, Any] | None = None,
        *,
        limit: int = 6,
    ) -> list[CatalogItem]:
        raise NotImplementedError


class LocalPreferenceRecommender(PreferenceRecommender):
    async def recommend(self, catalog, preferences=None, *, limit=6) -> list[CatalogItem]:
        return recommend_for_preferences(catalog, preferences, limit=limit)


class RemotePreferenceRecommender(PreferenceRecommender):
    """Lets the remote recommendation endpoint pick items from the catalog.

    The endpoint sees ``{id, title, difficulty, tags}`` per item and answers
    with item ids, best first. Ids it invents or repeats are ignored.
    """

    def __init__(self, client_factory: Callable[[], RemoteSearchClient]) -> None:
        self._client_factory = client_factory

    async def recommend(self, catalog, preferences=None, *, limit=6) -> list[CatalogItem]:
        items = load_catalog(catalog)
        if not items or limit <= 0:
            return []

        available = [
            {
                "id": item.id,
                "title": item.title,
                "difficulty": item.attribute("difficulty"),
                "tags": list(item.tags),
            }
            for item in items
        ]
        by_id = {item.id: item for item in items}

        async with self._client_factory() as client:
            response = await client.recommend(dict(preferences or {}), available)

        picked: list[CatalogItem] = []
        for item_id in dict.fromkeys(response.item_ids):
            item = by_id.get(item_id)
            if item is not None:
                picked.append(item)

        dropped = len(response.item_ids) - len(picked)
        if dropped:
            logger.debug("[RemoteSearch] Ignored %d recommended id(s) that are unknown or repeated", dropped)
        return picked[:limit]


class FallbackPreferenceRecommender(PreferenceRecommender):
    """Runs *primary* under a deadline and falls back on any failure."""

    def __init__(
        self,
        primary: PreferenceRecommender,
        fallback: PreferenceRecommender,
        *,
        timeout_s: float,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._timeout_s = timeout_s

    async def recommend(self, catalog, preferences=None, *, limit=6) -> list[CatalogItem]:
        snapshot = list(catalog) if catalog is not None else []
        return await _with_fallback(
            self._primary.recommend(snapshot, preferences, limit=limit),
            lambda: self._fallback.recommend(snapshot, preferences, limit=limit),
            timeout_s=self._timeout_s,
            label="recommendations",
        )
