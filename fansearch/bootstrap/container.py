"""Dependency composition root."""

from __future__ import annotations

from dataclasses import dataclass

from fansearch.application import CatalogSearchService, build_enhanced_recommender, build_enhanced_strategy
from fansearch.data import PROFILES, RemoteSearchConfig, SearchConfig, load_lexicon
from fansearch.search import SearchEngine


@dataclass(frozen=True)
class AppContainer:
    """Wired application dependencies."""

    search: CatalogSearchService
    search_config: SearchConfig
    remote_config: RemoteSearchConfig


_CONTAINER: AppContainer | None = None


def build_container(
    search_config: SearchConfig | None = None,
    remote_config: RemoteSearchConfig | None = None,
) -> AppContainer:
    """Load every domain lexicon and wire one engine per domain.

    Raises:
        LexiconError: If any lexicon is missing or invalid
    """
    search_config = search_config or SearchConfig()
    remote_config = remote_config or RemoteSearchConfig()

    engines: dict[str, SearchEngine] = {}
    for domain, profile in PROFILES.items():
        lexicon = load_lexicon(domain, search_config.lexicon_dir)
        engines[domain] = SearchEngine(profile.with_overrides(search_config), lexicon)

    enhanced = (
        {domain: build_enhanced_strategy(engine, remote_config) for domain, engine in engines.items()}
        if remote_config.active
        else {}
    )
    recommenders = (
        dict.fromkeys(engines, build_enhanced_recommender(remote_config)) if remote_config.recommend_active else {}
    )

    return AppContainer(
        search=CatalogSearchService(
            engines=engines,
            remote_config=remote_config,
            enhanced_strategies=enhanced,
            enhanced_recommenders=recommenders,
        ),
        search_config=search_config,
        remote_config=remote_config,
    )


def get_container() -> AppContainer:
    global _CONTAINER
    if _CONTAINER is not None:
        return _CONTAINER

    _CONTAINER = build_container()
    return _CONTAINER
