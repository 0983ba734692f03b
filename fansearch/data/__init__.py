"""Catalog model, lexicons, profiles and configuration."""

from .catalog import CatalogItem, load_catalog
from .config import ConfigError, RemoteSearchConfig, SearchConfig
from .lexicon import Lexicon, LexiconError, SynonymTable, TypoTable, load_lexicon
from .profiles import ANIME, MANGA, PROFILES, QUIZ, DomainProfile, FieldKind, FieldSpec
from .remote_client import (
    RemoteRecommendationResponse,
    RemoteSearchClient,
    RemoteSearchError,
    RemoteSearchResponse,
)

__all__ = [
    "CatalogItem",
    "load_catalog",
    "ConfigError",
    "RemoteSearchConfig",
    "SearchConfig",
    "Lexicon",
    "LexiconError",
    "SynonymTable",
    "TypoTable",
    "load_lexicon",
    "ANIME",
    "MANGA",
    "PROFILES",
    "QUIZ",
    "DomainProfile",
    "FieldKind",
    "FieldSpec",
    "RemoteRecommendationResponse",
    "RemoteSearchClient",
    "RemoteSearchError",
    "RemoteSearchResponse",
]
