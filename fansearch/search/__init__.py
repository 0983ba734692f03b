"""Search pipeline: typo correction, synonym expansion, scoring, ranking."""

from .filters import CatalogFilter
from .ranker import SearchEngine
from .results import FieldMatch, MatchType, SearchResult
from .scoring import FieldMatchScorer
from .strategies import (
    FallbackPreferenceRecommender,
    FallbackSearchStrategy,
    LocalPreferenceRecommender,
    LocalSearchStrategy,
    PreferenceRecommender,
    RemotePreferenceRecommender,
    RemoteSearchStrategy,
    SearchStrategy,
)
from .suggestions import (
    RecommendationWeights,
    recommend,
    recommend_for_preferences,
    similarity_score,
    suggest,
)
from .synonyms import SynonymExpander, expand_synonyms
from .typos import TypoCorrector, correct_typos

__all__ = [
    "CatalogFilter",
    "SearchEngine",
    "FieldMatch",
    "MatchType",
    "SearchResult",
    "FieldMatchScorer",
    "FallbackPreferenceRecommender",
    "FallbackSearchStrategy",
    "LocalPreferenceRecommender",
    "LocalSearchStrategy",
    "PreferenceRecommender",
    "RemotePreferenceRecommender",
    "RemoteSearchStrategy",
    "SearchStrategy",
    "RecommendationWeights",
    "recommend",
    "recommend_for_preferences",
    "similarity_score",
    "suggest",
    "SynonymExpander",
    "expand_synonyms",
    "TypoCorrector",
    "correct_typos",
]
