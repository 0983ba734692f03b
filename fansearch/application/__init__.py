"""Application layer services."""

from .search_service import CatalogSearchService, build_enhanced_recommender, build_enhanced_strategy

__all__ = [
    "CatalogSearchService",
    "build_enhanced_recommender",
    "build_enhanced_strategy",
]
