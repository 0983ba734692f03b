"""Tests for autocomplete suggestions and recommendations."""

import pytest

from fansearch.data.catalog import CatalogItem
from fansearch.data.lexicon import Lexicon, SynonymTable, load_lexicon
from fansearch.search.suggestions import (
    RecommendationWeights,
    recommend,
    recommend_for_preferences,
    similarity_score,
    suggest,
)

MANGA = [
    {"id": "1", "title": "One Piece", "rating": 9.2},
    {"id": "2", "title": "One Punch Man", "rating": 8.7},
    {"id": "3", "title": "One Outs", "rating": 7.9},
]


class TestSuggest:
    """Tests for suggest."""

    @pytest.fixture(scope="class")
    def lexicon(self):
        return Lexicon(
            domain="manga",
            synonyms=SynonymTable({"one piece": ["op"], "chainsaw man": ["csm"]}),
            popular_terms=("one piece quiz", "berserk"),
        )

    def test_orders_sources_and_dedups(self, lexicon):
        assert suggest("one", MANGA, lexicon) == ["one piece", "One Punch Man", "one piece quiz"]

    def test_rating_threshold(self, lexicon):
        assert "One Outs" not in suggest("one", MANGA, lexicon)
        assert "One Outs" in suggest("one", MANGA, lexicon, rating_threshold=7.0)

    def test_limit(self, lexicon):
        assert len(suggest("one", MANGA, lexicon, limit=2)) == 2

    @pytest.mark.parametrize("partial", ["", "o", None, "  "])
    def test_too_short(self, lexicon, partial):
        assert suggest(partial, MANGA, lexicon) == []

    def test_bundled_quiz_lexicon(self):
        assert "naruto quiz" in suggest("quiz", [], load_lexicon("quiz"), limit=10)


class TestRecommend:
    """Tests for recommend and similarity_score."""

    A = {"id": "a", "title": "A", "genres": ["Action", "Adventure", "Fantasy"], "studio": "Mappa", "rating": 8.0, "year": 2020}
    B = {"id": "b", "title": "B", "genres": ["Action", "Adventure", "Fantasy"], "studio": "Mappa", "rating": 7.0, "year": 2010}
    C = {"id": "c", "title": "C", "genres": ["Romance"], "studio": "Kyoto", "rating": 8.0, "year": 2020}

    def test_shared_genres_and_studio_win(self):
        assert [item.id for item in recommend(self.A, [self.C, self.B])] == ["b", "c"]

    def test_excludes_self(self):
        assert [item.id for item in recommend(self.A, [self.A, self.B])] == ["b"]

    def test_score(self):
        a, b = CatalogItem.from_record(self.A), CatalogItem.from_record(self.B)
        expected = 0.3 * 3 + 0.2 + 0.2 * (1 - 1 / 10) + 0.1 * (1 - 10 / 20)
        assert similarity_score(a, b) == pytest.approx(expected)

    def test_unknown_year_contributes_nothing(self):
        a = CatalogItem(id="a", title="A", quality_score=5.0)
        b = CatalogItem(id="b", title="B", quality_score=5.0, year=2001)
        assert similarity_score(a, b) == pytest.approx(0.2)

    def test_custom_weights(self):
        a, c = CatalogItem.from_record(self.A), CatalogItem.from_record(self.C)
        weights = RecommendationWeights(rating=0.0, year=0.0)
        assert similarity_score(a, c, weights) == 0.0

    def test_limit_and_bad_input(self):
        assert recommend(self.A, [self.B, self.C], limit=1)[0].id == "b"
        assert recommend(None, [self.B]) == []


class TestRecommendForPreferences:
    QUIZZES = [
        {"id": "q1", "title": "Q1", "difficulty": "medium", "rating": 4.0},
        {"id": "q2", "title": "Q2", "difficulty": "hard", "rating": 4.8},
        {"id": "q3", "title": "Q3", "difficulty": "Medium", "rating": 4.6},
        {"id": "q4", "title": "Q4", "difficulty": "medium", "rating": 4.6},
    ]

    def test_defaults_to_medium(self):
        assert [item.id for item in recommend_for_preferences(self.QUIZZES)] == ["q3", "q4", "q1"]

    def test_excludes_recent(self):
        results = recommend_for_preferences(self.QUIZZES, {"difficulty": "medium", "recent": ["q3"]})
        assert [item.id for item in results] == ["q4", "q1"]

    def test_difficulty(self):
        assert [item.id for item in recommend_for_preferences(self.QUIZZES, {"difficulty": "hard"})] == ["q2"]
