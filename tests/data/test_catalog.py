"""Tests for catalog item coercion."""

import pytest

from fansearch.data.catalog import CatalogItem, load_catalog


class TestFromRecord:
    """CatalogItem.from_record on loosely shaped records."""

    def test_anime_record(self):
        item = CatalogItem.from_record(
            {
                "id": 1,
                "title": "Naruto",
                "titlebn": "নারুতো",
                "description": "A young ninja",
                "descriptionbn": "একজন তরুণ নিনজা",
                "studio": "Pierrot",
                "genres": ["Action", "Adventure"],
                "tags": ["ninja"],
                "cast": ["Junko Takeuchi"],
                "rating": 8.5,
                "year": 2002,
                "status": "completed",
            }
        )
        assert item.id == "1"
        assert item.alternate_title == "নারুতো"
        assert item.creator == "Pierrot"
        assert item.genres == ("Action", "Adventure")
        assert item.quality_score == 8.5
        assert item.year == 2002
        assert item.attribute("status") == "completed"

    def test_manga_author_and_publication_date(self):
        item = CatalogItem.from_record(
            {"id": "m1", "title": "Berserk", "author": "Kentaro Miura", "publicationDate": "1989-08-25"}
        )
        assert item.creator == "Kentaro Miura"
        assert item.year == 1989
        assert item.attribute("publicationDate") == "1989-08-25"

    def test_quiz_attributes(self):
        item = CatalogItem.from_record(
            {"id": "q1", "title": "Naruto Quiz", "difficulty": "easy", "timeLimit": 300, "createdAt": "2024-01-15T10:00:00Z"}
        )
        assert item.field_values("difficulty") == ("easy",)
        assert item.attribute("timeLimit") == 300
        assert item.year == 2024

    @pytest.mark.parametrize(
        "record",
        [
            None,
            "Naruto",
            42,
            {"title": "No id"},
            {"id": "1"},
            {"id": "1", "title": "   "},
            {"id": "", "title": "Blank id"},
            {"id": True, "title": "Bool id"},
            {"id": "1", "title": 5},
        ],
    )
    def test_malformed_records(self, record):
        assert CatalogItem.from_record(record) is None

    def test_tolerates_bad_optional_fields(self):
        item = CatalogItem.from_record(
            {"id": "x", "title": "X", "genres": ["Action", None, 3, " "], "rating": "n/a", "year": "soon", "createdAt": "??"}
        )
        assert item.genres == ("Action",)
        assert item.quality_score == 0.0
        assert item.year is None

    def test_passes_items_through(self):
        item = CatalogItem(id="a", title="A")
        assert CatalogItem.from_record(item) is item


class TestFieldValues:
    def test_missing_fields_are_empty(self):
        item = CatalogItem(id="a", title="A")
        assert item.field_values("description") == ()
        assert item.field_values("cast") == ()
        assert item.field_values("difficulty") == ()

    def test_to_dict(self):
        item = CatalogItem(id="a", title="A", tags=("x",))
        data = item.to_dict()
        assert data["id"] == "a"
        assert data["tags"] == ["x"]
        assert data["attributes"] == {}


class TestLoadCatalog:
    def test_skips_malformed_and_keeps_order(self):
        items = load_catalog([{"id": 2, "title": "B"}, None, {"id": 1, "title": "A"}, {"oops": True}])
        assert [item.id for item in items] == ["2", "1"]

    def test_none_catalog(self):
        assert load_catalog(None) == []


class TestRatingValues:
    @pytest.mark.parametrize("rating", ["nan", "inf", "-inf", float("nan"), float("inf"), 10**400])
    def test_non_finite_rating_is_zero(self, rating):
        item = CatalogItem.from_record({"id": "x", "title": "X", "rating": rating})
        assert item.quality_score == 0.0

    @pytest.mark.parametrize("rating, expected", [("8.5", 8.5), (9, 9.0), (7.25, 7.25)])
    def test_finite_rating(self, rating, expected):
        assert CatalogItem.from_record({"id": "x", "title": "X", "rating": rating}).quality_score == expected
