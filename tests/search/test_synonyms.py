"""Tests for synonym expansion."""

import pytest

from fansearch.core.text import normalize
from fansearch.data.lexicon import SynonymTable, load_lexicon
from fansearch.search.synonyms import SynonymExpander, expand_synonyms


@pytest.fixture(scope="module")
def anime():
    return SynonymExpander(load_lexicon("anime").synonyms)


class TestSynonymExpander:
    """Tests for SynonymExpander."""

    def test_alias_to_key(self, anime):
        assert anime.expand("snk") == ("snk", "attack on titan")

    def test_key_to_aliases(self, anime):
        variants = anime.expand("Attack on Titan")
        assert variants[0] == "attack on titan"
        assert {"shingeki no kyojin", "aot", "snk"} <= set(variants)

    def test_bengali_alias(self, anime):
        assert "naruto" in anime.expand("নারুতো")

    def test_unknown_query(self, anime):
        assert anime.expand("cowboy bebop") == ("cowboy bebop",)

    def test_empty_query(self, anime):
        assert anime.expand("") == ("",)

    @pytest.mark.parametrize("query", ["SNK!", "top anime", "one piece op", "  ", "মাঙ্গা"])
    def test_contains_normalized_query(self, anime, query):
        assert normalize(query) in anime.expand(query)

    def test_token_boundary_by_default(self, anime):
        assert anime.expand("top anime") == ("top anime",)

    def test_substring_mode(self):
        expander = SynonymExpander(SynonymTable({"one piece": ["op"]}), token_boundary=False)
        assert "tone piece anime" in expander.expand("top anime")

    def test_replaces_every_occurrence(self):
        variants = expand_synonyms("snk vs snk", SynonymTable({"attack on titan": ["snk"]}))
        assert variants == ("snk vs snk", "attack on titan vs attack on titan")

    def test_no_duplicates(self):
        variants = expand_synonyms("aot", SynonymTable({"attack on titan": ["aot", "snk"]}))
        assert len(variants) == len(set(variants))
