"""Tests for query and field normalization."""

import pytest

from fansearch.core.text import contains_phrase, normalize, replace_phrase, tokenize


class TestNormalize:
    """Tests for normalize."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("  Naruto  ", "naruto"),
            ("Attack-on-Titan!", "attack on titan"),
            ("Hunter x Hunter (2011)", "hunter x hunter 2011"),
            ("one_piece", "one piece"),
            ("Yu-Gi-Oh!", "yu gi oh"),
            ("নারুতো", "নারুতো"),
            ("ওয়ান পিস", "ওয়ান পিস"),
            ("   ", ""),
            ("", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize(raw) == expected

    @pytest.mark.parametrize("value", [None, 42, 3.5, ["naruto"], {"title": "x"}])
    def test_non_string_is_blank(self, value):
        assert normalize(value) == ""

    def test_idempotent(self):
        once = normalize("  Demon  Slayer: Kimetsu no Yaiba ")
        assert normalize(once) == once


class TestTokenize:
    def test_splits_normalized_text(self):
        assert tokenize("Fullmetal Alchemist: Brotherhood") == ["fullmetal", "alchemist", "brotherhood"]

    def test_blank(self):
        assert tokenize(None) == []


class TestPhrases:
    """Token-boundary containment and replacement."""

    def test_contains_whole_tokens_only(self):
        assert contains_phrase("watch op now", "op")
        assert not contains_phrase("top anime", "op")

    def test_multi_token_phrase(self):
        assert contains_phrase("is attack on titan good", "attack on titan")
        assert not contains_phrase("attack on titans", "attack on titan")

    def test_empty_arguments(self):
        assert not contains_phrase("", "op")
        assert not contains_phrase("op", "")

    def test_replace_every_occurrence(self):
        assert replace_phrase("snk vs snk", "snk", "attack on titan") == "attack on titan vs attack on titan"

    def test_replace_leaves_embedded_text(self):
        assert replace_phrase("top op", "op", "one piece") == "top one piece"

    def test_replace_empty_old_is_noop(self):
        assert replace_phrase("naruto", "", "x") == "naruto"
