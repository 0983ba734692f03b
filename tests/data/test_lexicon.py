"""Tests for lexicon loading and typo/synonym table validation."""

import logging
from pathlib import Path

import pytest

from fansearch.data.config import SearchConfig
from fansearch.data.lexicon import Lexicon, LexiconError, SynonymTable, TypoTable, load_lexicon

DOMAINS = ["anime", "manga", "quiz"]


@pytest.fixture(scope="module")
def lexicons():
    return {domain: load_lexicon(domain) for domain in DOMAINS}


class TestBundledLexicons:
    """The lexicons shipped with the package."""

    @pytest.mark.parametrize("domain", DOMAINS)
    def test_loads(self, lexicons, domain):
        lexicon = lexicons[domain]
        assert lexicon.domain == domain
        assert len(lexicon.typos) > 0
        assert len(lexicon.synonyms) > 0

    @pytest.mark.parametrize("domain", DOMAINS)
    def test_no_synonym_conflicts(self, lexicons, domain):
        assert dict(lexicons[domain].synonyms.conflicts()) == {}

    def test_known_entries(self, lexicons):
        assert lexicons["anime"].typos.get("nuruto") == "naruto"
        assert "snk" in lexicons["anime"].synonyms.aliases("attack on titan")
        assert "naruto quiz" in lexicons["quiz"].popular_terms

    def test_bundled_dir_is_default(self, monkeypatch):
        monkeypatch.delenv("FANSEARCH_LEXICON_DIR", raising=False)
        assert (SearchConfig().lexicon_dir / "anime.yaml").exists()


class TestTypoTable:
    """Tests for TypoTable."""

    def test_normalizes_entries(self):
        table = TypoTable({" Nuruto ": "NARUTO", "One Peice": "One Piece"})
        assert table.get("nuruto") == "naruto"
        assert table.get("one peice") == "one piece"

    def test_drops_identity_entries(self):
        table = TypoTable({"Naruto": "naruto", "bleech": "bleach"})
        assert "naruto" not in table
        assert len(table) == 1

    def test_phrases_longest_first(self):
        table = TypoTable({"one peice": "one piece", "fullmetal alchimist": "fullmetal alchemist", "lufy": "luffy"})
        assert table.phrases == ("fullmetal alchimist", "one peice")

    def test_canonical_tokens(self):
        table = TypoTable({"dragball": "dragon ball"})
        assert table.canonical_tokens == frozenset({"dragon", "ball"})

    def test_empty_entry_raises(self):
        with pytest.raises(LexiconError):
            TypoTable({"???": "naruto"})

    def test_chained_correction_raises(self):
        with pytest.raises(LexiconError, match="itself a misspelling"):
            TypoTable({"nurto": "nuruto", "nuruto": "naruto"})

    def test_correction_containing_phrase_key_raises(self):
        with pytest.raises(LexiconError, match="misspelled phrase"):
            TypoTable({"hunter hunter": "hunter x hunter", "hxh2": "the hunter hunter saga"})


class TestSynonymTable:
    """Tests for SynonymTable."""

    def test_normalizes_and_dedups(self):
        table = SynonymTable({"Attack on Titan": ["AOT", "aot", "Attack on Titan", "SnK"]})
        assert table.aliases("attack on titan") == ("aot", "snk")

    def test_terms_in_order(self):
        table = SynonymTable({"one piece": ["op"], "naruto": ["hokage"]})
        assert table.terms() == ["one piece", "op", "naruto", "hokage"]

    def test_shared_alias_is_a_conflict(self, caplog):
        with caplog.at_level(logging.WARNING, logger="fansearch.data.lexicon"):
            table = SynonymTable({"one piece": ["op"], "one punch man": ["op"]})
        assert dict(table.conflicts()) == {"op": ("one piece", "one punch man")}
        assert "more than one canonical term" in caplog.text

    def test_alias_that_is_another_key_is_a_conflict(self):
        table = SynonymTable({"dragon ball": ["dragon ball z"], "dragon ball z": ["dbz"]})
        assert "dragon ball z" in table.conflicts()

    def test_empty_key_raises(self):
        with pytest.raises(LexiconError):
            SynonymTable({"!!": ["x"]})


class TestLexiconFile:
    """Loading lexicon YAML files."""

    def _write(self, tmp_path: Path, name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_from_file(self, tmp_path):
        path = self._write(
            tmp_path,
            "anime.yaml",
            "domain: anime\ntypos:\n  nuruto: naruto\nsynonyms:\n  one piece: [op]\npopular_terms: [Naruto, naruto]\n",
        )
        lexicon = Lexicon.from_file(path)
        assert lexicon.typos.get("nuruto") == "naruto"
        assert lexicon.synonyms.aliases("one piece") == ("op",)
        assert lexicon.popular_terms == ("naruto",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(LexiconError, match="not found") as exc_info:
            Lexicon.from_file(tmp_path / "nope.yaml")
        assert exc_info.value.source == tmp_path / "nope.yaml"

    def test_invalid_yaml(self, tmp_path):
        path = self._write(tmp_path, "anime.yaml", "domain: anime\ntypos: [unclosed\n")
        with pytest.raises(LexiconError, match="Invalid YAML"):
            Lexicon.from_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = self._write(tmp_path, "anime.yaml", "- naruto\n- bleach\n")
        with pytest.raises(LexiconError, match="must be a mapping"):
            Lexicon.from_file(path)

    def test_unknown_key_fails_validation(self, tmp_path):
        path = self._write(tmp_path, "anime.yaml", "domain: anime\naliases: {}\n")
        with pytest.raises(LexiconError, match="failed validation"):
            Lexicon.from_file(path)

    def test_bad_table_reports_file(self, tmp_path):
        path = self._write(tmp_path, "anime.yaml", "domain: anime\ntypos:\n  nurto: nuruto\n  nuruto: naruto\n")
        with pytest.raises(LexiconError) as exc_info:
            Lexicon.from_file(path)
        assert exc_info.value.source == path

    def test_domain_mismatch(self, tmp_path):
        self._write(tmp_path, "manga.yaml", "domain: anime\n")
        with pytest.raises(LexiconError, match="declares domain"):
            load_lexicon("manga", tmp_path)
