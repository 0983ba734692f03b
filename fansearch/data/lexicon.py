"""Typo and synonym tables loaded from per-domain YAML lexicons.

A lexicon file looks like::

    domain: anime
    typos:
      nuruto: naruto
      onepeice: one piece
    synonyms:
      attack on titan: [shingeki no kyojin, aot, snk]
    popular_terms:
      - naruto quiz

Every key, alias and correction is normalized on load, so lookups can be done
against normalized queries directly. Tables are immutable once built and are
shared by all searches of a domain.

Loading problems (missing file, bad YAML, schema mismatch, a correction that
is itself a misspelling) raise :class:`LexiconError`; they are meant to stop
the process at startup rather than surface per search.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fansearch.core.text import contains_phrase, normalize

from .config import SearchConfig

logger = logging.getLogger(__name__)


class LexiconError(RuntimeError):
    """Raised when a lexicon cannot be loaded or fails validation."""

    def __init__(self, message: str, *, source: Path | None = None) -> None:
        super().__init__(message)
        self.source = source


class LexiconDocument(BaseModel):
    """Schema of a lexicon YAML file."""

    model_config = ConfigDict(extra="forbid")

    domain: str = Field(min_length=1, description="Catalog domain the lexicon belongs to")
    typos: dict[str, str] = Field(default_factory=dict, description="misspelling -> correction")
    synonyms: dict[str, list[str]] = Field(
        default_factory=dict, description="canonical term -> aliases"
    )
    popular_terms: list[str] = Field(default_factory=list, description="Suggested search terms")


class TypoTable:
    """Misspelling -> correction lookup.

    Single-token keys drive per-token correction; multi-token keys are phrase
    corrections matched on token boundaries.
    """

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        corrections: dict[str, str] = {}
        for raw_key, raw_value in (entries or {}).items():
            key = normalize(raw_key)
            value = normalize(raw_value)
            if not key or not value:
                raise LexiconError(f"Typo entry {raw_key!r} -> {raw_value!r} is empty after normalization")
            if key == value:
                continue
            corrections[key] = value

        self._corrections = MappingProxyType(corrections)
        self._phrases = tuple(
            sorted((k for k in corrections if " " in k), key=len, reverse=True)
        )
        self._words = tuple((k, v) for k, v in corrections.items() if " " not in k)
        self._canonical_tokens = frozenset(
            token for value in corrections.values() for token in value.split()
        )
        self._validate()

    def _validate(self) -> None:
        for key, value in self._corrections.items():
            for token in value.split():
                if token in self._corrections:
                    raise LexiconError(
                        f"Correction {key!r} -> {value!r} contains {token!r}, which is itself a misspelling"
                    )
            for phrase in self._phrases:
                if contains_phrase(value, phrase):
                    raise LexiconError(
                        f"Correction {key!r} -> {value!r} contains the misspelled phrase {phrase!r}"
                    )

    @property
    def phrases(self) -> tuple[str, ...]:
        """Multi-token keys, longest first."""
        return self._phrases

    @property
    def words(self) -> tuple[tuple[str, str], ...]:
        """Single-token (misspelling, correction) pairs, in table order."""
        return self._words

    @property
    def canonical_tokens(self) -> frozenset[str]:
        """Every token that appears in some correction."""
        return self._canonical_tokens

    def get(self, key: str) -> str | None:
        return self._corrections.get(key)

    def items(self) -> Iterable[tuple[str, str]]:
        return self._corrections.items()

    def __contains__(self, key: object) -> bool:
        return key in self._corrections

    def __iter__(self) -> Iterator[str]:
        return iter(self._corrections)

    def __len__(self) -> int:
        return len(self._corrections)


class SynonymTable:
    """Canonical term -> aliases, looked up in both directions."""

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None) -> None:
        table: dict[str, tuple[str, ...]] = {}
        for raw_key, raw_aliases in (entries or {}).items():
            key = normalize(raw_key)
            if not key:
                raise LexiconError(f"Synonym key {raw_key!r} is empty after normalization")
            aliases: list[str] = list(table.get(key, ()))
            for raw_alias in raw_aliases:
                alias = normalize(raw_alias)
                if alias and alias != key and alias not in aliases:
                    aliases.append(alias)
            table[key] = tuple(aliases)

        self._table = MappingProxyType(table)
        self._conflicts = self._find_conflicts()
        if self._conflicts:
            logger.warning(
                "[Lexicon] %d alias(es) map to more than one canonical term: %s",
                len(self._conflicts),
                ", ".join(f"{alias!r} -> {list(keys)}" for alias, keys in self._conflicts.items()),
            )

    def _find_conflicts(self) -> Mapping[str, tuple[str, ...]]:
        owners: dict[str, list[str]] = {}
        for key, aliases in self._table.items():
            for alias in aliases:
                owners.setdefault(alias, []).append(key)
        # An alias that is also another entry's canonical key is ambiguous too.
        for alias, keys in owners.items():
            if alias in self._table and alias not in keys:
                keys.append(alias)
        return MappingProxyType({alias: tuple(keys) for alias, keys in owners.items() if len(keys) > 1})

    def conflicts(self) -> Mapping[str, tuple[str, ...]]:
        """Aliases shared by several canonical terms (a data-quality smell)."""
        return self._conflicts

    def aliases(self, key: str) -> tuple[str, ...]:
        return self._table.get(key, ())

    def items(self) -> Iterable[tuple[str, tuple[str, ...]]]:
        return self._table.items()

    def terms(self) -> list[str]:
        """Every canonical key followed by its aliases, in table order."""
        terms: list[str] = []
        for key, aliases in self._table.items():
            terms.append(key)
            terms.extend(aliases)
        return terms

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)


@dataclass(frozen=True)
class Lexicon:
    """Everything domain-specific the engine needs besides field weights."""

    domain: str
    typos: TypoTable = field(default_factory=TypoTable)
    synonyms: SynonymTable = field(default_factory=SynonymTable)
    popular_terms: tuple[str, ...] = ()

    @classmethod
    def from_document(cls, document: LexiconDocument) -> "Lexicon":
        popular: list[str] = []
        for term in document.popular_terms:
            normalized = normalize(term)
            if normalized and normalized not in popular:
                popular.append(normalized)
        return cls(
            domain=normalize(document.domain),
            typos=TypoTable(document.typos),
            synonyms=SynonymTable(document.synonyms),
            popular_terms=tuple(popular),
        )

    @classmethod
    def from_file(cls, path: Path) -> "Lexicon":
        """Load and validate a lexicon YAML file.

        Raises:
            LexiconError: If the file is missing, unparsable or invalid
        """
        if not path.exists():
            raise LexiconError(f"Lexicon file not found: {path}", source=path)

        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise LexiconError(f"Invalid YAML in lexicon {path}: {exc}", source=path) from exc

        if not isinstance(raw, dict):
            raise LexiconError(f"Lexicon {path} must be a mapping", source=path)

        try:
            document = LexiconDocument.model_validate(raw)
        except ValidationError as exc:
            raise LexiconError(f"Lexicon {path} failed validation: {exc}", source=path) from exc

        try:
            lexicon = cls.from_document(document)
        except LexiconError as exc:
            raise LexiconError(f"Lexicon {path}: {exc}", source=path) from exc

        logger.info(
            "[Lexicon] Loaded %s: %d typos, %d synonym groups, %d popular terms",
            lexicon.domain,
            len(lexicon.typos),
            len(lexicon.synonyms),
            len(lexicon.popular_terms),
        )
        return lexicon


def load_lexicon(domain: str, directory: Path | None = None) -> Lexicon:
    """Load ``<directory>/<domain>.yaml`` (bundled lexicons by default)."""
    lexicon_dir = directory or SearchConfig().lexicon_dir
    lexicon = Lexicon.from_file(lexicon_dir / f"{domain}.yaml")
    if lexicon.domain != normalize(domain):
        raise LexiconError(
            f"Lexicon {lexicon_dir / f'{domain}.yaml'} declares domain {lexicon.domain!r}, expected {domain!r}",
            source=lexicon_dir / f"{domain}.yaml",
        )
    return lexicon
