"""Catalog item model and tolerant loading of loosely shaped records."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from dateutil import parser as dateparser

logger = logging.getLogger(__name__)

# Field names the scorer can ask for, mapped to CatalogItem attributes.
_CORE_TEXT_FIELDS = ("title", "alternate_title", "description", "alternate_description", "creator")
_CORE_LIST_FIELDS = ("genres", "tags", "cast")

# Record keys accepted for each core field, first match wins.
_RECORD_KEYS: dict[str, tuple[str, ...]] = {
    "id": ("id", "item_id", "itemId"),
    "title": ("title", "name"),
    "alternate_title": ("alternate_title", "alternateTitle", "titlebn", "title_bn"),
    "description": ("description", "summary"),
    "alternate_description": ("alternate_description", "alternateDescription", "descriptionbn", "description_bn"),
    "creator": ("creator", "studio", "author"),
    "genres": ("genres", "genre"),
    "tags": ("tags",),
    "cast": ("cast", "characters"),
    "quality_score": ("quality_score", "qualityScore", "rating"),
    "year": ("year",),
}
_DATE_KEYS = ("publicationDate", "publication_date", "createdAt", "created_at", "releaseDate")
_CONSUMED_KEYS = {key for keys in _RECORD_KEYS.values() for key in keys}


@dataclass(frozen=True)
class CatalogItem:
    """A searchable catalog entry (anime, manga or quiz).

    ``id`` and ``title`` are required; everything else is optional. Domain
    specific values (difficulty, type, status, time limit, ...) live in
    ``attributes`` and are reachable through :meth:`field_values` like the
    core fields.
    """

    id: str
    title: str
    alternate_title: str = ""
    description: str = ""
    alternate_description: str = ""
    creator: str = ""
    genres: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    cast: tuple[str, ...] = ()
    quality_score: float = 0.0
    year: int | None = None
    attributes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def field_values(self, name: str) -> tuple[str, ...]:
        """Return the text values of a field, or ``()`` if the item lacks it."""
        if name in _CORE_TEXT_FIELDS:
            value = getattr(self, name)
            return (value,) if value else ()
        if name in _CORE_LIST_FIELDS:
            return getattr(self, name)
        return _text_values(self.attributes.get(name))

    def attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "alternate_title": self.alternate_title,
            "description": self.description,
            "alternate_description": self.alternate_description,
            "creator": self.creator,
            "genres": list(self.genres),
            "tags": list(self.tags),
            "cast": list(self.cast),
            "quality_score": self.quality_score,
            "year": self.year,
            "attributes": dict(self.attributes),
        }

    @classmethod
    def from_record(cls, record: Any) -> "CatalogItem | None":
        """Build an item from a loosely shaped mapping.

        Returns ``None`` for records that cannot be searched at all
        (not a mapping, or missing an id or title).
        """
        if isinstance(record, CatalogItem):
            return record
        if not isinstance(record, Mapping):
            return None

        item_id = _first(record, "id")
        title = _first(record, "title")
        if item_id is None or isinstance(item_id, bool) or not isinstance(title, str) or not title.strip():
            return None
        item_id = str(item_id).strip()
        if not item_id:
            return None

        attributes = {
            key: value
            for key, value in record.items()
            if key not in _CONSUMED_KEYS and value is not None
        }

        return cls(
            id=item_id,
            title=title.strip(),
            alternate_title=_text(_first(record, "alternate_title")),
            description=_text(_first(record, "description")),
            alternate_description=_text(_first(record, "alternate_description")),
            creator=_text(_first(record, "creator")),
            genres=_text_values(_first(record, "genres")),
            tags=_text_values(_first(record, "tags")),
            cast=_text_values(_first(record, "cast")),
            quality_score=_number(_first(record, "quality_score")),
            year=_year(record),
            attributes=MappingProxyType(attributes),
        )


def load_catalog(records: Iterable[Any] | None) -> list[CatalogItem]:
    """Coerce a catalog snapshot into items, skipping unusable entries."""
    if records is None:
        return []

    items: list[CatalogItem] = []
    skipped = 0
    for record in records:
        item = CatalogItem.from_record(record)
        if item is None:
            skipped += 1
            continue
        items.append(item)

    if skipped:
        logger.debug("[Catalog] Skipped %d malformed record(s)", skipped)
    return items


def _first(record: Mapping[str, Any], name: str) -> Any:
    for key in _RECORD_KEYS[name]:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _text_values(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(v.strip() for v in value if isinstance(v, str) and v.strip())
    return ()


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if not isinstance(value, (int, float, str)):
        return 0.0
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return 0.0
    # "nan" and "inf" parse as floats but would break rating sorts and filters
    return number if math.isfinite(number) else 0.0


def _year(record: Mapping[str, Any]) -> int | None:
    year = _first(record, "year")
    if isinstance(year, int) and not isinstance(year, bool):
        return year
    if isinstance(year, str) and year.strip().isdigit():
        return int(year.strip())

    for key in _DATE_KEYS:
        raw = record.get(key)
        if raw is None:
            continue
        if hasattr(raw, "year"):
            return int(raw.year)
        if isinstance(raw, str):
            try:
                return dateparser.isoparse(raw).year
            except (ValueError, TypeError):
                continue
    return None
