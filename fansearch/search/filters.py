"""Structured catalog filters applied before scoring."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from fansearch.core.text import normalize
from fansearch.data.catalog import CatalogItem


def _normalized_set(values: Iterable[str]) -> frozenset[str]:
    return frozenset(v for v in (normalize(value) for value in values) if v)


def _as_tuple(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class CatalogFilter:
    """Boolean predicate over catalog items. Empty criteria accept everything."""

    difficulties: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    statuses: tuple[str, ...] = ()
    genres: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    min_rating: float | None = None
    max_duration: float | None = None
    year_range: tuple[int, int] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "CatalogFilter":
        data = data or {}
        year_range = data.get("year_range")
        return cls(
            difficulties=_as_tuple(data.get("difficulties") or data.get("difficulty")),
            types=_as_tuple(data.get("types") or data.get("type")),
            statuses=_as_tuple(data.get("statuses") or data.get("status")),
            genres=_as_tuple(data.get("genres")),
            tags=_as_tuple(data.get("tags")),
            min_rating=data.get("min_rating"),
            max_duration=data.get("max_duration"),
            year_range=(int(year_range[0]), int(year_range[1])) if year_range else None,
        )

    @property
    def is_empty(self) -> bool:
        return not (
            self.difficulties
            or self.types
            or self.statuses
            or self.genres
            or self.tags
            or self.min_rating is not None
            or self.max_duration is not None
            or self.year_range is not None
        )

    def matches(self, item: CatalogItem) -> bool:
        if self.difficulties and normalize(item.attribute("difficulty")) not in _normalized_set(self.difficulties):
            return False
        if self.types and normalize(item.attribute("type")) not in _normalized_set(self.types):
            return False
        if self.statuses and normalize(item.attribute("status")) not in _normalized_set(self.statuses):
            return False

        if self.genres and not _normalized_set(self.genres) <= _normalized_set(item.genres):
            return False

        if self.tags:
            item_tags = [normalize(tag) for tag in item.tags]
            wanted = _normalized_set(self.tags)
            if not any(tag in item_tag for tag in wanted for item_tag in item_tags):
                return False

        if self.min_rating is not None and item.quality_score < self.min_rating:
            return False

        if self.max_duration is not None:
            duration = item.attribute("time_limit", item.attribute("timeLimit"))
            if isinstance(duration, (int, float)) and duration > self.max_duration:
                return False

        if self.year_range is not None:
            start, end = self.year_range
            if item.year is None or not start <= item.year <= end:
                return False

        return True

    def apply(self, items: Iterable[CatalogItem]) -> list[CatalogItem]:
        if self.is_empty:
            return list(items)
        return [item for item in items if self.matches(item)]
