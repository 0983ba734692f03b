"""Environment-driven configuration for the search engine."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
import os
from pathlib import Path

_BUNDLED_LEXICON_DIR = Path(__file__).resolve().parent / "lexicons"
_TRUTHY = {"1", "true", "yes", "on"}


def _get_lexicon_dir() -> Path:
    """Resolve the lexicon directory.

    Priority:
    1. Explicit `FANSEARCH_LEXICON_DIR` env override.
    2. Lexicons bundled with the package.
    """
    explicit = os.getenv("FANSEARCH_LEXICON_DIR")
    if explicit:
        return Path(explicit)
    return _BUNDLED_LEXICON_DIR


class ConfigError(ValueError):
    """Raised when an environment setting cannot be parsed."""

    def __init__(self, name: str, raw: str, expected: str) -> None:
        super().__init__(f"{name}={raw!r} is not a valid {expected}")
        self.name = name


def _parse(name: str, raw: str, kind: type, expected: str):
    try:
        value = kind(raw)
    except ValueError as exc:
        raise ConfigError(name, raw, expected) from exc
    if isinstance(value, float) and not math.isfinite(value):
        raise ConfigError(name, raw, expected)
    return value


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    return _parse(name, raw, float, "number") if raw else None


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    return _parse(name, raw, int, "integer") if raw else None


def _timeout_s() -> float:
    raw = os.getenv("FANSEARCH_REMOTE_TIMEOUT_S", "5")
    return _parse("FANSEARCH_REMOTE_TIMEOUT_S", raw, float, "number")


def _remote_enabled() -> bool:
    raw = os.getenv("FANSEARCH_REMOTE_ENABLED")
    if raw is None:
        return bool(os.getenv("FANSEARCH_REMOTE_URL") or os.getenv("FANSEARCH_REMOTE_RECOMMEND_URL"))
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class SearchConfig:
    lexicon_dir: Path = field(default_factory=_get_lexicon_dir)
    min_score: float | None = field(default_factory=lambda: _optional_float("FANSEARCH_MIN_SCORE"))
    result_cap: int | None = field(default_factory=lambda: _optional_int("FANSEARCH_RESULT_CAP"))


@dataclass(frozen=True)
class RemoteSearchConfig:
    url: str | None = field(default_factory=lambda: os.getenv("FANSEARCH_REMOTE_URL") or None)
    enabled: bool = field(default_factory=_remote_enabled)
    timeout_s: float = field(default_factory=_timeout_s)
    api_key: str | None = field(default_factory=lambda: os.getenv("FANSEARCH_REMOTE_API_KEY") or None)
    recommend_url: str | None = field(
        default_factory=lambda: os.getenv("FANSEARCH_REMOTE_RECOMMEND_URL") or None
    )

    @property
    def active(self) -> bool:
        """Remote enhancement is used only when a URL is configured and enabled."""
        return bool(self.url) and self.enabled

    @property
    def recommend_active(self) -> bool:
        """Remote recommendations need their own URL and the same switch."""
        return bool(self.recommend_url) and self.enabled
