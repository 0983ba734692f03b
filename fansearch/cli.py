"""Command-line entry point.

Usage:
    fansearch search anime "nuruto" --catalog anime.json
    fansearch search quiz "snk" --catalog quizzes.json --enhanced --json
    fansearch suggest manga "one" --catalog manga.json
    fansearch recommend anime 42 --catalog anime.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from fansearch.bootstrap.container import get_container
from fansearch.data import PROFILES, CatalogItem, ConfigError, LexiconError
from fansearch.search import SearchResult

logger = logging.getLogger(__name__)

EXIT_BAD_INPUT = 2

console = Console()


class CatalogFileError(RuntimeError):
    """Raised when a catalog file cannot be read."""


def setup_logging() -> None:
    level = os.getenv("FANSEARCH_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def load_catalog_file(path: Path) -> list[Any]:
    """Read a catalog snapshot: a JSON list, or an object with an ``items`` list."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogFileError(f"Cannot read catalog {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogFileError(f"Catalog {path} is not valid JSON: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("items")
    if not isinstance(data, list):
        raise CatalogFileError(f"Catalog {path} must be a JSON list or an object with an 'items' list")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fansearch",
        description="Fuzzy search over anime, manga and quiz catalogs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Rank catalog items for a query")
    search.add_argument("domain", choices=sorted(PROFILES))
    search.add_argument("query")
    search.add_argument("--catalog", type=Path, required=True, help="JSON catalog file")
    search.add_argument("--limit", type=int, default=None, help="Maximum number of results")
    search.add_argument("--enhanced", action="store_true", help="Try the remote relevance endpoint first")
    search.add_argument("--json", action="store_true", help="Print results as JSON")

    suggest = subparsers.add_parser("suggest", help="Autocomplete a partial query")
    suggest.add_argument("domain", choices=sorted(PROFILES))
    suggest.add_argument("partial")
    suggest.add_argument("--catalog", type=Path, required=True, help="JSON catalog file")
    suggest.add_argument("--limit", type=int, default=5)

    recommend = subparsers.add_parser("recommend", help="Items similar to a catalog item")
    recommend.add_argument("domain", choices=sorted(PROFILES))
    recommend.add_argument("item_id")
    recommend.add_argument("--catalog", type=Path, required=True, help="JSON catalog file")
    recommend.add_argument("--limit", type=int, default=6)

    return parser


def render_results(results: list[SearchResult], query: str, corrected: str) -> None:
    title = f"Results for '{query}'"
    if corrected and corrected != query.strip().lower():
        title += f" (searched as '{corrected}')"

    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Match")
    table.add_column("Fields")
    table.add_column("Reason", style="dim")
    for rank, result in enumerate(results, start=1):
        table.add_row(
            str(rank),
            result.item.title,
            f"{result.score:.3f}",
            result.match_type.value,
            ", ".join(result.matched_fields),
            result.reason,
        )
    console.print(table)


def render_items(items: list[CatalogItem], title: str) -> None:
    table = Table(title=title)
    table.add_column("ID")
    table.add_column("Title", style="bold")
    table.add_column("Rating", justify="right")
    table.add_column("Genres / Tags")
    for item in items:
        table.add_row(item.id, item.title, f"{item.quality_score:.1f}", ", ".join(item.genres + item.tags))
    console.print(table)


def run(args: argparse.Namespace) -> int:
    catalog = load_catalog_file(args.catalog)
    service = get_container().search

    if args.command == "search":
        results = asyncio.run(
            service.search(args.domain, catalog, args.query, limit=args.limit, enhanced=args.enhanced)
        )
        if args.json:
            print(json.dumps([result.to_dict() for result in results], ensure_ascii=False, indent=2))
        elif results:
            render_results(results, args.query, service.correct(args.domain, args.query))
        else:
            console.print(f"No results for '{args.query}'")
        return 0

    if args.command == "suggest":
        for suggestion in service.suggest(args.domain, args.partial, catalog, limit=args.limit):
            console.print(suggestion)
        return 0

    items = service.recommend(args.domain, args.item_id, catalog, limit=args.limit)
    if not items:
        console.print(f"No recommendations for item '{args.item_id}'")
        return 0
    render_items(items, f"Similar to '{args.item_id}'")
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        return run(args)
    except CatalogFileError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return EXIT_BAD_INPUT
    except LexiconError as exc:
        logger.error("[CLI] %s", exc)
        return 1
    except ConfigError as exc:
        logger.error("[CLI] Invalid configuration: %s", exc)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
