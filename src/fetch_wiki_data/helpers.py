"""Helper functions for fetch_wiki_data."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterator, Sequence, TypeVar
from urllib.parse import quote

from fetch_wiki_data.config import WikiConfig
from fetch_wiki_data.models import CategorySpec, FeedKind

T = TypeVar("T")


def is_disallowed_title(title: str, prefixes: Sequence[str]) -> bool:
    '''True when the title starts with any disallowed namespace prefix.'''
    return any(title.startswith(prefix) for prefix in prefixes)


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    '''Yield consecutive slices of at most `size` items.'''
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def strip_namespace(title: str, prefixes: Sequence[str]) -> str:
    for prefix in prefixes:
        if title.lower().startswith(prefix.lower()):
            return title[len(prefix):]
    return title


def build_article_url(article_base_url: str, title: str) -> str:
    '''Article URL from the title, with spaces replaced by underscores.'''
    return f"{article_base_url}{quote(title.replace(' ', '_'), safe='')}"


def build_file_path_url(article_base_url: str, image_title: str, file_prefixes: Sequence[str]) -> str:
    '''Special:FilePath URL for an image title such as "File:Foo bar.jpg".'''
    name = strip_namespace(image_title, file_prefixes)
    return f"{article_base_url}Special:FilePath/{quote(name, safe='')}"


def category_output_path(config: WikiConfig, category: CategorySpec) -> Path:
    return Path(config.output_dir) / "categories" / f"{category.slug}.json"


def feed_output_path(config: WikiConfig, kind: FeedKind, run_date: date) -> Path:
    base = Path(config.output_dir)
    if kind == FeedKind.FEATURED:
        if config.featured_dated:
            return base / "featured" / f"{run_date.isoformat()}.json"
        return base / "featured" / "article.json"
    return base / "onthisday" / f"{run_date.isoformat()}.json"


def output_dirs(config: WikiConfig) -> list[Path]:
    base = Path(config.output_dir)
    return [base / "categories", base / "featured", base / "onthisday"]
