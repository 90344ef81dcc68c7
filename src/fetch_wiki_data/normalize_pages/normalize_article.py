"""Normalize raw wiki page payloads into ArticleRecords."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from fetch_wiki_data.config import WikiConfig
from fetch_wiki_data.helpers import build_article_url, build_file_path_url
from fetch_wiki_data.models import ArticleRecord
from fetch_wiki_data.normalize_pages.errors import UnusableArticleError
from fetch_wiki_data.normalize_pages.wikitext import wikitext_to_plain

logger = logging.getLogger(__name__)

# Looks up the title of the first image used on a page
ImageLookup = Callable[[int], Optional[str]]


@dataclass(frozen=True)
class EnrichmentOptions:
    """Settings that shape how raw payloads become records."""
    article_base_url: str
    file_prefixes: tuple[str, ...]
    description_lines: int = 3
    use_wikitext: bool = True

    @classmethod
    def from_config(cls, config: WikiConfig) -> "EnrichmentOptions":
        return cls(
            article_base_url=config.article_base_url,
            file_prefixes=config.file_prefixes,
            description_lines=config.description_lines,
            use_wikitext=config.include_wikitext,
        )


def clean_title(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    title = " ".join(value.split())
    return title or None


def first_lines(text: Optional[str], count: int) -> str:
    """Join the first `count` non-empty lines of `text`."""
    if not text:
        return ""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return "\n".join(lines[:count])


def pick_description(raw: dict, description_lines: int) -> str:
    """Short description, else the head of the long extract, else empty."""
    short = raw.get("description")
    if isinstance(short, str) and short.strip():
        return short.strip()
    return first_lines(raw.get("extract"), description_lines)


def pick_image(
    raw: dict,
    options: EnrichmentOptions,
    image_lookup: Optional[ImageLookup] = None,
) -> Optional[str]:
    """
    Thumbnail, else the first image referenced by the page, else None.

    The page's images come from the detail response when present. Only when
    the detail response carries no `images` key at all is `image_lookup`
    asked; a failing lookup yields None.
    """
    thumbnail = (raw.get("thumbnail") or {}).get("source")
    if thumbnail:
        return thumbnail

    if "images" in raw:
        image_title = next((img.get("title") for img in raw["images"] or [] if img.get("title")), None)
    elif image_lookup is not None and raw.get("pageid") is not None:
        try:
            image_title = image_lookup(int(raw["pageid"]))
        except Exception as e:
            logger.warning("Image lookup failed for page %s: %s", raw.get("pageid"), e)
            image_title = None
    else:
        image_title = None

    if not image_title:
        return None
    return build_file_path_url(options.article_base_url, image_title, options.file_prefixes)


def pick_body(raw: dict, options: EnrichmentOptions) -> Optional[str]:
    """Plain text from wikitext when enabled and present, else the plain extract."""
    if options.use_wikitext:
        plain = wikitext_to_plain(raw.get("wikitext"))
        if plain:
            return plain
    extract = raw.get("extract")
    if isinstance(extract, str) and extract.strip():
        return extract.strip()
    return None


def wikitext_of(page: Optional[dict]) -> Optional[str]:
    """Pull main-slot content out of a prop=revisions page payload."""
    if not page:
        return None
    revisions = page.get("revisions") or []
    if not revisions:
        return None
    return ((revisions[0].get("slots") or {}).get("main") or {}).get("content")


def normalize_article(
    raw: dict,
    options: EnrichmentOptions,
    fetched_at: datetime,
    image_lookup: Optional[ImageLookup] = None,
) -> ArticleRecord:
    """
    Build an ArticleRecord from a batch-detail payload.

    Raises:
        UnusableArticleError: If the payload has no usable title or page id
    """
    title = clean_title(raw.get("title"))
    if not title:
        raise UnusableArticleError(f"Page {raw.get('pageid')} has no usable title")
    if raw.get("pageid") is None:
        raise UnusableArticleError(f"Page {title!r} has no page id")

    revision = (raw.get("revisions") or [{}])[0]

    return ArticleRecord(
        pageid=int(raw["pageid"]),
        title=title,
        description=pick_description(raw, options.description_lines),
        image=pick_image(raw, options, image_lookup),
        text=pick_body(raw, options),
        url=raw.get("fullurl") or build_article_url(options.article_base_url, title),
        last_modified=revision.get("timestamp"),
        revision_id=revision.get("revid"),
        fetched_at=fetched_at,
    )
