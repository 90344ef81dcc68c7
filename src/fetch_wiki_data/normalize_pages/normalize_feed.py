"""Normalize REST feed payloads (featured article, on this day)."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fetch_wiki_data.helpers import build_article_url, build_file_path_url
from fetch_wiki_data.models import (
    FeaturedRecord,
    FeedPage,
    OnThisDayEvent,
    OnThisDayRecord,
)
from fetch_wiki_data.normalize_pages.normalize_article import (
    EnrichmentOptions,
    ImageLookup,
    clean_title,
    pick_description,
)

logger = logging.getLogger(__name__)


def _feed_title(page: dict) -> Optional[str]:
    titles = page.get("titles") or {}
    raw_title = titles.get("normalized") or page.get("normalizedtitle") or page.get("title")
    if isinstance(raw_title, str):
        raw_title = raw_title.replace("_", " ")
    return clean_title(raw_title)


def _feed_image(page: dict, options: EnrichmentOptions, image_lookup: Optional[ImageLookup]) -> Optional[str]:
    for key in ("thumbnail", "originalimage"):
        source = (page.get(key) or {}).get("source")
        if source:
            return source

    if image_lookup is None or page.get("pageid") is None:
        return None
    try:
        image_title = image_lookup(int(page["pageid"]))
    except Exception as e:
        logger.warning("Image lookup failed for feed page %s: %s", page.get("pageid"), e)
        return None
    if not image_title:
        return None
    return build_file_path_url(options.article_base_url, image_title, options.file_prefixes)


def normalize_feed_page(
    page: dict,
    options: EnrichmentOptions,
    image_lookup: Optional[ImageLookup] = None,
) -> Optional[FeedPage]:
    """Rename feed summary fields. Returns None when the page has no title."""
    title = _feed_title(page)
    if not title:
        return None

    titles = page.get("titles") or {}
    key = titles.get("canonical") or title.replace(" ", "_")
    url = ((page.get("content_urls") or {}).get("desktop") or {}).get("page")

    return FeedPage(
        key=key,
        title=title,
        description=pick_description(page, options.description_lines),
        image=_feed_image(page, options, image_lookup),
        url=url or build_article_url(options.article_base_url, title),
    )


def normalize_featured(
    payload: dict,
    run_date: date,
    options: EnrichmentOptions,
    image_lookup: Optional[ImageLookup] = None,
) -> Optional[FeaturedRecord]:
    """Pick the featured article ("tfa") out of the featured feed."""
    tfa = payload.get("tfa")
    if not tfa:
        logger.warning("Featured feed for %s has no featured article", run_date.isoformat())
        return None

    page = normalize_feed_page(tfa, options, image_lookup)
    if page is None:
        logger.warning("Featured article for %s has no usable title", run_date.isoformat())
        return None

    return FeaturedRecord(
        date=run_date.isoformat(),
        key=page.key,
        title=page.title,
        description=page.description,
        extract=(tfa.get("extract") or "").strip(),
        image=page.image,
        url=page.url,
    )


def normalize_on_this_day(payload: dict, run_date: date, options: EnrichmentOptions) -> OnThisDayRecord:
    """Keep each event's year, text and titled pages, in feed order."""
    events = []
    for raw_event in payload.get("events") or []:
        text = " ".join(str(raw_event.get("text") or "").split())
        if not text:
            continue

        year = raw_event.get("year")
        try:
            year = int(year) if year is not None else None
        except (TypeError, ValueError):
            year = None

        pages = [normalize_feed_page(page, options) for page in raw_event.get("pages") or []]
        events.append(OnThisDayEvent(year=year, text=text, pages=[p for p in pages if p is not None]))

    return OnThisDayRecord(date=run_date.isoformat(), events=events)
