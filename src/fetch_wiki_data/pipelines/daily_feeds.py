"""Fetch, normalize and persist the featured article and on-this-day feeds."""

from __future__ import annotations

import logging
from datetime import date

from common.local_io import write_json_if_changed
from common.serialization import serialize_dataclass
from fetch_wiki_data.config import WikiConfig
from fetch_wiki_data.fetch_pages.wiki_client import WikiClient
from fetch_wiki_data.helpers import feed_output_path
from fetch_wiki_data.models import FeedKind, FeedOutcome
from fetch_wiki_data.normalize_pages.normalize_article import EnrichmentOptions
from fetch_wiki_data.normalize_pages.normalize_feed import (
    normalize_featured,
    normalize_on_this_day,
)

logger = logging.getLogger(__name__)


def run_daily_feed(kind: FeedKind, client: WikiClient, config: WikiConfig, run_date: date) -> FeedOutcome:
    """Run one feed. A missing payload is a no-op; errors are logged, not raised."""
    outcome = FeedOutcome(kind=kind, run_date=run_date)
    options = EnrichmentOptions.from_config(config)

    try:
        payload = client.fetch_daily_feed(kind, run_date)
        if payload is None:
            logger.warning("%s not updated", kind.value)
            return outcome

        if kind == FeedKind.FEATURED:
            image_lookup = client.fetch_first_image if config.image_lookup else None
            record = normalize_featured(payload, run_date, options, image_lookup)
        else:
            record = normalize_on_this_day(payload, run_date, options)

        if record is None:
            logger.warning("%s not updated", kind.value)
            return outcome

        result = write_json_if_changed(feed_output_path(config, kind, run_date), serialize_dataclass(record))
        outcome.path = result.path
        outcome.changed = result.changed
        logger.info("%s saved: %s (changed: %s)", kind.value, result.path, result.changed)
    except Exception as e:
        outcome.error = str(e)
        logger.error("%s error: %s", kind.value, e)

    return outcome


def run_daily_feeds(client: WikiClient, config: WikiConfig, run_date: date) -> list[FeedOutcome]:
    return [run_daily_feed(kind, client, config, run_date) for kind in (FeedKind.FEATURED, FeedKind.ON_THIS_DAY)]
