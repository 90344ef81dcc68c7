"""Run every configured category, then the daily feeds."""

import logging
import time
from datetime import datetime, timezone
from typing import Callable

from common.cli_helpers import utc_today
from fetch_wiki_data.config import WikiConfig
from fetch_wiki_data.fetch_pages.wiki_client import WikiClient
from fetch_wiki_data.helpers import output_dirs
from fetch_wiki_data.models import RunSummary
from fetch_wiki_data.pipelines.category_pipeline import run_category
from fetch_wiki_data.pipelines.daily_feeds import run_daily_feeds

logger = logging.getLogger(__name__)


def prepare_output_dirs(config: WikiConfig) -> None:
    """Create the output tree. Errors here are fatal to the run."""
    for directory in output_dirs(config):
        directory.mkdir(parents=True, exist_ok=True)


def fetch_wiki_data(
    config: WikiConfig,
    client: WikiClient | None = None,
    now: datetime | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    """Fetch all categories sequentially, then the featured and on-this-day feeds."""
    now = now or datetime.now(timezone.utc)
    logger.info("Start fetching Wikipedia data for %d categories", len(config.categories))

    prepare_output_dirs(config)
    client = client or WikiClient(config, sleep=sleep)

    summary = RunSummary()
    for category in config.categories:
        logger.info("--- Processing category: %s -> %s.json", category.title, category.slug)
        summary.categories.append(run_category(category, client, config, now))
        sleep(config.category_delay)

    summary.feeds = run_daily_feeds(client, config, utc_today(now))

    logger.info(
        "Finished: %d/%d categories succeeded, %d feeds written",
        len(summary.categories) - len(summary.failed_categories),
        len(summary.categories),
        sum(1 for feed in summary.feeds if feed.changed is True),
    )
    return summary
