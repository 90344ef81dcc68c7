"""CLI for fetching wiki categories and daily feeds to local JSON files."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from fetch_wiki_data.config import load_config
from fetch_wiki_data.fetch_wiki_data import fetch_wiki_data

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    try:
        config = load_config()
        summary = fetch_wiki_data(config)
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)

    for outcome in summary.failed_categories:
        logger.warning("Category %s failed: %s", outcome.category.slug, outcome.error)
    logger.info("All done.")


if __name__ == "__main__":
    main()
