"""Fetch, normalize and persist one category collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from common.local_io import write_json_if_changed
from common.serialization import serialize_dataclass
from fetch_wiki_data.config import WikiConfig
from fetch_wiki_data.fetch_pages.errors import MissingPageDetailsError
from fetch_wiki_data.fetch_pages.wiki_client import WikiClient
from fetch_wiki_data.helpers import category_output_path, is_disallowed_title
from fetch_wiki_data.models import (
    ArticleRecord,
    CategoryOutcome,
    CategorySpec,
    CategoryState,
)
from fetch_wiki_data.normalize_pages.errors import UnusableArticleError
from fetch_wiki_data.normalize_pages.normalize_article import (
    EnrichmentOptions,
    normalize_article,
    wikitext_of,
)

logger = logging.getLogger(__name__)

# Left out of artifacts so unchanged upstream data gives byte-identical files
ARTICLE_EXCLUDED_FIELDS = frozenset({"fetched_at"})


def serialize_article(record: ArticleRecord) -> dict:
    return serialize_dataclass(record, exclude=ARTICLE_EXCLUDED_FIELDS)


def _fetch_wikitext(client: WikiClient, pageids: list[int], category: CategorySpec) -> dict[int, dict]:
    """Wikitext enrichment pass. A failure leaves bodies on the extract fallback."""
    logger.info("  fetching wikitext...")
    try:
        return client.fetch_wikitext_batch(pageids)
    except Exception as e:
        logger.warning("Wikitext pass failed for %s, using extracts: %s", category.slug, e)
        return {}


def build_collection(
    members,
    details: dict[int, dict],
    wikitext_pages: dict[int, dict],
    client: WikiClient,
    config: WikiConfig,
    fetched_at: datetime,
) -> tuple[list[ArticleRecord], int]:
    """
    Normalize members in enumeration order.

    Returns:
        Tuple of (records, number of members dropped)
    """
    options = EnrichmentOptions.from_config(config)
    image_lookup = client.fetch_first_image if config.image_lookup else None
    records: list[ArticleRecord] = []
    dropped = 0

    for member in members:
        raw = details.get(member.pageid)
        if raw is None:
            logger.warning("No details returned for page %s (%s), dropping", member.pageid, member.title)
            dropped += 1
            continue

        if member.pageid in wikitext_pages:
            raw = {**raw, "wikitext": wikitext_of(wikitext_pages[member.pageid])}

        try:
            record = normalize_article(raw, options, fetched_at, image_lookup)
        except UnusableArticleError as e:
            logger.warning("Dropping unusable page: %s", e)
            dropped += 1
            continue

        if is_disallowed_title(record.title, config.disallowed_prefixes):
            logger.warning("Dropping disallowed page: %s", record.title)
            dropped += 1
            continue

        records.append(record)

    return records, dropped


def run_category(
    category: CategorySpec,
    client: WikiClient,
    config: WikiConfig,
    now: datetime | None = None,
) -> CategoryOutcome:
    """
    Run one category through enumerate, fetch, normalize and write.

    Never raises: any failure ends in CategoryState.ERRORED with the failing
    step recorded in `failed_in`, and the previous artifact is left untouched.
    """
    outcome = CategoryOutcome(category=category)
    fetched_at = now or datetime.now(timezone.utc)

    try:
        outcome.state = CategoryState.ENUMERATING
        members = list(client.enumerate_category_members(category.title))
        outcome.member_count = len(members)
        logger.info("  members: %d", len(members))

        if not members:
            logger.warning("  No members found for %s, skipping.", category.slug)
            outcome.state = CategoryState.DONE
            return outcome

        outcome.state = CategoryState.FETCHING
        pageids = [member.pageid for member in members]
        details = client.fetch_article_batch(pageids)
        if not details:
            # Never replace a saved collection with an empty one
            raise MissingPageDetailsError(f"No details returned for any of {len(pageids)} members")
        wikitext_pages = _fetch_wikitext(client, pageids, category) if config.include_wikitext else {}

        outcome.state = CategoryState.NORMALIZING
        records, dropped = build_collection(members, details, wikitext_pages, client, config, fetched_at)
        outcome.article_count = len(records)
        outcome.dropped_count = dropped

        outcome.state = CategoryState.WRITING
        result = write_json_if_changed(
            category_output_path(config, category),
            [serialize_article(record) for record in records],
        )
        outcome.path = result.path
        outcome.changed = result.changed
        outcome.state = CategoryState.DONE
        logger.info(
            "  saved: %s (%d articles, %d dropped, changed: %s)",
            result.path,
            len(records),
            dropped,
            result.changed,
        )
    except Exception as e:
        outcome.failed_in = outcome.state
        outcome.state = CategoryState.ERRORED
        outcome.error = str(e)
        logger.error(
            "Error processing category %s (%s) while %s: %s",
            category.slug,
            category.title,
            outcome.failed_in.value,
            e,
        )

    return outcome
