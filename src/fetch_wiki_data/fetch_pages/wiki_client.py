"""Client for the MediaWiki query API and the REST content feeds."""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any, Callable, Iterator, Sequence

import requests

from fetch_wiki_data.config import WikiConfig
from fetch_wiki_data.fetch_pages.errors import WikiRequestError
from fetch_wiki_data.helpers import chunked, is_disallowed_title
from fetch_wiki_data.models import FeedKind, MemberRef

logger = logging.getLogger(__name__)

DETAIL_PROPS = "extracts|pageimages|images|revisions|info|description"


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


class WikiClient:
    """
    Sequential, paced access to one wiki.

    Every request is followed by `config.request_delay` seconds of sleep,
    whether it succeeded or not.
    """

    def __init__(
        self,
        config: WikiConfig,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.user_agent})
        self._sleep = sleep

    def _get(self, url: str, params: dict | None = None, headers: dict | None = None) -> requests.Response:
        try:
            return self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.config.request_timeout,
            )
        finally:
            self._sleep(self.config.request_delay)

    def query(self, params: dict[str, Any]) -> dict:
        """
        Issue one action=query request and return the decoded JSON body.

        Raises:
            WikiRequestError: On a non-success status or an API error body
        """
        full_params = {"action": "query", "format": "json", "formatversion": "2", **params}
        response = self._get(self.config.site_api_url, params=full_params)
        if not _is_success(response):
            raise WikiRequestError(response.url, response.status_code)

        data = response.json()
        # maxlag, ratelimited and friends arrive as HTTP 200 with an error body
        if "error" in data:
            error = data["error"] if isinstance(data["error"], dict) else {}
            raise WikiRequestError(response.url, response.status_code, code=error.get("code") or "unknown")
        return data

    def enumerate_category_members(self, category_title: str) -> Iterator[MemberRef]:
        """
        Walk list=categorymembers for one category, following continuation.

        Each call starts a fresh walk. Members with a disallowed title prefix
        and repeated page ids are skipped.
        """
        params: dict[str, Any] = {
            "list": "categorymembers",
            "cmtitle": f"{self.config.category_prefix}{category_title}",
            "cmlimit": self.config.page_size,
        }
        seen: set[int] = set()

        while True:
            data = self.query(params)

            for member in data.get("query", {}).get("categorymembers", []):
                pageid = member.get("pageid")
                title = member.get("title")
                if pageid is None or not title:
                    continue
                if is_disallowed_title(title, self.config.disallowed_prefixes):
                    logger.debug("Skipping disallowed member: %s", title)
                    continue
                if pageid in seen:
                    continue
                seen.add(pageid)
                yield MemberRef(pageid=int(pageid), title=title)

            continuation = data.get("continue")
            if not continuation:
                return
            params = {**params, **continuation}

    def fetch_article_batch(self, pageids: Sequence[int]) -> dict[int, dict]:
        """Fetch extract, thumbnail, images, revision and URL details by page id."""
        params = {
            "prop": DETAIL_PROPS,
            "exlimit": "max",
            "explaintext": 1,
            "piprop": "thumbnail",
            "pithumbsize": self.config.thumbnail_size,
            "inprop": "url",
            "rvprop": "timestamp|ids",
        }
        return self._fetch_pages_in_batches(pageids, params)

    def fetch_wikitext_batch(self, pageids: Sequence[int]) -> dict[int, dict]:
        """Fetch the current wikitext of each page."""
        params = {
            "prop": "revisions",
            "rvprop": "content|timestamp",
            "rvslots": "main",
        }
        return self._fetch_pages_in_batches(pageids, params)

    def _fetch_pages_in_batches(self, pageids: Sequence[int], params: dict) -> dict[int, dict]:
        pages: dict[int, dict] = {}
        for batch in chunked(list(pageids), self.config.batch_size):
            data = self.query({**params, "pageids": "|".join(str(pid) for pid in batch)})
            for page in data.get("query", {}).get("pages", []):
                if page.get("missing") or page.get("invalid") or page.get("pageid") is None:
                    continue
                pages[int(page["pageid"])] = page
        return pages

    def fetch_first_image(self, pageid: int) -> str | None:
        """Return the title of the first image used on a page, if any."""
        data = self.query({"prop": "images", "pageids": str(pageid), "imlimit": 1})
        for page in data.get("query", {}).get("pages", []):
            for image in page.get("images") or []:
                if image.get("title"):
                    return image["title"]
        return None

    def feed_url(self, kind: FeedKind, day: date) -> str:
        if kind == FeedKind.FEATURED:
            return f"{self.config.rest_base_url}/feed/featured/{day.year:04d}/{day.month:02d}/{day.day:02d}"
        return f"{self.config.rest_base_url}/feed/onthisday/events/{day.month:02d}/{day.day:02d}"

    def fetch_daily_feed(self, kind: FeedKind, day: date) -> dict | None:
        """Fetch a date-scoped REST feed. Returns None on any failure."""
        url = self.feed_url(kind, day)
        try:
            response = self._get(url, headers={"Accept": "application/json"})
        except requests.RequestException as e:
            logger.warning("%s feed request failed: %s", kind.value, e)
            return None

        if not _is_success(response):
            logger.warning("%s feed fetch failed: HTTP %s for %s", kind.value, response.status_code, url)
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s feed returned invalid JSON: %s", kind.value, e)
            return None
