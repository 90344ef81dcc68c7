"""Shared fixtures: a fake requests session that serves canned wiki responses."""

import pytest

from fetch_wiki_data.config import WikiConfig
from fetch_wiki_data.fetch_pages.wiki_client import WikiClient
from fetch_wiki_data.models import CategorySpec

API_URL = "https://ar.wikipedia.org/w/api.php"


class FakeResponse:
    def __init__(self, payload=None, status_code=200, url=API_URL):
        self._payload = payload
        self.status_code = status_code
        self.url = url

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeWikiSession:
    """Routes Session.get calls to canned MediaWiki and REST feed payloads."""

    def __init__(self):
        self.headers = {}
        self.calls = []
        # cmtitle -> list of continuation pages, each a list of members
        self.category_pages = {}
        self.failing_categories = set()
        # list or prop value -> MediaWiki error code, served with HTTP 200
        self.api_errors = {}
        self.pages = {}
        self.wikitext = {}
        self.images = {}
        # url suffix -> payload
        self.feeds = {}

    def get(self, url, params=None, headers=None, timeout=None):
        params = dict(params or {})
        self.calls.append((url, params))

        if "/feed/" in url:
            for suffix, payload in self.feeds.items():
                if url.endswith(suffix):
                    return FakeResponse(payload, url=url)
            return FakeResponse(None, status_code=404, url=url)

        error_code = self.api_errors.get(params.get("list") or params.get("prop"))
        if error_code:
            return FakeResponse({"error": {"code": error_code, "info": "try again later"}, "servedby": "mw1"})

        if params.get("list") == "categorymembers":
            return self._category_members(params)

        pageids = [int(pid) for pid in params["pageids"].split("|")]
        if params.get("prop") == "images":
            pages = [
                {"pageid": pid, "images": [{"title": title} for title in self.images.get(pid, [])]}
                for pid in pageids
            ]
        elif params.get("prop") == "revisions":
            pages = [
                {
                    "pageid": pid,
                    "revisions": [{"timestamp": "2024-01-01T00:00:00Z", "slots": {"main": {"content": self.wikitext[pid]}}}],
                }
                for pid in pageids
                if pid in self.wikitext
            ]
        else:
            pages = [self.pages.get(pid, {"pageid": pid, "missing": True}) for pid in pageids]

        return FakeResponse({"batchcomplete": True, "query": {"pages": pages}})

    def _category_members(self, params):
        title = params["cmtitle"]
        if title in self.failing_categories:
            return FakeResponse(None, status_code=503, url=f"{API_URL}?cmtitle={title}")

        chunks = self.category_pages.get(title, [[]])
        index = int(params.get("cmcontinue", 0))
        body = {"batchcomplete": True, "query": {"categorymembers": chunks[index]}}
        if index + 1 < len(chunks):
            body["continue"] = {"cmcontinue": str(index + 1), "continue": "-||"}
        return FakeResponse(body)

    def calls_with(self, **expected):
        return [params for _, params in self.calls if all(params.get(k) == v for k, v in expected.items())]


@pytest.fixture
def response_factory():
    return FakeResponse


@pytest.fixture
def fake_session():
    return FakeWikiSession()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def wiki_config(tmp_path):
    return WikiConfig(
        output_dir=str(tmp_path / "wikipedia"),
        categories=(CategorySpec(title="علوم", slug="Science"),),
        request_delay=0.25,
        category_delay=0.3,
    )


@pytest.fixture
def client(wiki_config, fake_session, sleeps):
    return WikiClient(wiki_config, session=fake_session, sleep=sleeps.append)


@pytest.fixture
def make_page():
    def _make_page(pageid, title, **overrides):
        page = {
            "pageid": pageid,
            "title": title,
            "extract": f"{title} first line.\n\n{title} second line.\n{title} third line.\n{title} fourth line.",
            "thumbnail": {"source": f"https://upload.wikimedia.org/thumb/{pageid}.jpg"},
            "images": [],
            "revisions": [{"revid": 1000 + pageid, "parentid": 999, "timestamp": "2024-02-01T10:00:00Z"}],
            "fullurl": f"https://ar.wikipedia.org/wiki/page_{pageid}",
        }
        page.update(overrides)
        return page

    return _make_page


@pytest.fixture
def make_member():
    def _make_member(pageid, title):
        return {"pageid": pageid, "ns": 0, "title": title}

    return _make_member
