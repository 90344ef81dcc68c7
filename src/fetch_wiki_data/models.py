"""Data models for the fetch_wiki_data pipeline."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class CategorySpec:
    """A remote category and the slug its collection file is named after."""
    title: str
    slug: str


@dataclass(frozen=True)
class MemberRef:
    """One category member as returned by list=categorymembers."""
    pageid: int
    title: str


@dataclass
class ArticleRecord:
    """Normalized article. `fetched_at` is kept in memory only."""
    pageid: int
    title: str
    description: str
    image: Optional[str]
    text: Optional[str]
    url: str
    last_modified: Optional[str]
    revision_id: Optional[int]
    fetched_at: datetime


@dataclass
class FeedPage:
    """A page linked from a daily feed entry."""
    key: str
    title: str
    description: str
    image: Optional[str]
    url: str


@dataclass
class FeaturedRecord:
    """Today's featured article."""
    date: str
    key: str
    title: str
    description: str
    extract: str
    image: Optional[str]
    url: str


@dataclass
class OnThisDayEvent:
    year: Optional[int]
    text: str
    pages: list[FeedPage] = field(default_factory=list)


@dataclass
class OnThisDayRecord:
    """Events that happened on the run's month/day in earlier years."""
    date: str
    events: list[OnThisDayEvent] = field(default_factory=list)


class FeedKind(str, Enum):
    FEATURED = "featured"
    ON_THIS_DAY = "onthisday"


class CategoryState(str, Enum):
    IDLE = "idle"
    ENUMERATING = "enumerating"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    WRITING = "writing"
    DONE = "done"
    ERRORED = "errored"


@dataclass
class CategoryOutcome:
    """Terminal result of one category run."""
    category: CategorySpec
    state: CategoryState = CategoryState.IDLE
    failed_in: Optional[CategoryState] = None
    member_count: int = 0
    article_count: int = 0
    dropped_count: int = 0
    path: Optional[Path] = None
    changed: Optional[bool] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state == CategoryState.DONE


@dataclass
class FeedOutcome:
    """Result of one daily feed run. `changed` is None when nothing was written."""
    kind: FeedKind
    run_date: date
    path: Optional[Path] = None
    changed: Optional[bool] = None
    error: Optional[str] = None


@dataclass
class RunSummary:
    categories: list[CategoryOutcome] = field(default_factory=list)
    feeds: list[FeedOutcome] = field(default_factory=list)

    @property
    def failed_categories(self) -> list[CategoryOutcome]:
        return [outcome for outcome in self.categories if not outcome.ok]
