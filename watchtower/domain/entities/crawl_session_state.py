"""
Crawl state entities - the explicit state carried through one directory crawl.

A CrawlSessionState is created per crawl and discarded when it ends; it is
never stored on the crawler itself, so independent crawls do not share a
cookie or hidden-field set.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .contact_record import ContactRecord

HiddenFieldSet = Dict[str, str]


class CrawlPhase(str, Enum):
    IDLE = "idle"
    FETCHING_FIRST_PAGE = "fetching_first_page"
    PAGE_READY = "page_ready"
    ADVANCING_PAGE = "advancing_page"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_PHASES = frozenset({CrawlPhase.DONE, CrawlPhase.FAILED, CrawlPhase.CANCELLED})


@dataclass(frozen=True)
class PostbackTarget:
    """The (__EVENTTARGET, __EVENTARGUMENT) pair for one page transition."""

    event_target: str
    event_argument: str


@dataclass
class CrawlSessionState:
    cookie: Optional[str] = None
    current_page: int = 1
    hidden_fields: HiddenFieldSet = field(default_factory=dict)
    phase: CrawlPhase = CrawlPhase.IDLE
    pages_fetched: int = 0
    error: Optional[str] = None

    def capture_cookie(self, set_cookie: Optional[str]) -> None:
        """Only the first captured cookie is kept for the whole crawl."""
        if self.cookie is None and set_cookie:
            self.cookie = set_cookie

    def page_loaded(self, hidden_fields: HiddenFieldSet) -> None:
        """Replace the hidden-field set wholesale; stale values break the next postback."""
        if self.pages_fetched > 0:
            self.current_page += 1
        self.pages_fetched += 1
        self.hidden_fields = dict(hidden_fields)
        self.phase = CrawlPhase.PAGE_READY

    def fail(self, error: str) -> None:
        self.phase = CrawlPhase.FAILED
        self.error = error

    @property
    def finished(self) -> bool:
        return self.phase in TERMINAL_PHASES


@dataclass
class CrawlResult:
    """Outcome of one crawl. Records keep page-then-row order."""

    records: List[ContactRecord] = field(default_factory=list)
    pages_fetched: int = 0
    phase: CrawlPhase = CrawlPhase.DONE
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.phase == CrawlPhase.DONE

    @property
    def is_partial(self) -> bool:
        return not self.success and bool(self.records)
