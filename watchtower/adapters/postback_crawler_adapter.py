"""
PostbackCrawlerAdapter - Implements IDirectoryCrawler.

Walks the WB Police contact directory, an ASP.NET page that pages its grid
through __doPostBack form submissions instead of plain links:

  1. GET the page, keep its Set-Cookie header and hidden form state.
  2. Find the link to page N+1 and replay it as a form POST carrying every
     hidden field plus __EVENTTARGET / __EVENTARGUMENT.
  3. Repeat until there is no link to the next page.

Any transport error or non-200 response stops the crawl; the records already
collected are returned, never discarded.
"""

import asyncio
import logging
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup

from ..domain.entities.contact_record import ContactRecord
from ..domain.entities.crawl_session_state import (
    CrawlPhase,
    CrawlResult,
    CrawlSessionState,
    PostbackTarget,
)
from ..domain.interfaces.i_directory_crawler import IDirectoryCrawler
from .contact_page_parser import ContactPageParser
from .form_state_extractor import FormStateExtractor
from .pagination_resolver import PaginationResolver

logger = logging.getLogger(__name__)

DIRECTORY_URL = "https://wbpolice.gov.in/wbp/Common/WBP_ContactList.aspx"
TIMEOUT_SECONDS = 30.0
PAGE_DELAY_SECONDS = 1.0
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,"
        "image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.9"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}


class PostbackCrawlerAdapter(IDirectoryCrawler):
    """
    Stateless between calls: every crawl() builds its own CrawlSessionState
    and its own httpx client, so one adapter can serve concurrent crawls.
    """

    def __init__(
        self,
        directory_url: str = DIRECTORY_URL,
        timeout_seconds: float = TIMEOUT_SECONDS,
        page_delay_seconds: float = PAGE_DELAY_SECONDS,
        form_extractor: Optional[FormStateExtractor] = None,
        page_parser: Optional[ContactPageParser] = None,
        pagination: Optional[PaginationResolver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.directory_url = directory_url
        self.timeout_seconds = timeout_seconds
        self.page_delay_seconds = page_delay_seconds
        self.form_extractor = form_extractor or FormStateExtractor()
        self.page_parser = page_parser or ContactPageParser()
        self.pagination = pagination or PaginationResolver()
        self._transport = transport

    async def crawl(self, cancel_event: Optional[asyncio.Event] = None) -> CrawlResult:
        state = CrawlSessionState()
        records: List[ContactRecord] = []
        logger.info(f"[Crawl] ── START ── {self.directory_url}")

        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            headers=DEFAULT_HEADERS,
            transport=self._transport,
        ) as client:
            document = None
            if not self._cancelled(cancel_event, state):
                document = await self._fetch_first_page(client, state)

            while document is not None:
                self._absorb_page(document, state, records)
                document = await self._advance(client, state, document, cancel_event)

        if not state.finished:
            state.phase = CrawlPhase.DONE

        logger.info(
            f"[Crawl] ── END ── phase={state.phase.value} | "
            f"pages={state.pages_fetched} | contacts={len(records)} | "
            f"error={state.error!r}"
        )
        return CrawlResult(
            records=records,
            pages_fetched=state.pages_fetched,
            phase=state.phase,
            error=state.error,
        )

    # ── Page exchanges ────────────────────────────────────────────────────

    async def _fetch_first_page(
        self, client: httpx.AsyncClient, state: CrawlSessionState
    ) -> Optional[BeautifulSoup]:
        state.phase = CrawlPhase.FETCHING_FIRST_PAGE
        try:
            response = await client.get(self.directory_url)
        except httpx.HTTPError as e:
            return self._transport_failed(state, 1, e)

        state.capture_cookie(response.headers.get("set-cookie"))
        if state.cookie:
            logger.info(f"[Crawl] Captured session cookie: {state.cookie}")
        return self._read_page(client, response, state, 1)

    async def _post_page(
        self,
        client: httpx.AsyncClient,
        state: CrawlSessionState,
        target: PostbackTarget,
    ) -> Optional[BeautifulSoup]:
        page = state.current_page + 1
        body = dict(state.hidden_fields)
        body["__EVENTTARGET"] = target.event_target
        body["__EVENTARGUMENT"] = target.event_argument

        headers = {
            "Referer": self.directory_url,
            "Content-Type": FORM_CONTENT_TYPE,
        }
        if state.cookie:
            headers["Cookie"] = state.cookie

        try:
            response = await client.post(self.directory_url, data=body, headers=headers)
        except httpx.HTTPError as e:
            return self._transport_failed(state, page, e)
        return self._read_page(client, response, state, page)

    def _read_page(
        self,
        client: httpx.AsyncClient,
        response: httpx.Response,
        state: CrawlSessionState,
        page: int,
    ) -> Optional[BeautifulSoup]:
        # Only the cookie captured from the first response is ever replayed.
        client.cookies.clear()

        if response.status_code != 200:
            logger.warning(
                f"[Crawl] Page {page} returned HTTP {response.status_code}; stopping"
            )
            state.fail(f"Page {page} returned HTTP {response.status_code}")
            return None
        return BeautifulSoup(response.text, "html.parser")

    def _transport_failed(
        self, state: CrawlSessionState, page: int, error: Exception
    ) -> None:
        logger.warning(f"[Crawl] Transport error on page {page}: {error!r}; stopping")
        state.fail(f"Transport error on page {page}: {error}")
        return None

    # ── State transitions ─────────────────────────────────────────────────

    def _absorb_page(
        self,
        document: BeautifulSoup,
        state: CrawlSessionState,
        records: List[ContactRecord],
    ) -> None:
        state.page_loaded(self.form_extractor.extract(document))
        page_records = self.page_parser.parse(document)
        records.extend(page_records)
        logger.info(
            f"[Crawl] Page {state.current_page}: {len(page_records)} contact(s) | "
            f"total={len(records)}"
        )

    async def _advance(
        self,
        client: httpx.AsyncClient,
        state: CrawlSessionState,
        document: BeautifulSoup,
        cancel_event: Optional[asyncio.Event],
    ) -> Optional[BeautifulSoup]:
        if self._cancelled(cancel_event, state):
            return None

        target = self.pagination.resolve(state.current_page, document)
        if target is None:
            state.phase = CrawlPhase.DONE
            return None

        if not state.hidden_fields:
            logger.warning(
                f"[Crawl] Page {state.current_page} carried no hidden form state; "
                "cannot replay the postback"
            )
            state.phase = CrawlPhase.DONE
            return None

        state.phase = CrawlPhase.ADVANCING_PAGE
        logger.info(
            f"[Crawl] Advancing to page {state.current_page + 1} | "
            f"__EVENTTARGET={target.event_target!r} | "
            f"__EVENTARGUMENT={target.event_argument!r}"
        )
        await asyncio.sleep(self.page_delay_seconds)

        if self._cancelled(cancel_event, state):
            return None
        return await self._post_page(client, state, target)

    @staticmethod
    def _cancelled(
        cancel_event: Optional[asyncio.Event], state: CrawlSessionState
    ) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"[Crawl] Cancelled after {state.pages_fetched} page(s)")
            state.phase = CrawlPhase.CANCELLED
            return True
        return False
