"""
ContactDirectoryService - facade over the crawler and the local store.

refresh() is the only operation that touches the network. search() and
flag_as_scammer() work purely on the local store. An empty crawl never
overwrites the store, so a transient outage cannot wipe good data.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from ..domain.entities.contact_record import ContactRecord, normalize_phone
from ..domain.entities.crawl_session_state import CrawlPhase
from ..domain.interfaces.i_contact_repository import IContactRepository
from ..domain.interfaces.i_directory_crawler import IDirectoryCrawler

logger = logging.getLogger(__name__)

FLAGGED_NAME = "Flagged Number"
FLAGGED_DESIGNATION = "Scammer"


@dataclass
class RefreshResponse:
    updated: bool
    records_scraped: int
    pages_fetched: int
    phase: CrawlPhase
    error: Optional[str] = None

    @property
    def message(self) -> str:
        if self.updated and self.phase == CrawlPhase.DONE:
            return f"Directory updated: {self.records_scraped} contacts."
        if self.updated:
            return (
                f"Directory partially updated: {self.records_scraped} contacts "
                f"from {self.pages_fetched} page(s) ({self.phase.value})."
            )
        return "Could not update the directory, showing existing data."


class ContactDirectoryService:
    """
    Orchestrates refresh / search / flag for the UI layer.
    Dependencies injected via constructor.
    """

    def __init__(self, crawler: IDirectoryCrawler, repository: IContactRepository):
        self.crawler = crawler
        self.repository = repository
        self._refresh_lock = asyncio.Lock()

    async def refresh(self, cancel_event: Optional[asyncio.Event] = None) -> RefreshResponse:
        """
        Crawl the whole directory and replace the store with the result.
        Store write failures propagate; crawl failures do not.
        """
        async with self._refresh_lock:
            logger.info("[Directory] Refresh starting")
            result = await self.crawler.crawl(cancel_event=cancel_event)

            if not result.records:
                logger.warning(
                    f"[Directory] Crawl returned no contacts "
                    f"(phase={result.phase.value}, error={result.error!r}); "
                    "keeping existing data"
                )
                return RefreshResponse(
                    updated=False,
                    records_scraped=0,
                    pages_fetched=result.pages_fetched,
                    phase=result.phase,
                    error=result.error,
                )

            await self.repository.replace_all(result.records)
            logger.info(
                f"[Directory] Stored {len(result.records)} contacts from "
                f"{result.pages_fetched} page(s) | phase={result.phase.value}"
            )
            return RefreshResponse(
                updated=True,
                records_scraped=len(result.records),
                pages_fetched=result.pages_fetched,
                phase=result.phase,
                error=result.error,
            )

    async def ensure_initialized(self) -> Optional[RefreshResponse]:
        """Run the first crawl when there is no stored directory yet."""
        if await self.repository.exists_nonempty():
            logger.info("[Directory] Contact store present, skipping initial crawl")
            return None
        logger.info("[Directory] Contact store missing or empty, initializing")
        return await self.refresh()

    async def search(self, phone: str) -> Optional[ContactRecord]:
        if not normalize_phone(phone):
            return None
        return await self.repository.search(phone)

    async def flag_as_scammer(
        self, phone: str, known: Optional[ContactRecord] = None
    ) -> ContactRecord:
        phone = (phone or "").strip()
        if not normalize_phone(phone):
            raise ValueError("A phone number with at least one digit is required")

        # Empty labels leave stored ones untouched; defaults apply only on append.
        record = ContactRecord(
            name=known.name if known else "",
            designation=known.designation if known else "",
            phone=phone,
            is_scammer=True,
        )
        defaults = ContactRecord(name=FLAGGED_NAME, designation=FLAGGED_DESIGNATION)
        logger.info(f"[Directory] Flagging {phone!r} as scammer")
        return await self.repository.upsert(record, defaults=defaults)
