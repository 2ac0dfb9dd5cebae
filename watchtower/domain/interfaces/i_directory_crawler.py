"""
IDirectoryCrawler - Port: retrieves every contact from the remote directory.
Implementations replay the site's postback form page by page.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from ..entities.crawl_session_state import CrawlResult


class IDirectoryCrawler(ABC):
    """Port for crawling the paginated contact directory."""

    @abstractmethod
    async def crawl(self, cancel_event: Optional[asyncio.Event] = None) -> CrawlResult:
        """
        Runs one full crawl. Never raises for network or parse trouble:
        a failed or cancelled crawl returns the records gathered so far.
        cancel_event is checked between pages, never mid-request.
        """
        pass
