"""
PaginationResolver - finds the postback that advances to the next page.

Only a link to exactly current_page + 1 counts. A missing link, or one whose
href is not a two-argument __doPostBack call, ends the crawl.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from ..domain.entities.crawl_session_state import PostbackTarget

logger = logging.getLogger(__name__)

POSTBACK_ANCHOR_SELECTOR = "a[href*='__doPostBack']"
POSTBACK_PREFIX = "javascript:__doPostBack"
_PAGE_ARG_RE = re.compile(r"Page\$(\d+)")
_POSTBACK_CALL_RE = re.compile(r"__doPostBack\('([^']*)','([^']*)'\)")


class PaginationResolver:
    def resolve(self, current_page: int, document: BeautifulSoup) -> Optional[PostbackTarget]:
        wanted = current_page + 1
        href = self._find_page_href(wanted, document)
        if href is None:
            logger.info(f"[Pagination] No link to page {wanted}; end of directory")
            return None

        if not href.startswith(POSTBACK_PREFIX):
            logger.warning(f"[Pagination] Link to page {wanted} is not a postback: {href!r}")
            return None

        match = _POSTBACK_CALL_RE.search(href)
        if not match:
            logger.warning(f"[Pagination] Could not parse postback from {href!r}")
            return None

        return PostbackTarget(event_target=match.group(1), event_argument=match.group(2))

    def _find_page_href(self, page: int, document: BeautifulSoup) -> Optional[str]:
        for anchor in document.select(POSTBACK_ANCHOR_SELECTOR):
            href = anchor.get("href", "")
            arg = _PAGE_ARG_RE.search(href)
            if arg and int(arg.group(1)) == page:
                return href
        return None
