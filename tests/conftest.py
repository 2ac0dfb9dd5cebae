"""
Root conftest.py — shared fixtures and helpers for the entire test suite.

Provides:
- ContactRecord / CrawlResult factory helpers
- An HTML builder that renders a directory page the way the ASP.NET
  GridView does (contact table, pager links, hidden form state)
- Mock crawler / repository factories (for use-case tests)
"""

from typing import List, Optional, Sequence, Tuple
from unittest.mock import AsyncMock

import pytest
from bs4 import BeautifulSoup

from watchtower.domain.entities.contact_record import ContactRecord
from watchtower.domain.entities.crawl_session_state import CrawlPhase, CrawlResult

DIRECTORY_URL = "https://directory.test/wbp/Common/WBP_ContactList.aspx"
GRID_ID = "ctl00_ContentPlaceHolder1_grid_contactus"
GRID_TARGET = "ctl00$ContentPlaceHolder1$grid_contactus"


# ─────────────────────────────────────────────────────────────────────────────
# Domain object factories
# ─────────────────────────────────────────────────────────────────────────────


def make_record(
    name: str = "Officer-in-Charge, Bidhannagar PS",
    phone: str = "033-2337-0200",
    designation: Optional[str] = None,
    is_scammer: Optional[bool] = False,
) -> ContactRecord:
    """Create a ContactRecord with sensible test defaults."""
    return ContactRecord(
        name=name,
        designation=name if designation is None else designation,
        phone=phone,
        is_scammer=is_scammer,
    )


def make_crawl_result(
    records: Optional[List[ContactRecord]] = None,
    pages_fetched: int = 1,
    phase: CrawlPhase = CrawlPhase.DONE,
    error: Optional[str] = None,
) -> CrawlResult:
    return CrawlResult(
        records=list(records or []),
        pages_fetched=pages_fetched,
        phase=phase,
        error=error,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Directory page builder
# ─────────────────────────────────────────────────────────────────────────────


def postback_href(page: int, target: str = GRID_TARGET) -> str:
    """An href as the GridView pager renders it (quotes HTML-escaped)."""
    return f"javascript:__doPostBack(&#39;{target}&#39;,&#39;Page${page}&#39;)"


def make_directory_page(
    rows: Sequence[Tuple[str, str]] = (),
    page: int = 1,
    last_page: int = 1,
    viewstate: str = "VS1",
    with_form: bool = True,
    with_table: bool = True,
    pager_pages: Optional[Sequence[int]] = None,
) -> str:
    """
    Render one directory page.
    rows: (name, phone) pairs, one per data row.
    pager_pages: pages to link to; defaults to every page except the current one.
    """
    data_rows = "".join(
        f"<tr>"
        f'<td><span id="{GRID_ID}_ctl{i:02d}_Label1">{name}</span></td>'
        f'<td><span id="{GRID_ID}_ctl{i:02d}_Label3">{phone}</span></td>'
        f"</tr>"
        for i, (name, phone) in enumerate(rows, start=2)
    )

    if pager_pages is None:
        pager_pages = [p for p in range(1, last_page + 1) if p != page]
    pager_cells = "".join(
        f'<td><a href="{postback_href(p)}">{p}</a></td>' for p in pager_pages
    )
    pager_row = (
        f'<tr class="pager"><td colspan="2"><table><tr>'
        f"<td><span>{page}</span></td>{pager_cells}"
        f"</tr></table></td></tr>"
        if pager_cells
        else ""
    )

    table = (
        f'<table id="{GRID_ID}">'
        f"<tr><th>Name of Office/Establishment</th><th>Phone</th></tr>"
        f"{data_rows}{pager_row}"
        f"</table>"
        if with_table
        else "<p>No records.</p>"
    )

    hidden = (
        '<input type="hidden" name="__EVENTTARGET" id="__EVENTTARGET" value="" />'
        '<input type="hidden" name="__EVENTARGUMENT" id="__EVENTARGUMENT" value="" />'
        f'<input type="hidden" name="__VIEWSTATE" id="__VIEWSTATE" value="{viewstate}" />'
        '<input type="hidden" name="__VIEWSTATEGENERATOR" value="A1B2C3D4" />'
        f'<input type="hidden" name="__EVENTVALIDATION" value="EV-{viewstate}" />'
    )
    content = (
        f'<form method="post" action="./WBP_ContactList.aspx" id="aspnetForm">'
        f"{hidden}{table}</form>"
        if with_form
        else table
    )
    return f"<html><head><title>Contact List</title></head><body>{content}</body></html>"


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


# ─────────────────────────────────────────────────────────────────────────────
# Mock port fixtures (inject into use-case tests)
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_crawler():
    """AsyncMock for IDirectoryCrawler. Defaults to a one-page crawl of two contacts."""
    mock = AsyncMock()
    mock.crawl.return_value = make_crawl_result(
        records=[
            make_record("Bidhannagar PS", "033-2337-0200"),
            make_record("Salt Lake Traffic Guard", "033-2321-4455"),
        ]
    )
    return mock


@pytest.fixture
def mock_repository():
    """AsyncMock for IContactRepository."""
    mock = AsyncMock()
    mock.exists_nonempty.return_value = True
    mock.load_all.return_value = []
    mock.replace_all.return_value = None
    mock.upsert.side_effect = (
        lambda record, defaults=None: defaults.merged_with(record) if defaults else record
    )
    mock.search.return_value = None
    return mock


@pytest.fixture
def sample_record():
    """A single ready-to-use contact."""
    return make_record()
