"""
ContactPageParser - extracts contact rows from one directory page.

The directory is an ASP.NET GridView. Each data row holds the office name in
a span ending in "Label1" (first cell) and the phone in a span ending in
"Label3" (second cell). The first row is the header.
"""

import logging
from typing import List

from bs4 import BeautifulSoup

from ..domain.entities.contact_record import ContactRecord

logger = logging.getLogger(__name__)

CONTACT_TABLE_SELECTOR = "#ctl00_ContentPlaceHolder1_grid_contactus"
NAME_SELECTOR = 'span[id$="Label1"]'
PHONE_SELECTOR = 'span[id$="Label3"]'


class ContactPageParser:
    def parse(self, document: BeautifulSoup) -> List[ContactRecord]:
        table = document.select_one(CONTACT_TABLE_SELECTOR)
        if table is None:
            logger.warning(f"[Parser] Contact table {CONTACT_TABLE_SELECTOR} not found")
            return []

        rows = table.select("tr")
        records: List[ContactRecord] = []
        for idx, row in enumerate(rows[1:], start=1):
            cells = row.select("td")
            if len(cells) < 2:
                logger.debug(f"[Parser] Row {idx} has {len(cells)} cell(s); skipping")
                continue

            name_el = cells[0].select_one(NAME_SELECTOR)
            phone_el = cells[1].select_one(PHONE_SELECTOR)
            name = name_el.get_text().strip() if name_el else ""
            phone = phone_el.get_text().strip() if phone_el else ""

            if not name and not phone:
                logger.debug(f"[Parser] Row {idx} has no name or phone; skipping")
                continue

            # The page has no separate designation column; the office name
            # doubles as the designation until one is identified.
            records.append(
                ContactRecord(name=name, designation=name, phone=phone, is_scammer=False)
            )

        logger.debug(f"[Parser] {len(records)} record(s) from {len(rows)} row(s)")
        return records
