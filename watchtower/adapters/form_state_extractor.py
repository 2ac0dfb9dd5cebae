"""
FormStateExtractor - pulls the hidden postback state out of a page.
Pure parsing, no I/O.
"""

import logging

from bs4 import BeautifulSoup

from ..domain.entities.crawl_session_state import HiddenFieldSet

logger = logging.getLogger(__name__)


class FormStateExtractor:
    """Reads every <input type="hidden"> inside the document's first <form>."""

    def extract(self, document: BeautifulSoup) -> HiddenFieldSet:
        hidden_fields: HiddenFieldSet = {}
        form = document.find("form")
        if form is None:
            logger.warning("[FormState] No <form> element found; cannot replay postback")
            return hidden_fields

        for hidden_input in form.select('input[type="hidden"]'):
            name = hidden_input.get("name")
            value = hidden_input.get("value")
            if name is None or value is None:
                continue
            hidden_fields[name] = value

        logger.debug(f"[FormState] Extracted hidden fields: {sorted(hidden_fields)}")
        return hidden_fields
