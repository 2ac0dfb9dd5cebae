from .contact_record import ContactRecord, normalize_phone
from .crawl_session_state import (
    CrawlPhase,
    CrawlResult,
    CrawlSessionState,
    HiddenFieldSet,
    PostbackTarget,
)

__all__ = [
    "ContactRecord",
    "normalize_phone",
    "CrawlPhase",
    "CrawlResult",
    "CrawlSessionState",
    "HiddenFieldSet",
    "PostbackTarget",
]
