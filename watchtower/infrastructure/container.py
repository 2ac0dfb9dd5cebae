"""
Dependency Injection Container.
Wires all adapters to their interfaces and composes the directory service.
This is the ONLY place that knows about concrete implementations.
"""

from .config import Config
from ..adapters.json_contact_store_adapter import JsonContactStoreAdapter
from ..adapters.postback_crawler_adapter import PostbackCrawlerAdapter
from ..adapters.safe_browsing_adapter import SafeBrowsingAdapter
from ..use_cases.contact_directory_service import ContactDirectoryService


class Container:
    """
    Composes the full application object graph.
    Swap any adapter by changing a single line here.
    """

    def __init__(self, config: Config):
        self.config = config

        # ── Adapters (Ports & Adapters layer) ─────────────────────────────
        self.repository = JsonContactStoreAdapter(path=config.contacts_file)
        self.crawler = PostbackCrawlerAdapter(
            directory_url=config.directory_url,
            timeout_seconds=config.request_timeout_seconds,
        )
        self.reputation = SafeBrowsingAdapter(api_key=config.safe_browsing_api_key)

        # ── Use Cases (Application layer) ──────────────────────────────────
        self.directory_service = ContactDirectoryService(
            crawler=self.crawler,
            repository=self.repository,
        )
