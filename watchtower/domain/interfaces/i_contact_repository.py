"""
IContactRepository - Port: defines the local contact persistence contract.
The domain doesn't know the records live in a JSON file.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..entities.contact_record import ContactRecord


class IContactRepository(ABC):
    """Port for reading and writing ContactRecord data."""

    @abstractmethod
    async def exists_nonempty(self) -> bool:
        """True iff the backing store exists and holds any content."""
        pass

    @abstractmethod
    async def load_all(self) -> List[ContactRecord]:
        """All records in stored order. Unreadable data reads as empty."""
        pass

    @abstractmethod
    async def replace_all(self, records: Sequence[ContactRecord]) -> None:
        """Overwrite the whole store. Write failures propagate."""
        pass

    @abstractmethod
    async def upsert(
        self, record: ContactRecord, defaults: Optional[ContactRecord] = None
    ) -> ContactRecord:
        """
        Merge into the record with the same normalized phone, or append.
        defaults fill the empty fields of an appended record only.
        """
        pass

    @abstractmethod
    async def search(self, query: str) -> Optional[ContactRecord]:
        """First record whose normalized phone contains the normalized query."""
        pass
