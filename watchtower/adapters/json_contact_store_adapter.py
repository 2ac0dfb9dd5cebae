"""
JsonContactStoreAdapter - Implements IContactRepository.

Keeps the scraped directory in one JSON file: an array of
{name, designation, phone, isScammer} objects. Reads are forgiving (a corrupt
file reads as "no data"); writes are atomic and fail loudly.
"""

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Union

import aiofiles
import aiofiles.os

from ..domain.entities.contact_record import ContactRecord, normalize_phone
from ..domain.interfaces.i_contact_repository import IContactRepository

logger = logging.getLogger(__name__)

CONTACTS_FILE_NAME = "wb_police_contacts.json"


class JsonContactStoreAdapter(IContactRepository):
    """
    File-backed contact store. replace_all and upsert share one lock, so the
    read-modify-write in upsert never interleaves with another writer on the
    same instance.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    async def exists_nonempty(self) -> bool:
        try:
            return (
                await aiofiles.os.path.isfile(self.path)
                and await aiofiles.os.path.getsize(self.path) > 0
            )
        except OSError:
            return False

    async def load_all(self) -> List[ContactRecord]:
        return await self._read()

    async def replace_all(self, records: Sequence[ContactRecord]) -> None:
        async with self._write_lock:
            await self._write(list(records))

    async def upsert(
        self, record: ContactRecord, defaults: Optional[ContactRecord] = None
    ) -> ContactRecord:
        async with self._write_lock:
            records = await self._read()
            for idx, existing in enumerate(records):
                if existing.same_contact(record):
                    merged = existing.merged_with(record)
                    records[idx] = merged
                    logger.info(f"[Store] Updated contact {merged.phone!r}")
                    break
            else:
                merged = defaults.merged_with(record) if defaults else record
                if merged.is_scammer is None:
                    merged = replace(merged, is_scammer=False)
                records.append(merged)
                logger.info(f"[Store] Added contact {merged.phone!r}")

            await self._write(records)
            return merged

    async def search(self, query: str) -> Optional[ContactRecord]:
        records = await self.load_all()
        logger.info(
            f"[Store] Searching {len(records)} contact(s) for {normalize_phone(query)!r}"
        )
        for record in records:
            if record.matches_query(query):
                return record
        return None

    # ── File I/O ──────────────────────────────────────────────────────────

    async def _read(self) -> List[ContactRecord]:
        if not await aiofiles.os.path.exists(self.path):
            logger.info(f"[Store] Contact file does not exist at {self.path}")
            return []

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                contents = await f.read()
            if not contents.strip():
                logger.info(f"[Store] Contact file {self.path} is empty")
                return []
            items = json.loads(contents)
            if not isinstance(items, list):
                raise ValueError(f"expected a JSON array, got {type(items).__name__}")
            records = [ContactRecord.from_dict(item) for item in items]
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"[Store] Error loading contacts from {self.path}: {e}")
            return []

        logger.debug(f"[Store] Loaded {len(records)} contact(s) from {self.path}")
        return records

    async def _write(self, records: List[ContactRecord]) -> None:
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        payload = json.dumps([r.to_dict() for r in records], ensure_ascii=False)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            async with aiofiles.open(fd, "w", encoding="utf-8", closefd=True) as f:
                await f.write(payload)
                await f.flush()
            await aiofiles.os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.info(f"[Store] Saved {len(records)} contact(s) to {self.path}")
