"""
ContactRecord Entity - a single row of the police contact directory.
No framework dependencies. Phone normalization and merge rules live here.
"""

import re
from dataclasses import dataclass
from typing import Optional

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_phone(phone: str) -> str:
    """Strip every non-digit character. normalize("+91 98-765 43210") == "919876543210"."""
    return _NON_DIGITS.sub("", phone or "")


@dataclass
class ContactRecord:
    """
    A directory contact keyed by its normalized phone number.

    Stored records always carry a bool is_scammer. An upsert input may set it
    to None to leave the stored flag untouched; serialization writes a bool.
    """

    name: str = ""
    designation: str = ""
    phone: str = ""
    is_scammer: Optional[bool] = False

    @property
    def normalized_phone(self) -> str:
        return normalize_phone(self.phone)

    @property
    def flagged(self) -> bool:
        return bool(self.is_scammer)

    def same_contact(self, other: "ContactRecord") -> bool:
        """Exact normalized-phone equality, the upsert key."""
        return self.normalized_phone == other.normalized_phone

    def matches_query(self, query: str) -> bool:
        """Substring match on normalized phones, the search rule."""
        return normalize_phone(query) in self.normalized_phone

    def merged_with(self, update: "ContactRecord") -> "ContactRecord":
        """
        Field-by-field overlay: fields present on `update` win, absent ones
        keep this record's value. Empty strings and None count as absent.
        """
        return ContactRecord(
            name=update.name or self.name,
            designation=update.designation or self.designation,
            phone=update.phone or self.phone,
            is_scammer=(
                update.is_scammer if update.is_scammer is not None else self.is_scammer
            ),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "designation": self.designation,
            "phone": self.phone,
            "isScammer": self.flagged,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ContactRecord":
        return cls(
            name=str(data.get("name") or ""),
            designation=str(data.get("designation") or ""),
            phone=str(data.get("phone") or ""),
            is_scammer=data.get("isScammer") is True,
        )
