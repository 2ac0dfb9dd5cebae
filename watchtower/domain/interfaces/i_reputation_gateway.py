"""
IReputationGateway - Port: remote URL reputation lookup.
Implementations call the Google Safe Browsing threat-match API.
"""

from abc import ABC, abstractmethod


class ReputationLookupError(Exception):
    """The reputation service could not answer."""


class IReputationGateway(ABC):
    """Port for checking whether a URL is on a threat list."""

    @abstractmethod
    async def is_flagged_unsafe(self, url: str) -> bool:
        """
        Returns True when the URL matches a known threat.
        Raises ReputationLookupError on any failure.
        """
        pass
