"""
SafeBrowsingAdapter - Implements IReputationGateway.
Checks a URL against Google Safe Browsing v4 threat lists (threatMatches:find).
"""

import logging

import httpx

from ..domain.interfaces.i_reputation_gateway import (
    IReputationGateway,
    ReputationLookupError,
)

logger = logging.getLogger(__name__)

SAFE_BROWSING_API_URL = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
CLIENT_ID = "watchtower-app"
CLIENT_VERSION = "1.0"
TIMEOUT_SECONDS = 10

THREAT_TYPES = [
    "MALWARE",
    "SOCIAL_ENGINEERING",
    "UNWANTED_SOFTWARE",
    "POTENTIALLY_HARMFUL_APPLICATION",
]


class SafeBrowsingAdapter(IReputationGateway):
    def __init__(self, api_key: str, timeout_seconds: float = TIMEOUT_SECONDS):
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    async def is_flagged_unsafe(self, url: str) -> bool:
        if not self.api_key:
            raise ReputationLookupError("Safe Browsing API key is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    SAFE_BROWSING_API_URL,
                    params={"key": self.api_key},
                    json=self._build_body(url),
                )
        except httpx.HTTPError as e:
            logger.error(f"[SafeBrowsing] Request failed for {url!r}: {e}")
            raise ReputationLookupError(f"Safe Browsing API request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"[SafeBrowsing] HTTP {response.status_code} for {url!r}")
            raise ReputationLookupError(
                f"Safe Browsing API failed: {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ReputationLookupError("Safe Browsing API returned invalid JSON") from e

        matches = data.get("matches") if isinstance(data, dict) else None
        flagged = bool(matches)
        logger.info(f"[SafeBrowsing] {url!r} → flagged={flagged}")
        return flagged

    def _build_body(self, url: str) -> dict:
        return {
            "client": {"clientId": CLIENT_ID, "clientVersion": CLIENT_VERSION},
            "threatInfo": {
                "threatTypes": THREAT_TYPES,
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": url}],
            },
        }
