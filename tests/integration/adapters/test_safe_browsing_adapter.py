"""
Tests for SafeBrowsingAdapter.
All HTTP calls mocked via httpx.AsyncClient patching.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from watchtower.adapters.safe_browsing_adapter import (
    CLIENT_ID,
    CLIENT_VERSION,
    SAFE_BROWSING_API_URL,
    SafeBrowsingAdapter,
)
from watchtower.domain.interfaces.i_reputation_gateway import ReputationLookupError

CLIENT_PATH = "watchtower.adapters.safe_browsing_adapter.httpx.AsyncClient"


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def make_sb_response(status_code: int = 200, payload=None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = {} if payload is None else payload
    return resp


def patch_httpx_client(response=None, error: Exception = None):
    """Patch httpx.AsyncClient so .post() returns `response` or raises `error`."""
    client_mock = AsyncMock()
    if error is not None:
        client_mock.post.side_effect = error
    else:
        client_mock.post.return_value = response
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=client_mock)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm, client_mock


# ─────────────────────────────────────────────────────────────────────────────
# Verdicts
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestVerdicts:
    async def test_matches_mean_unsafe(self):
        payload = {"matches": [{"threatType": "SOCIAL_ENGINEERING"}]}
        cm, _ = patch_httpx_client(make_sb_response(payload=payload))
        with patch(CLIENT_PATH, return_value=cm):
            flagged = await SafeBrowsingAdapter(api_key="sb-key").is_flagged_unsafe(
                "http://phish.test/login"
            )
        assert flagged is True

    async def test_empty_object_means_safe(self):
        cm, _ = patch_httpx_client(make_sb_response(payload={}))
        with patch(CLIENT_PATH, return_value=cm):
            flagged = await SafeBrowsingAdapter(api_key="sb-key").is_flagged_unsafe(
                "https://example.org"
            )
        assert flagged is False

    async def test_empty_matches_list_means_safe(self):
        cm, _ = patch_httpx_client(make_sb_response(payload={"matches": []}))
        with patch(CLIENT_PATH, return_value=cm):
            flagged = await SafeBrowsingAdapter(api_key="sb-key").is_flagged_unsafe(
                "https://example.org"
            )
        assert flagged is False


# ─────────────────────────────────────────────────────────────────────────────
# Request shape
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestRequestShape:
    async def test_posts_key_and_threat_query(self):
        cm, client_mock = patch_httpx_client(make_sb_response())
        with patch(CLIENT_PATH, return_value=cm):
            await SafeBrowsingAdapter(api_key="sb-key").is_flagged_unsafe("http://x.test")

        args, kwargs = client_mock.post.call_args
        assert args[0] == SAFE_BROWSING_API_URL
        assert kwargs["params"] == {"key": "sb-key"}
        body = kwargs["json"]
        assert body["client"] == {"clientId": CLIENT_ID, "clientVersion": CLIENT_VERSION}
        assert body["threatInfo"]["threatEntries"] == [{"url": "http://x.test"}]
        assert body["threatInfo"]["platformTypes"] == ["ANY_PLATFORM"]
        assert body["threatInfo"]["threatEntryTypes"] == ["URL"]
        assert "MALWARE" in body["threatInfo"]["threatTypes"]
        assert "SOCIAL_ENGINEERING" in body["threatInfo"]["threatTypes"]

    async def test_client_built_with_timeout(self):
        cm, _ = patch_httpx_client(make_sb_response())
        with patch(CLIENT_PATH, return_value=cm) as mock_cls:
            await SafeBrowsingAdapter(api_key="k", timeout_seconds=3).is_flagged_unsafe("u")
        mock_cls.assert_called_once_with(timeout=3)


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestErrors:
    async def test_missing_key_raises_without_http_call(self):
        with patch(CLIENT_PATH) as mock_cls:
            with pytest.raises(ReputationLookupError):
                await SafeBrowsingAdapter(api_key="").is_flagged_unsafe("http://x.test")
        mock_cls.assert_not_called()

    @pytest.mark.parametrize("status_code", [400, 403, 500, 503])
    async def test_non_200_raises(self, status_code):
        cm, _ = patch_httpx_client(make_sb_response(status_code=status_code))
        with patch(CLIENT_PATH, return_value=cm):
            with pytest.raises(ReputationLookupError, match=str(status_code)):
                await SafeBrowsingAdapter(api_key="k").is_flagged_unsafe("http://x.test")

    async def test_transport_error_raises(self):
        cm, _ = patch_httpx_client(error=httpx.ConnectTimeout("timed out"))
        with patch(CLIENT_PATH, return_value=cm):
            with pytest.raises(ReputationLookupError):
                await SafeBrowsingAdapter(api_key="k").is_flagged_unsafe("http://x.test")

    async def test_invalid_json_raises(self):
        resp = make_sb_response()
        resp.json.side_effect = ValueError("not json")
        cm, _ = patch_httpx_client(resp)
        with patch(CLIENT_PATH, return_value=cm):
            with pytest.raises(ReputationLookupError):
                await SafeBrowsingAdapter(api_key="k").is_flagged_unsafe("http://x.test")
