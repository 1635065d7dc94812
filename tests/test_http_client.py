"""
Tests for the shared HTTP client.

Run with:  pytest tests/test_http_client.py
"""
from __future__ import annotations

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from src.utils.http_client import get_json, post_json


def _client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_json_retries_network_errors():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json=[{"asset": "a"}])

    with patch("src.utils.http_client._client", _client_for(handler)), \
         patch("src.utils.http_client.asyncio.sleep", new=AsyncMock()) as mock_sleep:
        data = await get_json("https://example.test/positions", params={"user": "0xW"})

    assert data == [{"asset": "a"}]
    assert len(calls) == 3
    assert calls[0].url.params["user"] == "0xW"
    assert [c.args[0] for c in mock_sleep.await_args_list] == [5, 15]


@pytest.mark.asyncio
async def test_get_json_gives_up_after_max_retries():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with patch("src.utils.http_client._client", _client_for(handler)), \
         patch("src.utils.http_client.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(RuntimeError, match="All 3 attempts"):
            await get_json("https://example.test/positions")


@pytest.mark.asyncio
async def test_get_json_raises_on_error_status():
    handler = lambda request: httpx.Response(500, text="oops")

    with patch("src.utils.http_client._client", _client_for(handler)):
        with pytest.raises(httpx.HTTPStatusError):
            await get_json("https://example.test/positions")


@pytest.mark.asyncio
async def test_post_json_is_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429, json={"ok": False})

    with patch("src.utils.http_client._client", _client_for(handler)):
        with pytest.raises(httpx.HTTPStatusError):
            await post_json("https://example.test/sendMessage", {"text": "hi"})

    assert len(calls) == 1
