"""
Shared async HTTP client with timeouts, and retry logic for reads.
"""
from __future__ import annotations

import asyncio
import logging

import httpx

log = logging.getLogger(__name__)

# Default timeouts (seconds)
_CONNECT_TIMEOUT = 10.0
_READ_TIMEOUT = 15.0

# GET retry schedule: one pause (seconds) before each extra attempt
_RETRY_DELAYS = (5, 15)


def _build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(connect=_CONNECT_TIMEOUT, read=_READ_TIMEOUT, write=10.0, pool=5.0),
        follow_redirects=True,
        headers={"User-Agent": "polymarket-wallet-alerts/1.0"},
    )


# Module-level shared client (initialised lazily per async context)
_client: httpx.AsyncClient | None = None


async def get_client() -> httpx.AsyncClient:
    global _client
    if _client is None or _client.is_closed:
        _client = _build_client()
    return _client


async def close_client() -> None:
    global _client
    if _client and not _client.is_closed:
        await _client.aclose()
        _client = None


async def get_json(url: str, params: dict | None = None) -> dict | list:
    """
    GET *url* and return the decoded JSON body.

    Timeouts and network errors are retried on the _RETRY_DELAYS schedule,
    then surface as RuntimeError. A non-2xx status raises
    httpx.HTTPStatusError straight away, and a non-JSON body ValueError.
    """
    client = await get_client()
    attempts = len(_RETRY_DELAYS) + 1

    for attempt, delay in enumerate((*_RETRY_DELAYS, None), start=1):
        try:
            response = await client.get(url, params=params)
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            if delay is None:
                raise RuntimeError(f"All {attempts} attempts to GET {url} failed") from exc
            log.warning("GET %s failed (%d/%d): %s — next try in %ds", url, attempt, attempts, exc, delay)
            await asyncio.sleep(delay)
            continue

        response.raise_for_status()
        return response.json()


async def post_json(url: str, payload: dict) -> dict:
    """
    POST a JSON payload once and return the parsed JSON response.

    Sends are not retried; the caller decides what a failure means.
    """
    client = await get_client()
    response = await client.post(url, json=payload)
    response.raise_for_status()
    return response.json()
