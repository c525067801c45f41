"""HTTP utilities for the furrymap client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def build_client(
    base_url: str,
    *,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the client whose cookie jar holds the session."""
    return httpx.AsyncClient(
        base_url=base_url,
        headers=_DEFAULT_HEADERS,
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    )


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    *,
    method: str = "GET",
    data: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> str:
    logger.debug("%s %s", method, url)
    resp = await client.request(method, url, data=data, headers=headers)
    resp.raise_for_status()
    return resp.text
