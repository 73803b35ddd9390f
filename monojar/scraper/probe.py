"""Availability probe: a cheap HEAD request before paying for a browser launch."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    )
}


async def is_reachable(url: str, timeout: float = 5.0) -> bool:
    """Return ``True`` if a HEAD request to *url* answers with a 2xx/3xx status.

    Redirects are not followed; a 3xx already proves the host is up.  Every
    transport failure (DNS, refused connection, timeout) yields ``False``;
    this function never raises for network reasons.
    """
    try:
        async with httpx.AsyncClient(
            headers=_DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=False,
        ) as client:
            response = await client.head(url)
    except httpx.HTTPError as exc:
        logger.warning("[PROBE] %s unreachable: %r", url, exc)
        return False

    if 200 <= response.status_code < 400:
        logger.debug("[PROBE] %s answered %d", url, response.status_code)
        return True

    logger.warning("[PROBE] %s answered %d", url, response.status_code)
    return False
