# docs_downloader/crawler/fetcher.py
"""
Fetcher module: HTTP GET/HEAD with a fixed browser-like header set, timeouts,
redirect following and bounded retry with linear backoff.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Final, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from docs_downloader.config import DownloadOptions
from docs_downloader.crawler.models import PageData, ProbeResponse
from docs_downloader.logger import logger

BROWSER_HEADERS: Final[Dict[str, str]] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,"
        "image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Sec-Ch-Ua": '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"Windows"',
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Upgrade-Insecure-Requests": "1",
}

PROBE_BYTES: Final[int] = 1024


def _mime(headers) -> str:
    return headers.get("Content-Type", "").lower()


class Fetcher:
    """Handles HTTP requests of the crawler on a shared session."""

    def __init__(self, session: ClientSession, options: DownloadOptions) -> None:
        self.session = session
        self.options = options

    async def fetch(self, url: str) -> Optional[PageData]:
        """
        Fetch a page for crawling.

        Statuses outside 200-399, connection errors and timeouts are retried
        ``retry_times`` times in total with ``attempt * retry_delay`` pauses.
        Returns None once every attempt failed.
        """
        timeout = ClientTimeout(total=self.options.timeout)
        retries = self.options.retry_times
        for attempt in range(1, retries + 1):
            try:
                async with self.session.get(
                    url,
                    timeout=timeout,
                    max_redirects=self.options.max_redirects,
                ) as resp:
                    if not 200 <= resp.status < 400:
                        raise ClientError(f"unexpected status {resp.status}")
                    text = await resp.text(errors="replace")
                    return PageData(url, text, _mime(resp.headers), resp.status)
            except (ClientError, asyncio.TimeoutError) as exc:
                reason = str(exc) or type(exc).__name__
                if attempt == retries:
                    logger.warning("Failed to fetch %s after %d attempts: %s", url, retries, reason)
                    return None
                logger.warning("Attempt %d failed for %s: %s. Retrying...", attempt, url, reason)
                await asyncio.sleep(self.options.retry_delay * attempt)
        return None

    async def head(self, url: str) -> ProbeResponse:
        """Single HEAD request, no retry; network errors propagate."""
        async with self.session.head(
            url,
            timeout=ClientTimeout(total=self.options.probe_timeout),
            allow_redirects=True,
            max_redirects=self.options.max_redirects,
        ) as resp:
            return ProbeResponse(url, resp.status, _mime(resp.headers))

    async def get_range(self, url: str, limit: int = PROBE_BYTES) -> ProbeResponse:
        """GET asking for the first *limit* bytes only; reads no more than that."""
        async with self.session.get(
            url,
            headers={"Range": f"bytes=0-{limit - 1}"},
            timeout=ClientTimeout(total=self.options.probe_timeout),
            max_redirects=self.options.max_redirects,
        ) as resp:
            raw = await resp.content.read(limit)
            # a 1 KB prefix may cut a multi-byte character
            return ProbeResponse(
                url, resp.status, _mime(resp.headers), raw.decode("utf-8", errors="replace")
            )

    async def fetch_text(self, url: str) -> PageData:
        """Plain GET with the markdown timeout; raises ClientResponseError on non-2xx."""
        async with self.session.get(
            url,
            timeout=ClientTimeout(total=self.options.markdown_timeout),
            max_redirects=self.options.max_redirects,
        ) as resp:
            resp.raise_for_status()
            text = await resp.text(errors="replace")
            return PageData(url, text, _mime(resp.headers), resp.status)


def create_session(options: DownloadOptions) -> ClientSession:
    """Session carrying the browser header set and the page timeout."""
    return ClientSession(
        timeout=ClientTimeout(total=options.timeout),
        headers=BROWSER_HEADERS,
        raise_for_status=False,
    )
