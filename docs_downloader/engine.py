# File: docs_downloader/engine.py
"""docs_downloader.engine: orchestration of single-site and bulk downloads."""

from __future__ import annotations

import asyncio
from typing import List, Mapping, Optional, Sequence

from docs_downloader.config import DownloadOptions, SiteConfig
from docs_downloader.crawler.crawler import DocCrawler
from docs_downloader.crawler.models import CrawlReport
from docs_downloader.logger import logger

__all__ = ["Engine"]


class Engine:
    """Facade for the CLI and tests: runs the crawler for one or many sites."""

    def __init__(
        self,
        options: DownloadOptions,
        site_configs: Optional[Mapping[str, SiteConfig]] = None,
    ) -> None:
        self.options = options
        self.site_configs = dict(site_configs or {})

    async def download(self, url: str) -> CrawlReport:
        """Download one site; a fatal setup failure propagates."""
        async with DocCrawler(self.options, self.site_configs) as crawler:
            return await crawler.download(url)

    async def bulk(self, urls: Sequence[str]) -> List[CrawlReport]:
        """Download several sites one after another.

        A site that fails, even during setup, is logged and the remaining
        sites are still attempted.
        """
        reports: List[CrawlReport] = []
        async with DocCrawler(self.options, self.site_configs) as crawler:
            for url in urls:
                logger.info("Downloading: %s", url)
                try:
                    reports.append(await crawler.download(url))
                except Exception as exc:
                    logger.error("Failed to download %s: %s", url, exc)
        return reports

    def start_download(self, url: str) -> CrawlReport:
        return asyncio.run(self.download(url))

    def start_bulk(self, urls: Sequence[str]) -> List[CrawlReport]:
        return asyncio.run(self.bulk(urls))
