# === FILE: docs_downloader/crawler/crawler.py ===
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Mapping, Optional, Union

from aiohttp import ClientError, ClientSession
from bs4 import BeautifulSoup

from docs_downloader.config import DownloadOptions, SiteConfig, site_config_for
from docs_downloader.crawler.fetcher import Fetcher, create_session
from docs_downloader.crawler.link_extractor import SkipRules, extract_links
from docs_downloader.crawler.markdown_probe import MarkdownProbe, looks_like_html
from docs_downloader.crawler.models import CrawlReport, FrontierEntry, PageData, SiteRun
from docs_downloader.logger import logger
from docs_downloader.parser.content_extractor import ContentExtractor
from docs_downloader.parser.markdown_converter import convert
from docs_downloader.utils import canonical_url, hostname_of, site_name
from docs_downloader.writer import SiteWriter

__all__ = ("DocCrawler", "run")


class DocCrawler:
    """Breadth-first, strictly sequential documentation crawler.

    One instance may download several sites in turn; every
    :meth:`download` call starts from a fresh :class:`SiteRun`.
    """

    def __init__(
        self,
        options: DownloadOptions,
        site_configs: Optional[Mapping[str, SiteConfig]] = None,
    ) -> None:
        self.options = options
        self.site_configs = dict(site_configs or {})
        self.extractor = ContentExtractor(self.site_configs)
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self.probe: Optional[MarkdownProbe] = None

    async def __aenter__(self) -> DocCrawler:
        self.session = create_session(self.options)
        self.fetcher = Fetcher(self.session, self.options)
        self.probe = MarkdownProbe(self.fetcher)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    # ------------------------------------------------------------------ #
    # Site level                                                         #
    # ------------------------------------------------------------------ #

    def new_run(self, start_url: str) -> SiteRun:
        start_url = canonical_url(start_url)
        hostname = hostname_of(start_url)
        if not hostname:
            raise ValueError(f"Not an absolute URL: {start_url!r}")
        config = site_config_for(self.site_configs, hostname)
        max_depth = config.max_depth if config.max_depth is not None else self.options.max_depth
        return SiteRun(
            start_url=start_url,
            hostname=hostname,
            site_dir=Path(self.options.output_dir) / site_name(hostname),
            site_config=config,
            max_depth=max_depth,
        )

    async def download(self, start_url: str) -> CrawlReport:
        """Crawl one site; only a failure to create its directory is raised."""
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        run = self.new_run(start_url)
        run.site_dir.mkdir(parents=True, exist_ok=True)
        writer = SiteWriter(
            run.site_dir, force=self.options.force, include_metadata=self.options.include_metadata
        )
        rules = SkipRules(run.site_config.skip_patterns)

        logger.info("Output directory: %s", run.site_dir)
        while run.frontier:
            entry = run.frontier.popleft()
            if entry.url in run.visited or entry.depth > run.max_depth:
                continue
            run.visited.add(entry.url)
            try:
                await self._process_page(run, entry, writer, rules)
            except Exception as exc:
                run.report.pages_failed += 1
                run.report.failed.append(entry.url)
                logger.warning("Failed to process %s: %s", entry.url, exc)

        logger.info(
            "Finished %s: %d pages, %d written, %d skipped, %d failed",
            start_url,
            run.report.pages_processed,
            run.report.files_written,
            run.report.files_skipped,
            run.report.pages_failed,
        )
        return run.report

    # ------------------------------------------------------------------ #
    # Page level                                                         #
    # ------------------------------------------------------------------ #

    async def _process_page(
        self, run: SiteRun, entry: FrontierEntry, writer: SiteWriter, rules: SkipRules
    ) -> None:
        indent = "  " * entry.depth
        logger.info("%sProcessing: %s (depth: %d)", indent, entry.url, entry.depth)

        await asyncio.sleep(self.options.politeness_delay)

        # navigation links are only present in the rendered HTML
        page = await self.fetcher.fetch(entry.url)
        if page is None:
            run.report.pages_failed += 1
            run.report.failed.append(entry.url)
            return
        run.report.pages_processed += 1

        if entry.depth < run.max_depth:
            soup = BeautifulSoup(page.content, "html.parser")
            for link in extract_links(soup, entry.url, run.hostname, rules):
                if link not in run.visited:
                    run.frontier.append(FrontierEntry(link, entry.depth + 1))

        md_url = await self.probe.probe(entry.url)
        if md_url:
            logger.info("%sFound markdown version: %s", indent, md_url)
            await self._download_markdown(run, md_url, page, writer)
            return

        if run.site_config.prefer_markdown:
            run.report.skipped_prefer_markdown += 1
            logger.info("%sNo markdown version of %s, skipping (preferMarkdown)", indent, entry.url)
            return

        logger.info("%sConverting HTML to markdown", indent)
        self._record(run, writer.write(entry.url, self.html_to_markdown(page), entry.url), writer, entry.url)

    async def _download_markdown(
        self, run: SiteRun, md_url: str, page: PageData, writer: SiteWriter
    ) -> None:
        try:
            md_page = await self.fetcher.fetch_text(md_url)
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            run.report.pages_failed += 1
            run.report.failed.append(page.url)
            logger.warning("Failed to download markdown from %s: %s", md_url, exc or type(exc).__name__)
            return

        if looks_like_html(md_page.content, md_page.content_type):
            logger.warning("URL %s returned HTML, converting the page instead", md_url)
            self._record(run, writer.write(page.url, self.html_to_markdown(page), page.url), writer, page.url)
            return

        run.report.markdown_sources += 1
        self._record(run, writer.write(page.url, md_page.content, md_url), writer, page.url)

    def html_to_markdown(self, page: PageData) -> str:
        """Extract the content region of *page* and convert it."""
        soup = BeautifulSoup(page.content, "html.parser")
        return convert(self.extractor.extract(soup, page.url))

    @staticmethod
    def _record(run: SiteRun, written: bool, writer: SiteWriter, url: str) -> None:
        if written:
            run.report.files_written += 1
            run.report.written.append(str(writer.path_for(url)))
        else:
            run.report.files_skipped += 1


async def run(
    seed_url: str,
    max_depth: int,
    output_root: Union[str, Path],
    site_configs: Optional[Mapping[str, SiteConfig]] = None,
    force: bool = False,
    include_metadata: bool = False,
    **overrides,
) -> CrawlReport:
    """Download one documentation site with a throwaway crawler."""
    options = DownloadOptions(
        output_dir=Path(output_root),
        max_depth=max_depth,
        force=force,
        include_metadata=include_metadata,
        **overrides,
    )
    async with DocCrawler(options, site_configs) as crawler:
        return await crawler.download(seed_url)
