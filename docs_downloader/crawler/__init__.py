# File: docs_downloader/crawler/__init__.py
"""docs_downloader.crawler: frontier loop, HTTP fetching, link discovery and markdown probing."""

from .crawler import DocCrawler, run
from .models import CrawlReport, FrontierEntry, PageData, ProbeResponse, SiteRun

__all__ = ["DocCrawler", "run", "CrawlReport", "FrontierEntry", "PageData", "ProbeResponse", "SiteRun"]
