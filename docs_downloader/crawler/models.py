# docs_downloader/crawler/models.py
"""
Data models for the documentation crawler.
"""
from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Set

from docs_downloader.config import SiteConfig


@dataclass(slots=True)
class PageData:
    """Body of a fetched resource together with its response metadata."""

    url: str
    content: str
    content_type: str = ""
    status: int = 200


@dataclass(slots=True)
class ProbeResponse:
    """Outcome of one request against a markdown candidate.

    ``body`` is ``None`` when only headers were retrieved (HEAD).
    """

    url: str
    status: int
    content_type: str = ""
    body: Optional[str] = None


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    url: str
    depth: int


@dataclass(slots=True)
class CrawlReport:
    """Per-site summary of a download run."""

    start_url: str
    site_dir: str
    pages_processed: int = 0
    files_written: int = 0
    files_skipped: int = 0
    pages_failed: int = 0
    markdown_sources: int = 0
    skipped_prefer_markdown: int = 0
    written: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SiteRun:
    """State of one ``download(start_url)`` call; never shared between calls."""

    start_url: str
    hostname: str
    site_dir: Path
    site_config: SiteConfig
    max_depth: int
    frontier: Deque[FrontierEntry] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)
    report: Optional[CrawlReport] = None

    def __post_init__(self) -> None:
        if self.report is None:
            self.report = CrawlReport(start_url=self.start_url, site_dir=str(self.site_dir))
        if not self.frontier:
            self.frontier.append(FrontierEntry(self.start_url, 0))
