# File: docs_downloader/writer.py
"""docs_downloader.writer: mapping of page URLs to markdown files and persisting them."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence, Union
from urllib.parse import urlparse

from docs_downloader.logger import logger
from docs_downloader.utils import clean_path

__all__: Sequence[str] = ("derive_path", "metadata_header", "SiteWriter")

_ILLEGAL_CHARS = re.compile(r'[<>:"|?*]')


def derive_path(url: str, site_dir: Union[str, Path]) -> Path:
    """
    Deterministic file path of *url* under *site_dir*.

    ``https://h`` and ``https://h/`` both map to ``index.md``; ``/guide/`` to
    ``guide.md``; characters illegal in file names become ``_``. Dot segments
    are resolved first, so the result always stays below *site_dir*.
    """
    pathname = clean_path(urlparse(url).path)
    if pathname in ("", "/"):
        pathname = "/index"
    pathname = pathname.removesuffix("/")
    if not pathname.endswith(".md"):
        pathname += ".md"
    safe = _ILLEGAL_CHARS.sub("_", pathname.lstrip("/"))
    return Path(site_dir) / safe


def metadata_header(source_url: str, downloaded_at: datetime | None = None) -> str:
    """Front matter block naming the source and the download time (UTC, ISO-8601)."""
    moment = downloaded_at or datetime.now(timezone.utc)
    stamp = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"---\nsource_url: {source_url}\ndownloaded_at: {stamp}\n---\n\n"


class SiteWriter:
    """Writes markdown files of one site; existing files are kept unless *force*."""

    def __init__(self, site_dir: Union[str, Path], *, force: bool = False, include_metadata: bool = False) -> None:
        self.site_dir = Path(site_dir)
        self.force = force
        self.include_metadata = include_metadata

    def path_for(self, url: str) -> Path:
        return derive_path(url, self.site_dir)

    def write(self, url: str, markdown: str, source_url: str) -> bool:
        """Persist *markdown* for *url*; returns False when an existing file was kept."""
        path = self.path_for(url)
        if not self.force and path.exists():
            logger.info("Skipping existing file: %s", path.name)
            return False

        content = markdown
        if self.include_metadata:
            content = metadata_header(source_url) + markdown

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.info("Saved: %s", path.name)
        return True
