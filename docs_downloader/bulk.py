# File: docs_downloader/bulk.py
"""docs_downloader.bulk: collects documentation URLs for bulk mode from a markdown list."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Union

from docs_downloader.logger import logger

__all__ = ["extract_doc_urls", "read_doc_urls"]

# - Docs: [Title](https://example.com/docs)
_DOCS_LINE = re.compile(r"- Docs: \[.*?\]\((https?://[^)]+)\)")


def extract_doc_urls(text: str) -> List[str]:
    """Return the URLs of every ``- Docs: [title](url)`` entry, in order."""
    return _DOCS_LINE.findall(text)


def read_doc_urls(path: Union[str, Path]) -> List[str]:
    """Read *path* and extract its documentation URLs."""
    p = Path(path).expanduser()
    if not p.is_file():
        logger.error("URL list not found: %s", p)
        raise FileNotFoundError(f"URL list not found: {p}")
    urls = extract_doc_urls(p.read_text(encoding="utf-8"))
    logger.debug("Loaded %d documentation URLs from %s", len(urls), p)
    return urls
