# docs_downloader/crawler/link_extractor.py
"""
Link discovery and URL skip rules for the documentation crawler.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Sequence, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from docs_downloader.utils import canonical_url, remove_duplicates, same_host

#: Links that never lead to documentation pages, checked in this order.
DEFAULT_SKIP_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\.(pdf|jpg|jpeg|png|gif|svg|ico|css|js)$", re.IGNORECASE),
    re.compile(r"#"),
    re.compile(r"/api/"),
    re.compile(r"/login"),
    re.compile(r"/register"),
    re.compile(r"/admin"),
    re.compile(r"/search"),
    re.compile(r"mailto:"),
    re.compile(r"tel:"),
)


class SkipRules:
    """Default skip patterns followed by site-specific ones; first match wins."""

    def __init__(self, extra_patterns: Iterable[str] = ()) -> None:
        self.patterns: Tuple[Pattern[str], ...] = DEFAULT_SKIP_PATTERNS + tuple(
            re.compile(p) for p in extra_patterns
        )

    def should_skip(self, url: str) -> bool:
        return any(pattern.search(url) for pattern in self.patterns)


def extract_links(
    soup: BeautifulSoup,
    page_url: str,
    hostname: str,
    rules: SkipRules,
) -> List[str]:
    """
    Collect crawlable links of a page.

    Every ``<a href>`` is resolved against *page_url* and its dot segments
    removed; only http(s) links on *hostname* that no skip rule matches are
    kept, in document order and without duplicates. Malformed hrefs are
    dropped one by one.
    """
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if not isinstance(href, str) or not href.strip():
            continue
        try:
            absolute = canonical_url(urljoin(page_url, href.strip()))
            if not same_host(absolute, hostname):
                continue
        except ValueError:
            continue
        if rules.should_skip(absolute):
            continue
        links.append(absolute)
    return remove_duplicates(links)


__all__: Sequence[str] = ("DEFAULT_SKIP_PATTERNS", "SkipRules", "extract_links")
