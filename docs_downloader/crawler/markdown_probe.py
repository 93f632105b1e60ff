# docs_downloader/crawler/markdown_probe.py
"""
Detection of native markdown counterparts of documentation pages.

Many documentation sites render markdown sources into an HTML viewer while the
source stays reachable at a predictable sibling URL. :class:`MarkdownProbe`
derives those candidate URLs in a fixed order and asks the server about each
one until a response looks like genuine markdown.
"""
from __future__ import annotations

import asyncio
import re
from typing import Callable, List, Optional, Pattern, Sequence, Tuple
from urllib.parse import urlparse, urlunparse

from aiohttp import ClientError

from docs_downloader.crawler.fetcher import Fetcher
from docs_downloader.crawler.models import ProbeResponse
from docs_downloader.logger import logger
from docs_downloader.utils import is_http_url, remove_duplicates

__all__: Sequence[str] = (
    "MarkdownProbe",
    "candidate_urls",
    "looks_like_markdown",
    "looks_like_html",
    "is_markdown_response",
)

_MARKDOWN_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"^#{1,6}\s+\S", re.MULTILINE),  # heading
    re.compile(r"^\s*[-*+]\s+\S", re.MULTILINE),  # bullet list
    re.compile(r"^\s*\d+\.\s+\S", re.MULTILINE),  # numbered list
    re.compile(r"\[[^\]\n]+\]\([^)\n]+\)"),  # link
    re.compile(r"^\s*(```|~~~)", re.MULTILINE),  # fenced code
    re.compile(r"`[^`\n]+`"),  # inline code
    re.compile(r"^>\s?\S", re.MULTILINE),  # blockquote
    re.compile(r"\*\*[^*\n]+\*\*|__[^_\n]+__"),  # bold
    re.compile(r"(?<![*\w])\*[^*\s][^*\n]*\*(?![*\w])|(?<![_\w])_[^_\s][^_\n]*_(?![_\w])"),  # italic
    re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$", re.MULTILINE),  # horizontal rule
    re.compile(r"^\s*\|.*\|\s*$", re.MULTILINE),  # pipe table
)

_HTML_START = re.compile(r"^\s*<(!doctype\s+html|html)[\s>]", re.IGNORECASE)

_HEADER_ONLY_TYPES: Tuple[str, ...] = ("text/plain", "application/octet-stream")

_HTML_SUFFIX = re.compile(r"\.html?$", re.IGNORECASE)
_GITHUB_BLOB = re.compile(r"^/([^/]+)/([^/]+)/blob/(.+)$")
_GITLAB_BLOB = re.compile(r"^(/.+)/-/blob/(.+)$")
_DOCS_SEGMENT = re.compile(r"/docs?/")
_GUIDE_SEGMENT = re.compile(r"/guides?/")


def looks_like_html(text: str, content_type: str = "") -> bool:
    """True when the body opens an HTML document or the server says text/html."""
    # a byte order mark is not whitespace for ``\s``
    body = text.lstrip().lstrip("\ufeff")
    return "text/html" in content_type.lower() or bool(_HTML_START.match(body))


def looks_like_markdown(text: str) -> bool:
    """Heuristic: any markdown construct present, checked in a fixed order."""
    return any(pattern.search(text) for pattern in _MARKDOWN_PATTERNS)


def is_markdown_response(resp: ProbeResponse) -> bool:
    """Classify one probe response as genuine markdown or not."""
    if resp.status not in (200, 206):
        return False
    ctype = resp.content_type.split(";", 1)[0].strip().lower()
    if resp.body is not None:
        return looks_like_markdown(resp.body) and not looks_like_html(resp.body, ctype)
    if ctype == "text/html":
        return False
    return not ctype or ctype in _HEADER_ONLY_TYPES or "markdown" in ctype


# --------------------------------------------------------------------------- #
# Candidate URLs                                                              #
# --------------------------------------------------------------------------- #


def _with_path(parsed, path: str) -> str:
    return urlunparse((parsed.scheme, parsed.netloc, path, "", "", ""))


def _suffix_candidates(parsed) -> List[str]:
    base = parsed.path.rstrip("/")
    if not base:
        return [_with_path(parsed, suffix) for suffix in ("/index.md", "/README.md", "/content.md")]
    return [
        _with_path(parsed, base + ".md"),
        _with_path(parsed, base + "/index.md"),
        _with_path(parsed, base + "/README.md"),
        _with_path(parsed, base + "/content.md"),
    ]


def _html_suffix_candidate(parsed) -> List[str]:
    if not _HTML_SUFFIX.search(parsed.path):
        return []
    return [_with_path(parsed, _HTML_SUFFIX.sub(".md", parsed.path))]


def _literal_candidates(parsed) -> List[str]:
    path = parsed.path or "/"
    if path.endswith("/"):
        return [_with_path(parsed, path + "index.md")]
    return [_with_path(parsed, path + ".md"), _with_path(parsed, path + "/index.md")]


def _github_candidate(parsed) -> List[str]:
    if parsed.hostname not in ("github.com", "www.github.com"):
        return []
    match = _GITHUB_BLOB.match(parsed.path)
    if not match:
        return []
    owner, repo, rest = match.groups()
    return [f"https://raw.githubusercontent.com/{owner}/{repo}/{rest}"]


def _gitlab_candidate(parsed) -> List[str]:
    if not parsed.hostname or "gitlab" not in parsed.hostname:
        return []
    match = _GITLAB_BLOB.match(parsed.path)
    if not match:
        return []
    project, rest = match.groups()
    return [_with_path(parsed, f"{project}/-/raw/{rest}")]


def _segment_candidate(parsed, segment: Pattern[str], normalized: str) -> List[str]:
    path = parsed.path
    if not segment.search(path):
        return []
    path = segment.sub(normalized, path, count=1).rstrip("/")
    path = _HTML_SUFFIX.sub("", path)
    if path.endswith(".md") or path.endswith(normalized.rstrip("/")):
        return []
    return [_with_path(parsed, path + ".md")]


_CANDIDATE_BUILDERS: Tuple[Callable[..., List[str]], ...] = (
    _suffix_candidates,
    _html_suffix_candidate,
    _literal_candidates,
    _github_candidate,
    _gitlab_candidate,
    lambda parsed: _segment_candidate(parsed, _DOCS_SEGMENT, "/docs/"),
    lambda parsed: _segment_candidate(parsed, _GUIDE_SEGMENT, "/guide/"),
)


def candidate_urls(page_url: str) -> List[str]:
    """
    Ordered, de-duplicated list of URLs that may hold the markdown source of
    *page_url*. Query strings and fragments are dropped.
    """
    parsed = urlparse(page_url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return []
    candidates: List[str] = []
    for build in _CANDIDATE_BUILDERS:
        candidates.extend(build(parsed))
    page = _with_path(parsed, parsed.path or "/")
    return [c for c in remove_duplicates(candidates) if c != page and is_http_url(c)]


# --------------------------------------------------------------------------- #
# Probe                                                                       #
# --------------------------------------------------------------------------- #

_ABSENT_STATUS = (404, 410)


class MarkdownProbe:
    """Finds the first candidate URL serving genuine markdown."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    async def probe(self, page_url: str) -> Optional[str]:
        for candidate in candidate_urls(page_url):
            try:
                if await self._check(candidate):
                    return candidate
            except (ClientError, asyncio.TimeoutError, ValueError) as exc:
                logger.debug("Probe %s failed: %s", candidate, exc or type(exc).__name__)
        return None

    async def _check(self, candidate: str) -> bool:
        try:
            resp = await self.fetcher.head(candidate)
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.debug("HEAD %s failed (%s), trying ranged GET", candidate, exc or type(exc).__name__)
            resp = None

        if resp is not None and resp.status in _ABSENT_STATUS:
            return False
        if resp is None or resp.status != 200:
            resp = await self.fetcher.get_range(candidate)

        accepted = is_markdown_response(resp)
        logger.debug("Probe %s -> %s (%s) accepted=%s", candidate, resp.status, resp.content_type, accepted)
        return accepted
