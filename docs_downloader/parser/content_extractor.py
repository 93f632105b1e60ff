# === FILE: docs_downloader/parser/content_extractor.py ===
"""Selection of the content region of a documentation page.

Documentation sites vary widely in markup, so :class:`ContentExtractor` runs an
ordered chain of strategies and commits to the first one that yields a
plausibly non-trivial fragment:

1. the ``contentSelector`` of the site configuration,
2. selectors tuned for hosted documentation platforms (Mintlify-like),
3. selectors tuned for static-site generators (Nextra-like),
4. a generic list of content selectors,
5. the element with the largest block of text,
6. the whole ``<body>``.

Boilerplate (scripts, navigation, footers, sidebars …) is removed before the
chain runs; attributes are stripped only from the selected fragment so that
selectors can still match on classes and ``data-*`` attributes.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Optional, Pattern

from bs4 import BeautifulSoup
from bs4.element import Tag

from docs_downloader.config import SiteConfig, site_config_for
from docs_downloader.utils import hostname_of

__all__: Sequence[str] = ("ContentExtractor", "ExtractionContext", "clean_content", "inner_html")

BOILERPLATE_SELECTORS: tuple[str, ...] = (
    "script, style, nav, footer, .sidebar, .navigation, .menu, .navbar, .header, .topbar, "
    ".search, .breadcrumb, .table-of-contents, .toc, .banner",
    "#navbar, #sidebar, #footer, #header, #navigation, #menu, #search-bar, #assistant-entry",
)

DOCS_PLATFORM_SELECTORS: tuple[str, ...] = (
    ".prose, .mdx-prose",
    '[data-content="true"]',
    ".docs-content",
    ".main-content",
)

STATIC_SITE_SELECTORS: tuple[str, ...] = (
    "main article",
    ".nextra-content",
    ".nextra-body-full",
    "[data-nextra-content]",
    "main .container",
    "main",
)

GENERIC_SELECTORS: tuple[str, ...] = (
    "main",
    ".content",
    ".documentation",
    ".docs-content",
    ".markdown-body",
    "article",
    "#content",
    ".main-content",
    '[role="main"]',
    ".prose",
)

STATIC_SITE_HOSTS: tuple[str, ...] = ("thegraph.com", "nextra")

#: A selector match must carry more inner HTML than this to count as content.
MIN_FRAGMENT_LENGTH = 100
#: A text block must carry more text than this to be a fallback candidate.
MIN_TEXT_BLOCK_LENGTH = 200


@dataclass(frozen=True)
class ExtractionContext:
    soup: BeautifulSoup
    hostname: str
    url: str
    site_config: SiteConfig


Strategy = Callable[[ExtractionContext], Optional[Tag]]


def inner_html(tag: Tag) -> str:
    return tag.decode_contents()


def _first_qualifying(soup: BeautifulSoup, selectors: Sequence[str]) -> Optional[Tag]:
    for selector in selectors:
        tag = soup.select_one(selector)
        if tag is not None and len(inner_html(tag).strip()) > MIN_FRAGMENT_LENGTH:
            return tag
    return None


# --------------------------------------------------------------------------- #
# Strategies                                                                  #
# --------------------------------------------------------------------------- #


def configured_selector(ctx: ExtractionContext) -> Optional[Tag]:
    selector = ctx.site_config.content_selector
    return _first_qualifying(ctx.soup, (selector,)) if selector else None


def docs_platform_selectors(ctx: ExtractionContext) -> Optional[Tag]:
    if "mintlify" in ctx.hostname or "docs." in ctx.url:
        return _first_qualifying(ctx.soup, DOCS_PLATFORM_SELECTORS)
    return None


def static_site_selectors(ctx: ExtractionContext) -> Optional[Tag]:
    if any(hint in ctx.hostname for hint in STATIC_SITE_HOSTS):
        return _first_qualifying(ctx.soup, STATIC_SITE_SELECTORS)
    return None


def generic_selectors(ctx: ExtractionContext) -> Optional[Tag]:
    return _first_qualifying(ctx.soup, GENERIC_SELECTORS)


def largest_text_block(ctx: ExtractionContext) -> Optional[Tag]:
    best: Optional[Tag] = None
    best_len = -1
    for tag in ctx.soup.find_all(["div", "section", "article"]):
        text_len = len(tag.get_text().strip())
        if text_len <= MIN_TEXT_BLOCK_LENGTH:
            continue
        if tag.select_one("nav, footer, .sidebar, #sidebar") is not None:
            continue
        if text_len > best_len:
            best, best_len = tag, text_len
    return best


def document_body(ctx: ExtractionContext) -> Optional[Tag]:
    return ctx.soup.body or ctx.soup


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    configured_selector,
    docs_platform_selectors,
    static_site_selectors,
    generic_selectors,
    largest_text_block,
    document_body,
)


# --------------------------------------------------------------------------- #
# Cleanup                                                                     #
# --------------------------------------------------------------------------- #

_REMNANT_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"\(self\.__next_s.*?\}\]\)", re.DOTALL),  # Next.js hydration pushes
    re.compile(r"\(\(.*?\)\)\(.*?\)", re.DOTALL),  # self-invoking functions
    re.compile(r"<script[^>]*>.*?</script>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<style[^>]*>.*?</style>", re.DOTALL | re.IGNORECASE),
    re.compile(r"--[\w-]+:\s*[^;]+;"),  # CSS custom properties
)

_PRE_BLOCK = re.compile(r"(<pre\b.*?</pre>)", re.DOTALL | re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_LANGUAGE_CLASS = re.compile(r"^language-\w+$")


def _strip_attributes(html: str) -> str:
    fragment = BeautifulSoup(html, "html.parser")
    for tag in fragment.find_all(True):
        kept_classes = []
        if tag.name == "code":
            kept_classes = [c for c in tag.get("class") or [] if _LANGUAGE_CLASS.match(c)]
        for attr in list(tag.attrs):
            if attr.startswith("data-") or attr in ("class", "style"):
                del tag[attr]
        if kept_classes:
            tag["class"] = kept_classes
    return str(fragment)


def _collapse_whitespace(html: str) -> str:
    parts = _PRE_BLOCK.split(html)
    # odd indices are <pre> blocks, kept verbatim
    return "".join(
        part if i % 2 else _WHITESPACE.sub(" ", part) for i, part in enumerate(parts)
    ).strip()


def clean_content(html: str) -> str:
    """Remove script/CSS remnants and presentational attributes, normalise whitespace."""
    for pattern in _REMNANT_PATTERNS:
        html = pattern.sub("", html)
    return _collapse_whitespace(_strip_attributes(html))


# --------------------------------------------------------------------------- #
# Extractor                                                                   #
# --------------------------------------------------------------------------- #


class ContentExtractor:
    """Picks the content fragment of a parsed page."""

    def __init__(
        self,
        site_configs: Mapping[str, SiteConfig] | None = None,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    ) -> None:
        self.site_configs = dict(site_configs or {})
        self.strategies = tuple(strategies)

    def extract(self, soup: BeautifulSoup, page_url: str) -> str:
        """Return the cleaned HTML fragment of *soup*; empty for markdown-only sites.

        The document is modified in place (boilerplate is removed).
        """
        hostname = hostname_of(page_url)
        config = site_config_for(self.site_configs, hostname)

        for selector in BOILERPLATE_SELECTORS:
            for tag in soup.select(selector):
                # nested matches die with their ancestor
                if not tag.decomposed:
                    tag.decompose()

        if config.prefer_markdown:
            return ""

        ctx = ExtractionContext(soup=soup, hostname=hostname, url=page_url, site_config=config)
        for strategy in self.strategies:
            tag = strategy(ctx)
            if tag is not None:
                return clean_content(inner_html(tag))
        return ""
