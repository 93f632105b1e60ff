# === FILE: docs_downloader/parser/markdown_converter.py ===
"""HTML → markdown conversion built on :mod:`markdownify`.

ATX headings and fenced code blocks; ``<pre><code class="language-x">`` keeps
its language tag and its raw text, so code samples are never escaped.
"""
from __future__ import annotations

import re
from collections.abc import Sequence

from markdownify import ATX, MarkdownConverter

__all__: Sequence[str] = ("DocsMarkdownConverter", "convert")

_LANGUAGE_CLASS = re.compile(r"language-(\w+)")


class DocsMarkdownConverter(MarkdownConverter):
    """markdownify converter with a fenced-code rule for ``<pre><code>``."""

    def __init__(self, **options):
        options.setdefault("heading_style", ATX)
        super().__init__(**options)

    def convert_pre(self, el, text, parent_tags):
        code = el.find("code")
        if code is None:
            return super().convert_pre(el, text, parent_tags)
        match = _LANGUAGE_CLASS.search(" ".join(code.get("class") or []))
        language = match.group(1) if match else ""
        return f"\n\n```{language}\n{code.get_text()}\n```\n\n"


_converter = DocsMarkdownConverter()


def convert(html: str) -> str:
    """Convert an HTML fragment to markdown; deterministic for a given input."""
    markdown = _converter.convert(html)
    markdown = markdown.strip()
    return markdown + "\n" if markdown else ""
