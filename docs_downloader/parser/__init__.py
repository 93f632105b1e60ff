# File: docs_downloader/parser/__init__.py
"""docs_downloader.parser: content extraction and HTML → markdown conversion."""

from .content_extractor import ContentExtractor
from .markdown_converter import DocsMarkdownConverter, convert

__all__ = ["ContentExtractor", "DocsMarkdownConverter", "convert"]
