# File: docs_downloader/report/__init__.py
"""docs_downloader.report: crawl summaries written by the CLI."""

from .json_report import render_json

__all__ = ["render_json"]
