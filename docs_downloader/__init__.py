# docs_downloader/__init__.py
"""
docs_downloader package initializer.
Defines package version; the CLI entry point lives in :mod:`docs_downloader.cli`.
"""
__version__ = "1.0.0"
