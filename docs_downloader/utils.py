# File: docs_downloader/utils.py
"""docs_downloader.utils: URL helpers shared by the crawler, the probe and the writer."""

from __future__ import annotations

import posixpath
from typing import Collection, List, Sequence
from urllib.parse import urlparse, urlunparse

from docs_downloader.logger import logger

__all__: Sequence[str] = (
    "canonical_url",
    "clean_path",
    "hostname_of",
    "is_http_url",
    "same_host",
    "site_name",
    "remove_duplicates",
)


def hostname_of(url: str) -> str:
    """Lower-cased hostname of *url* (without port), ``""`` when absent."""
    return (urlparse(url).hostname or "").lower()


def clean_path(path: str) -> str:
    """Resolve ``.``/``..`` segments and repeated slashes; never climbs above ``/``."""
    if not path:
        return path
    norm = posixpath.normpath("/" + path.lstrip("/"))
    if path.endswith("/") and not norm.endswith("/"):
        norm += "/"
    return norm


def canonical_url(url: str) -> str:
    """*url* with its path cleaned by :func:`clean_path`."""
    parsed = urlparse(url)
    canonical = urlunparse(parsed._replace(path=clean_path(parsed.path)))
    if canonical != url:
        logger.debug("Canonical URL: %s -> %s", url, canonical)
    return canonical


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def same_host(url: str, hostname: str) -> bool:
    """Checks that *url* points at *hostname* over http(s)."""
    valid = is_http_url(url) and hostname_of(url) == hostname.lower()
    logger.debug("Same host: %s -> %s", url, valid)
    return valid


def site_name(hostname: str) -> str:
    """Directory name of a site: leading ``www.`` stripped, dots replaced by underscores."""
    name = hostname[4:] if hostname.startswith("www.") else hostname
    return name.replace(".", "_")


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Removes duplicate URLs, keeping the first occurrence."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
