# === FILE: docs_downloader/config.py ===
"""
Configuration models for docs_downloader.

Two layers are described with Pydantic:

* :class:`SiteConfig` – per-hostname overrides read from a YAML/JSON file
  (``contentSelector``, ``skipPatterns``, ``maxDepth``, ``preferMarkdown``).
* :class:`DownloadOptions` – invocation parameters of one download run.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class SiteConfig(BaseModel):
    """Site-specific settings, looked up by hostname."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    content_selector: Optional[str] = Field(
        None, alias="contentSelector", description="CSS selector of the content region."
    )
    skip_patterns: List[str] = Field(
        default_factory=list,
        alias="skipPatterns",
        description="Extra regular expressions; matching links are not followed.",
    )
    max_depth: Optional[int] = Field(
        None, ge=0, alias="maxDepth", description="Overrides the global crawl depth."
    )
    prefer_markdown: bool = Field(
        False,
        alias="preferMarkdown",
        description="Only save pages that have a native markdown counterpart.",
    )

    @field_validator("content_selector", mode="before")
    def _blank_selector_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("skip_patterns")
    def _patterns_compile(cls, v: List[str]) -> List[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid skip pattern {pattern!r}: {exc}") from exc
        return v


class DownloadOptions(BaseModel):
    """Parameters of a single download invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    output_dir: Path = Field(Path("./downloads"), description="Root of all site directories.")
    max_depth: int = Field(3, ge=0, description="Maximum link depth from the seed URL.")
    force: bool = Field(False, description="Overwrite files that already exist.")
    include_metadata: bool = Field(False, description="Prefix files with a front matter block.")
    politeness_delay: float = Field(0.5, ge=0, description="Pause before every page (seconds).")
    retry_times: int = Field(3, ge=1, description="Attempts for the primary page fetch.")
    retry_delay: float = Field(1.0, ge=0, description="Base backoff between attempts (seconds).")
    timeout: float = Field(20.0, gt=0, description="Timeout of the page fetch (seconds).")
    probe_timeout: float = Field(8.0, gt=0, description="Timeout of a markdown probe (seconds).")
    markdown_timeout: float = Field(15.0, gt=0, description="Timeout of a markdown download.")
    max_redirects: int = Field(5, ge=0, description="Redirects followed per request.")


SiteConfigs = Dict[str, SiteConfig]

_EMPTY_SITE_CONFIG = SiteConfig()


def site_config_for(configs: Mapping[str, SiteConfig], hostname: str) -> SiteConfig:
    """Return the record for *hostname* or an empty default."""
    return configs.get(hostname, _EMPTY_SITE_CONFIG)


def _read_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def load_site_configs(path: Union[str, Path, None]) -> SiteConfigs:
    """
    Read a YAML or JSON file mapping hostnames to :class:`SiteConfig` records.

    ``None`` yields an empty mapping. A missing file raises FileNotFoundError,
    unparsable content ValueError, a non-mapping top level TypeError and an
    invalid record pydantic's ValidationError.
    """
    if path is None:
        return {}

    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    if not isinstance(data, dict):
        raise TypeError(f"Top level of the config must be a mapping, got {type(data).__name__}")

    configs: SiteConfigs = {}
    for hostname, record in data.items():
        configs[str(hostname).lower()] = SiteConfig.model_validate(record or {})
    return configs


__all__ = [
    "SiteConfig",
    "SiteConfigs",
    "DownloadOptions",
    "ValidationError",
    "load_site_configs",
    "site_config_for",
]
