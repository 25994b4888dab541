"""
Configuration loading and validation for the SiteCrawler crawler.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from site_crawler import __version__
from site_crawler.crawler.url import InvalidUrl, NormalizedUrl, normalize

__all__ = ("CrawlConfig", "load_config", "ValidationError")


class CrawlConfig(BaseModel):
    """Settings of a single crawl run, shared read-only by all workers."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str = Field(..., min_length=1, description="Seed URL.")
    download: bool = Field(False, description="Save fetched files under output_dir.")
    crawl_external: bool = Field(False, description="Fetch URLs on other hosts too.")
    max_url_length: int = Field(300, ge=1, description="URLs this long or longer are ignored.")
    exclude: Tuple[str, ...] = Field((), description="Path prefixes that are never crawled.")
    export: Optional[Path] = Field(None, description="File for all discovered URLs.")
    export_internal: Optional[Path] = Field(None, description="File for internal URLs.")
    export_external: Optional[Path] = Field(None, description="File for external URLs.")
    timeout: int = Field(100, ge=0, description="Pause between request starts (ms).")
    concurrency: int = Field(8, ge=1, description="Number of fetch workers.")
    request_timeout: float = Field(30.0, gt=0, description="Timeout of one request (seconds).")
    user_agent: str = Field(f"SiteCrawler/{__version__}", min_length=1, description="User-Agent header.")
    output_dir: Path = Field(Path("."), description="Root directory for downloads.")
    max_duration: Optional[float] = Field(None, gt=0, description="Abort the crawl after N seconds.")

    @field_validator("exclude", mode="before")
    def _split_exclude(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            return tuple(p.strip() for p in v if isinstance(p, str) and p.strip())
        return v

    @model_validator(mode="after")
    def _check_seed(self) -> CrawlConfig:
        try:
            normalize(self.url)
        except InvalidUrl as exc:
            raise ValueError(f"invalid seed URL: {exc}") from exc
        return self

    @property
    def seed(self) -> NormalizedUrl:
        return normalize(self.url)

    @property
    def pacing_interval(self) -> float:
        """Minimum gap between two fetch initiations, in seconds."""
        return self.timeout / 1000.0


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Read a YAML or JSON config file into a plain mapping (not validated)."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Build a validated CrawlConfig from an optional YAML/JSON file.
    Keyword *overrides* take precedence over values from the file.
    """
    data: dict[str, Any] = read_config_file(path) if path is not None else {}
    data.update(overrides)
    return CrawlConfig(**data)
