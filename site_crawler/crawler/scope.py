"""
Scope policy: decides whether a discovered URL belongs to the crawled site,
lies outside it, or must be ignored altogether.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from site_crawler.crawler.url import NormalizedUrl

if TYPE_CHECKING:
    from site_crawler.config import CrawlConfig

__all__ = ("Classification", "classify", "is_fetchable")


class Classification(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    EXCLUDED = "excluded"


def classify(url: NormalizedUrl, seed_host: str, config: CrawlConfig) -> Classification:
    """
    Classify *url* relative to the seed host.

    Checks run in a fixed order: length, then exclusion prefixes, then host.
    """
    if len(str(url)) >= config.max_url_length:
        return Classification.EXCLUDED
    if any(url.path.startswith(prefix) for prefix in config.exclude):
        return Classification.EXCLUDED
    if url.host == seed_host:
        return Classification.INTERNAL
    return Classification.EXTERNAL


def is_fetchable(classification: Classification, config: CrawlConfig) -> bool:
    """Return True if a URL with this classification may be fetched."""
    if classification is Classification.INTERNAL:
        return True
    if classification is Classification.EXTERNAL:
        return config.crawl_external
    return False
