"""
Data models for the SiteCrawler crawl engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from site_crawler.crawler.url import NormalizedUrl

HTML_TYPES = ("text/html", "application/xhtml+xml")


class UrlStatus(str, Enum):
    """Lifecycle of a frontier entry: PENDING -> IN_FLIGHT -> VISITED | REJECTED."""

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    VISITED = "visited"
    REJECTED = "rejected"


class FetchError(Exception):
    """Network failure, timeout or non-success HTTP status for one URL."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


@dataclass(slots=True)
class FetchResult:
    """Response of a successful fetch: raw body plus what is needed to read it."""

    url: str
    status: int
    content_type: str
    body: bytes
    charset: Optional[str] = None

    @property
    def is_html(self) -> bool:
        return self.content_type in HTML_TYPES

    @property
    def text(self) -> str:
        try:
            return self.body.decode(self.charset or "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


@dataclass(slots=True)
class CrawlReport:
    """Outcome of one crawl run, complete or aborted."""

    seed: NormalizedUrl
    statuses: Dict[NormalizedUrl, UrlStatus] = field(default_factory=dict)
    all_urls: List[NormalizedUrl] = field(default_factory=list)
    internal_urls: List[NormalizedUrl] = field(default_factory=list)
    external_urls: List[NormalizedUrl] = field(default_factory=list)
    visited: int = 0
    rejected: int = 0
    fetch_errors: int = 0
    saved: int = 0
    save_errors: int = 0
    elapsed: float = 0.0
    aborted: bool = False
