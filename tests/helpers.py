# File: tests/helpers.py
from __future__ import annotations

from typing import Dict, List, Union

from site_crawler.crawler.models import FetchError, FetchResult


class FakeFetcher:
    """
    In-memory stand-in for the HTTP transport.

    ``pages`` maps absolute URLs to either an HTML string, a
    ``(content_type, body)`` tuple, or an int status code (non-2xx -> error).
    Unknown URLs fail like a 404.
    """

    def __init__(self, pages: Dict[str, Union[str, int, tuple]]) -> None:
        self.pages = pages
        self.calls: List[str] = []

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        page = self.pages.get(url, 404)
        if isinstance(page, int):
            raise FetchError(url, f"HTTP {page}", status=page)
        if isinstance(page, tuple):
            content_type, body = page
        else:
            content_type, body = "text/html", page
        if isinstance(body, str):
            body = body.encode("utf-8")
        return FetchResult(url=url, status=200, content_type=content_type, body=body, charset="utf-8")
