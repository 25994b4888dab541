"""
Link and resource extraction for fetched HTML documents.
"""
from __future__ import annotations

import logging
from typing import Iterator

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from site_crawler.crawler.url import NormalizedUrl

__all__ = ("extract_links", "SKIPPED_PREFIXES")

SKIPPED_PREFIXES = ("javascript:", "mailto:", "tel:", "data:")

logger = logging.getLogger("SiteCrawler")


def extract_links(body: str, base_url: NormalizedUrl) -> Iterator[str]:
    """
    Yield raw reference strings found in *body*, in document order.

    Every tag carrying an ``href`` contributes it; tags without one contribute
    their ``src`` instead. This covers anchors, stylesheets, images, scripts,
    iframes and media sources. Values are returned unresolved: *base_url* is
    only used for diagnostics, resolution belongs to the normalizer.
    """
    try:
        soup = BeautifulSoup(body, "html.parser")
    except (ParserRejectedMarkup, AssertionError) as exc:
        logger.warning("Cannot parse html from %s: %s", base_url, exc)
        return

    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        value = tag.get("href")
        if value is None:
            value = tag.get("src")
        if not isinstance(value, str):
            continue
        raw = value.strip()
        if not raw or raw.lower().startswith(SKIPPED_PREFIXES):
            continue
        yield raw
