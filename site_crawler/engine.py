# File: site_crawler/engine.py
"""site_crawler.engine: orchestration layer that runs a crawl and its exports."""

from __future__ import annotations

import asyncio
import signal
from typing import List, Optional

from site_crawler.config import CrawlConfig
from site_crawler.crawler.crawler import AsyncCrawler
from site_crawler.crawler.fetcher import SupportsFetch
from site_crawler.crawler.models import CrawlReport
from site_crawler.export import export_report
from site_crawler.logger import logger

__all__ = ["start_crawl"]

_ABORT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _install_abort_handlers(loop: asyncio.AbstractEventLoop, crawler: AsyncCrawler) -> List[int]:
    installed: List[int] = []
    for sig in _ABORT_SIGNALS:
        try:
            loop.add_signal_handler(sig, crawler.abort)
        except (NotImplementedError, RuntimeError, ValueError):
            # no signal support on this loop (Windows, or not the main thread)
            logger.debug("Cannot handle signal %s; interrupt will not export partial results", sig)
            continue
        installed.append(sig)
    return installed


def _remove_abort_handlers(loop: asyncio.AbstractEventLoop, installed: List[int]) -> None:
    for sig in installed:
        loop.remove_signal_handler(sig)


async def start_crawl(config: CrawlConfig, fetcher: Optional[SupportsFetch] = None) -> CrawlReport:
    """
    Crawl from ``config.url`` and write the configured exports.

    SIGINT/SIGTERM and the optional ``config.max_duration`` deadline abort the
    crawl; exports are still written from the partial state.

    Parameters
    ----------
    config : CrawlConfig
        Crawl settings.
    fetcher : SupportsFetch, optional
        Transport override; an aiohttp-based fetcher is used when omitted.
    """
    loop = asyncio.get_running_loop()
    async with AsyncCrawler(config, fetcher=fetcher) as crawler:
        handlers = _install_abort_handlers(loop, crawler)
        deadline = None
        if config.max_duration is not None:
            deadline = loop.call_later(config.max_duration, crawler.abort)
        try:
            report = await crawler.crawl()
        finally:
            if deadline is not None:
                deadline.cancel()
            _remove_abort_handlers(loop, handlers)

    export_report(report, config)
    return report
