# === FILE: site_crawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from site_crawler.config import CrawlConfig
from site_crawler.crawler.fetcher import Fetcher, SupportsFetch
from site_crawler.crawler.frontier import Frontier
from site_crawler.crawler.link_extractor import extract_links
from site_crawler.crawler.models import CrawlReport, FetchError, FetchResult, UrlStatus
from site_crawler.crawler.rate_limit import PacingGate
from site_crawler.crawler.scope import Classification, classify, is_fetchable
from site_crawler.crawler.url import InvalidUrl, NormalizedUrl, normalize
from site_crawler.downloader import Downloader

__all__ = ("AsyncCrawler",)


class AsyncCrawler:
    """Asynchronous crawler: a pool of workers drains the frontier under a global pace."""

    def __init__(
        self,
        config: CrawlConfig,
        fetcher: Optional[SupportsFetch] = None,
        downloader: Optional[Downloader] = None,
    ) -> None:
        self.config = config
        self.seed: NormalizedUrl = config.seed
        self.frontier = Frontier()
        self.fetcher = fetcher
        self.downloader = downloader or (Downloader(config.output_dir) if config.download else None)
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("SiteCrawler")
        self._gate = PacingGate(config.pacing_interval)
        self._internal: Dict[NormalizedUrl, None] = {}
        self._external: Dict[NormalizedUrl, None] = {}
        self._changed: Optional[asyncio.Condition] = None
        self._workers: List[asyncio.Task[None]] = []
        self._aborted = False
        self._fetch_errors = 0
        self._saved = 0
        self._save_errors = 0

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.request_timeout),
                headers={"User-Agent": self.config.user_agent},
                connector=TCPConnector(limit=self.config.concurrency),
                raise_for_status=False,
            )
            self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlReport:
        """Crawl from the seed until quiescence (or abort) and report the result."""
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with AsyncCrawler(...)'")
        self.logger.info("Crawling %s", self.seed)
        start = time.monotonic()

        seed_class = classify(self.seed, self.seed.host, self.config)
        self._record(self.seed, seed_class)
        self.frontier.try_seed(self.seed, fetchable=is_fetchable(seed_class, self.config))
        if seed_class is Classification.EXCLUDED:
            self.logger.warning("Seed URL is excluded by the crawl settings: %s", self.seed)

        self._changed = asyncio.Condition()
        self._workers = [
            asyncio.create_task(self._worker(), name=f"crawl-worker-{i}")
            for i in range(self.config.concurrency)
        ]
        if self._aborted:
            for task in self._workers:
                task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)

        report = self._report(time.monotonic() - start)
        self.logger.info(
            "Finished: %d URLs found, %d fetched, %d rejected in %.2f s%s",
            len(report.all_urls),
            report.visited,
            report.rejected,
            report.elapsed,
            " (aborted)" if report.aborted else "",
        )
        return report

    def abort(self) -> None:
        """Stop all workers; crawl() then returns what was gathered so far."""
        if self._aborted:
            return
        self._aborted = True
        self.logger.warning("Crawl aborted, finishing with partial results")
        for task in self._workers:
            task.cancel()

    @property
    def aborted(self) -> bool:
        return self._aborted

    async def _worker(self) -> None:
        assert self._changed is not None
        frontier = self.frontier
        while True:
            url = frontier.try_claim()
            if url is None:
                if frontier.is_quiescent():
                    async with self._changed:
                        self._changed.notify_all()
                    return
                async with self._changed:
                    await self._changed.wait_for(
                        lambda: frontier.has_pending() or frontier.is_quiescent()
                    )
                continue
            try:
                await self._process(url)
            except asyncio.CancelledError:
                if frontier.status(url) is UrlStatus.IN_FLIGHT:
                    frontier.mark_rejected(url)
                raise
            except Exception:
                self.logger.exception("Unexpected error while crawling %s", url)
                if frontier.status(url) is UrlStatus.IN_FLIGHT:
                    frontier.mark_rejected(url)
            async with self._changed:
                self._changed.notify_all()

    async def _process(self, url: NormalizedUrl) -> None:
        assert self.fetcher is not None
        await self._gate.wait()
        try:
            result = await self.fetcher.fetch(str(url))
        except FetchError as exc:
            self._fetch_errors += 1
            self.logger.warning("Cannot fetch %s", exc)
            self.frontier.mark_rejected(url)
            return

        if result.is_html:
            page = self._page_url(url, result)
            for raw in extract_links(result.text, page):
                self._discover(raw, page)
        self.frontier.mark_visited(url)

        if self.downloader is not None:
            await self._save(url, result)

    def _page_url(self, url: NormalizedUrl, result: FetchResult) -> NormalizedUrl:
        """The URL the body was served from, which differs from *url* after a redirect."""
        if result.url == str(url):
            return url
        try:
            return normalize(result.url)
        except InvalidUrl:
            return url

    def _discover(self, raw: str, page: NormalizedUrl) -> None:
        """Normalize *raw* against the page it was found on and offer it."""
        try:
            found = normalize(raw, page)
        except InvalidUrl as exc:
            self.logger.debug("Skipping reference on %s: %s", page, exc)
            return
        classification = classify(found, self.seed.host, self.config)
        self._record(found, classification)
        if self.frontier.offer(found, fetchable=is_fetchable(classification, self.config)):
            self.logger.info("Found url: %s", found)

    def _record(self, url: NormalizedUrl, classification: Classification) -> None:
        if url.host == self.seed.host:
            self._internal.setdefault(url, None)
        else:
            self._external.setdefault(url, None)
        if classification is Classification.EXCLUDED:
            self.logger.debug("Excluded: %s", url)

    async def _save(self, url: NormalizedUrl, result: FetchResult) -> None:
        assert self.downloader is not None
        try:
            await asyncio.to_thread(self.downloader.save, url, result.body, result.is_html)
        except OSError as exc:
            self._save_errors += 1
            self.logger.warning("Cannot save document %s: %s", url, exc)
        else:
            self._saved += 1

    def _report(self, elapsed: float) -> CrawlReport:
        statuses = self.frontier.snapshot()
        counts = {status: 0 for status in UrlStatus}
        for status in statuses.values():
            counts[status] += 1
        return CrawlReport(
            seed=self.seed,
            statuses=statuses,
            all_urls=list(statuses),
            internal_urls=list(self._internal),
            external_urls=list(self._external),
            visited=counts[UrlStatus.VISITED],
            rejected=counts[UrlStatus.REJECTED],
            fetch_errors=self._fetch_errors,
            saved=self._saved,
            save_errors=self._save_errors,
            elapsed=elapsed,
            aborted=self._aborted,
        )
