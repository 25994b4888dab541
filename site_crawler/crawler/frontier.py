"""
Crawl frontier: the status map of every discovered URL.

All mutations go through the methods below, each of which runs under a single
lock, so the frontier can be shared by asyncio workers and by threads alike.
"""
from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, Iterator, List, Optional

from site_crawler.crawler.models import UrlStatus
from site_crawler.crawler.url import NormalizedUrl

__all__ = ("Frontier",)


class Frontier:
    """Deduplicating URL frontier with exactly-once claims."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._status: Dict[NormalizedUrl, UrlStatus] = {}
        self._pending: Deque[NormalizedUrl] = deque()
        self._in_flight = 0
        self.seed: Optional[NormalizedUrl] = None

    @property
    def seed_host(self) -> Optional[str]:
        return None if self.seed is None else self.seed.host

    def try_seed(self, url: NormalizedUrl, fetchable: bool = True) -> bool:
        """Register *url* as the crawl origin. Only the first call succeeds."""
        with self._lock:
            if self.seed is not None or url in self._status:
                return False
            self.seed = url
            self._add(url, fetchable)
            return True

    def offer(self, url: NormalizedUrl, fetchable: bool = True) -> bool:
        """
        Register a newly discovered URL unless it is already known.

        Fetchable URLs become PENDING; the rest are recorded as REJECTED right
        away. Returns True if the URL was new.
        """
        with self._lock:
            if url in self._status:
                return False
            self._add(url, fetchable)
            return True

    def try_claim(self) -> Optional[NormalizedUrl]:
        """Move the oldest PENDING URL to IN_FLIGHT and return it, or None."""
        with self._lock:
            if not self._pending:
                return None
            url = self._pending.popleft()
            self._status[url] = UrlStatus.IN_FLIGHT
            self._in_flight += 1
            return url

    def mark_visited(self, url: NormalizedUrl) -> None:
        self._finish(url, UrlStatus.VISITED)

    def mark_rejected(self, url: NormalizedUrl) -> None:
        self._finish(url, UrlStatus.REJECTED)

    # queries ---------------------------------------------------------------

    def status(self, url: NormalizedUrl) -> Optional[UrlStatus]:
        with self._lock:
            return self._status.get(url)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    @property
    def in_flight_count(self) -> int:
        with self._lock:
            return self._in_flight

    def has_pending(self) -> bool:
        return self.pending_count > 0

    def is_quiescent(self) -> bool:
        """True when nothing is pending and nothing is in flight."""
        with self._lock:
            return not self._pending and self._in_flight == 0

    def urls(self) -> List[NormalizedUrl]:
        """All known URLs in discovery order."""
        with self._lock:
            return list(self._status)

    def snapshot(self) -> Dict[NormalizedUrl, UrlStatus]:
        with self._lock:
            return dict(self._status)

    def __len__(self) -> int:
        with self._lock:
            return len(self._status)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._status

    def __iter__(self) -> Iterator[NormalizedUrl]:
        return iter(self.urls())

    # internals -------------------------------------------------------------

    def _add(self, url: NormalizedUrl, fetchable: bool) -> None:
        if fetchable:
            self._status[url] = UrlStatus.PENDING
            self._pending.append(url)
        else:
            self._status[url] = UrlStatus.REJECTED

    def _finish(self, url: NormalizedUrl, status: UrlStatus) -> None:
        with self._lock:
            current = self._status.get(url)
            if current is not UrlStatus.IN_FLIGHT:
                raise ValueError(f"{url} is not in flight (status: {current})")
            self._status[url] = status
            self._in_flight -= 1
