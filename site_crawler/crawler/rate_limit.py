"""
Global request pacing shared by all crawl workers.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

__all__ = ("PacingGate",)

logger = logging.getLogger("SiteCrawler")


class PacingGate:
    """
    Serializes fetch initiations so that two of them never start closer
    together than *interval* seconds, whichever worker issues them.
    """

    def __init__(self, interval: float) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._lock = asyncio.Lock()
        self._last_ts: Optional[float] = None

    async def wait(self) -> None:
        """Block until the caller may start its request."""
        async with self._lock:
            if self._last_ts is not None:
                while (wait := self.interval - (time.monotonic() - self._last_ts)) > 0:
                    logger.debug("Sleeping for %.0f ms", wait * 1000)
                    await asyncio.sleep(wait)
            self._last_ts = time.monotonic()
