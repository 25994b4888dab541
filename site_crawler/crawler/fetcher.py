# site_crawler/crawler/fetcher.py
"""
Fetcher module: performs single HTTP GET requests over a shared aiohttp session.

Pacing and retry decisions are not made here; every failure is reported as a
:class:`FetchError` and left to the crawler.
"""
from __future__ import annotations

import asyncio
from typing import Protocol

from aiohttp import ClientError, ClientSession

from site_crawler.crawler.models import FetchError, FetchResult

__all__ = ("Fetcher", "SupportsFetch")


class SupportsFetch(Protocol):
    async def fetch(self, url: str) -> FetchResult: ...


class Fetcher:
    """Fetches one URL at a time and turns the response into a FetchResult."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url* and return its body.

        Raises FetchError on transport errors, timeouts, local resource
        exhaustion and any non-2xx status.
        """
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"HTTP {resp.status}", status=resp.status)
                body = await resp.read()
                return FetchResult(
                    url=str(resp.url),
                    status=resp.status,
                    content_type=resp.content_type.lower(),
                    body=body,
                    charset=resp.charset,
                )
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "timeout") from exc
        except ClientError as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc
        except OSError as exc:
            # e.g. too many open files
            raise FetchError(url, f"resource error: {exc}") from exc
