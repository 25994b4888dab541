# File: tests/conftest.py
from __future__ import annotations

from typing import Dict, Union

import pytest

from site_crawler.config import CrawlConfig


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture()
def make_config(tmp_path):
    """Factory for CrawlConfig with fast test defaults."""

    def _make(url: str = "http://example.com/", **kwargs) -> CrawlConfig:
        kwargs.setdefault("timeout", 0)
        kwargs.setdefault("concurrency", 4)
        kwargs.setdefault("output_dir", tmp_path / "download")
        return CrawlConfig(url=url, **kwargs)

    return _make


@pytest.fixture()
def basic_config(make_config) -> CrawlConfig:
    return make_config()


@pytest.fixture()
def example_site() -> Dict[str, Union[str, int, tuple]]:
    """Seed page linking a page, a foreign URL and an image."""
    return {
        "http://example.com/": (
            '<html><body>'
            '<a href="/about">About</a>'
            '<a href="http://other.com/x">Other</a>'
            '<img src="/img/logo.png">'
            '</body></html>'
        ),
        "http://example.com/about": 404,
        "http://example.com/img/logo.png": ("image/png", b"\x89PNG\r\n"),
        "http://other.com/x": "<a href='/y'>y</a>",
    }
