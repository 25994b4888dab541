# File: tests/test_cli.py
"""CLI tests using click.testing.CliRunner: options, config merging, output and errors."""
import json

import pytest
from click.testing import CliRunner

import site_crawler.cli as cli_module
from site_crawler.cli import cli
from site_crawler.crawler.models import CrawlReport, UrlStatus
from site_crawler.crawler.url import normalize
from site_crawler.logger import init_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI points the log handler at the runner's stream; put it back afterwards."""
    yield
    init_logging()


@pytest.fixture(autouse=True)
def patch_start_crawl(monkeypatch):
    """Replace start_crawl with a stub that records the config it receives."""
    seen = {}

    async def fake_crawl(cfg):
        seen["config"] = cfg
        seed = cfg.seed
        other = normalize("http://other.com/x")
        return CrawlReport(
            seed=seed,
            statuses={seed: UrlStatus.VISITED, other: UrlStatus.REJECTED},
            all_urls=[seed, other],
            internal_urls=[seed],
            external_urls=[other],
            visited=1,
            rejected=1,
        )

    monkeypatch.setattr(cli_module, "start_crawl", fake_crawl)
    return seen


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteCrawler" in result.output


def test_defaults_and_listing(patch_start_crawl):
    result = CliRunner().invoke(cli, ["http://example.com"])
    assert result.exit_code == 0, result.output

    cfg = patch_start_crawl["config"]
    assert cfg.max_url_length == 300
    assert cfg.timeout == 100
    assert not cfg.download and not cfg.crawl_external

    lines = result.output.splitlines()
    assert lines[:4] == ["Internal urls:", "http://example.com/", "External urls:", "http://other.com/x"]
    assert "2 URLs found, 1 fetched, 0 failed" in lines[-1]


def test_all_options(patch_start_crawl, tmp_path):
    args = [
        "http://example.com/start",
        "-d", "-c",
        "-m", "120",
        "-e", "/img,/blog",
        "--export", str(tmp_path / "all.txt"),
        "--export-internal", str(tmp_path / "in.txt"),
        "--export-external", str(tmp_path / "out.txt"),
        "-t", "250",
        "-w", "3",
        "-o", str(tmp_path / "mirror"),
        "--max-duration", "60",
    ]
    result = CliRunner().invoke(cli, args)
    assert result.exit_code == 0, result.output

    cfg = patch_start_crawl["config"]
    assert cfg.download and cfg.crawl_external
    assert cfg.max_url_length == 120
    assert cfg.exclude == ("/img", "/blog")
    assert cfg.export == tmp_path / "all.txt"
    assert cfg.export_internal == tmp_path / "in.txt"
    assert cfg.export_external == tmp_path / "out.txt"
    assert cfg.timeout == 250
    assert cfg.concurrency == 3
    assert cfg.output_dir == tmp_path / "mirror"
    assert cfg.max_duration == 60


def test_config_file_is_overridden_by_flags(patch_start_crawl, tmp_path):
    cfg_file = tmp_path / "crawl.json"
    cfg_file.write_text(
        json.dumps({"url": "http://ignored.com", "timeout": 500, "exclude": "/private", "download": True}),
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["http://example.com", "--config", str(cfg_file), "-t", "20"])
    assert result.exit_code == 0, result.output

    cfg = patch_start_crawl["config"]
    assert cfg.seed.host == "example.com"
    assert cfg.timeout == 20
    assert cfg.exclude == ("/private",)
    assert cfg.download is True


def test_invalid_seed_exits_with_error(patch_start_crawl):
    result = CliRunner().invoke(cli, ["mailto:someone@example.com"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
    assert "config" not in patch_start_crawl


def test_missing_url_argument():
    result = CliRunner().invoke(cli, [])
    assert result.exit_code == 2


def test_bad_option_value():
    result = CliRunner().invoke(cli, ["http://example.com", "-m", "0"])
    assert result.exit_code == 2
