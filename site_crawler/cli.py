#!/usr/bin/env python3
"""
Command-line entry point of the SiteCrawler crawler.

Usage:
  site-crawler URL [OPTIONS]

Crawl options:
  -d, --download            Save every fetched file under --output-dir
  -c, --crawl-external      Also crawl hosts other than the seed's
  -m, --max-url-length N    Ignore URLs this long or longer (default: 300)
  -e, --exclude PREFIXES    Comma-separated path prefixes to skip
  -t, --timeout MS          Pause between request starts (default: 100)
  -w, --workers N           Number of concurrent fetch workers (default: 8)

Output options:
  --export PATH             Write all found URLs to PATH
  --export-internal PATH    Write internal URLs to PATH
  --export-external PATH    Write external URLs to PATH

Example:
  site-crawler https://example.com -e /blog,/tag --export urls.txt
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click.core import ParameterSource
from pydantic import ValidationError

from site_crawler import __version__
from site_crawler.config import CrawlConfig, load_config
from site_crawler.crawler.models import CrawlReport
from site_crawler.engine import start_crawl
from site_crawler.logger import init_logging

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

# CLI parameter name -> CrawlConfig field
_CONFIG_FIELDS = {
    "url": "url",
    "download": "download",
    "crawl_external": "crawl_external",
    "max_url_length": "max_url_length",
    "exclude": "exclude",
    "export": "export",
    "export_internal": "export_internal",
    "export_external": "export_external",
    "timeout": "timeout",
    "workers": "concurrency",
    "request_timeout": "request_timeout",
    "user_agent": "user_agent",
    "output_dir": "output_dir",
    "max_duration": "max_duration",
}


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _explicit_options(ctx: click.Context, params: Dict[str, Any]) -> Dict[str, Any]:
    """Options the user actually passed, mapped to CrawlConfig field names."""
    overrides: Dict[str, Any] = {}
    for name, field_name in _CONFIG_FIELDS.items():
        if ctx.get_parameter_source(name) in (ParameterSource.DEFAULT, None):
            continue
        overrides[field_name] = params[name]
    return overrides


def print_report(report: CrawlReport) -> None:
    """Print the sorted internal and external URL lists and a summary line."""
    click.secho('Internal urls:', fg='bright_green')
    for url in sorted(report.internal_urls):
        click.echo(str(url))
    click.secho('External urls:', fg='red')
    for url in sorted(report.external_urls):
        click.echo(str(url))
    click.echo(
        f'{len(report.all_urls)} URLs found, {report.visited} fetched, '
        f'{report.fetch_errors} failed'
        + (f', {report.saved} saved' if report.saved or report.save_errors else '')
        + (' (aborted)' if report.aborted else '')
    )


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-V', message='SiteCrawler, version %(version)s')
@click.argument('url')
@click.option('--download', '-d', is_flag=True, help='Download all fetched files.')
@click.option(
    '--crawl-external', '-c', is_flag=True,
    help='Crawl other websites it finds links to. Might download a large part of the internet.'
)
@click.option(
    '--max-url-length', '-m', type=click.IntRange(min=1), default=300, show_default=True,
    help='Ignore URLs this long or longer.'
)
@click.option('--exclude', '-e', default='', help='Comma-separated path prefixes to ignore.')
@click.option(
    '--export', type=click.Path(dir_okay=False, path_type=Path), default=None,
    help='Where to export all found URLs.'
)
@click.option(
    '--export-internal', type=click.Path(dir_okay=False, path_type=Path), default=None,
    help='Where to export internal URLs.'
)
@click.option(
    '--export-external', type=click.Path(dir_okay=False, path_type=Path), default=None,
    help='Where to export external URLs.'
)
@click.option(
    '--timeout', '-t', type=click.IntRange(min=0), default=100, show_default=True,
    help='Pause between requests in milliseconds.'
)
@click.option(
    '--workers', '-w', type=click.IntRange(min=1), default=8, show_default=True,
    help='Number of concurrent fetch workers.'
)
@click.option(
    '--request-timeout', type=click.FloatRange(min=0, min_open=True), default=30.0,
    show_default=True, help='Timeout of a single request in seconds.'
)
@click.option('--user-agent', default=None, help='User-Agent header to send.')
@click.option(
    '--output-dir', '-o', type=click.Path(file_okay=False, path_type=Path), default=Path('.'),
    help='Root directory for downloaded files.'
)
@click.option(
    '--max-duration', type=click.FloatRange(min=0, min_open=True), default=None,
    help='Stop crawling after this many seconds and export what was found.'
)
@click.option(
    '--config', 'config_path', default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML or JSON file with crawl settings; command-line options win.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    help='Logging level.'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Also write logs to this file.'
)
@click.pass_context
def cli(ctx, config_path: Optional[Path], log_level: str, log_file: Optional[Path], **params):
    """Crawl every page, image and script reachable from URL."""
    init_logging(level=log_level.upper(), log_file=str(log_file) if log_file else None)

    try:
        cfg: CrawlConfig = load_config(config_path, **_explicit_options(ctx, params))
    except ValidationError as e:
        print_error(f'Invalid configuration: {e}')
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Cannot load configuration: {e}')

    report = asyncio.run(start_crawl(cfg))
    print_report(report)


main = cli

if __name__ == "__main__":
    cli()
