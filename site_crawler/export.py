# site_crawler/export.py

"""
Export of discovered URL sets for SiteCrawler.

Each set is written as plain UTF-8 text, one URL per line, sorted.
"""
from pathlib import Path
from typing import Iterable, List, Union

from site_crawler.config import CrawlConfig
from site_crawler.crawler.models import CrawlReport
from site_crawler.crawler.url import NormalizedUrl
from site_crawler.logger import logger

__all__ = ["write_urls", "export_report"]


def write_urls(output_path: Union[Path, str], urls: Iterable[Union[NormalizedUrl, str]]) -> Path:
    """
    Write *urls* to *output_path*, one per line, in sorted order.

    :param output_path: target text file (parent directories are created)
    :param urls: URLs to export
    :return: Path of the written file

    Example:
    ```python
    from site_crawler.export import write_urls
    write_urls('found.txt', report.all_urls)
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    lines = sorted({str(u) for u in urls})
    with output.open('w', encoding='utf-8', newline='\n') as f:
        for line in lines:
            f.write(f"{line}\n")

    return output


def export_report(report: CrawlReport, config: CrawlConfig) -> List[Path]:
    """Write every export configured in *config*; a failing one does not stop the others."""
    targets = (
        (config.export, report.all_urls),
        (config.export_internal, report.internal_urls),
        (config.export_external, report.external_urls),
    )
    written: List[Path] = []
    for path, urls in targets:
        if path is None:
            continue
        try:
            written.append(write_urls(path, urls))
        except OSError as exc:
            logger.error("Cannot export to %s: %s", path, exc)
            continue
        logger.info("Exported %d URLs to %s", len(urls), path)
    return written
