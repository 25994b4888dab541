"""site_crawler.downloader: saves fetched files into a directory tree mirroring the site."""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from site_crawler.crawler.url import NormalizedUrl
from site_crawler.logger import logger

__all__ = ["Downloader", "INDEX_NAME"]

INDEX_NAME = "index.html"
_HTML_SUFFIXES = (".html", ".htm")


class Downloader:
    """Writes response bodies under ``<output_dir>/<host>/<url path>``."""

    def __init__(self, output_dir: Union[str, Path]) -> None:
        self.output_dir = Path(output_dir)

    def path_for(self, url: NormalizedUrl, is_html: bool = False) -> Path:
        """Map *url* to a file path; directory-like URLs get an index file."""
        segments: List[str] = [s for s in url.path.split("/") if s not in ("", ".", "..")]
        target = self.output_dir.joinpath(url.host, *segments)
        if not segments or url.path.endswith("/"):
            return target / INDEX_NAME
        if is_html and not segments[-1].lower().endswith(_HTML_SUFFIXES):
            return target / INDEX_NAME
        return target

    def save(self, url: NormalizedUrl, body: bytes, is_html: bool = False) -> Path:
        """
        Write *body* to the path derived from *url* and return that path.

        Raises FileExistsError instead of overwriting, and other OSError
        subclasses when the directory or file cannot be created.
        """
        path = self.path_for(url, is_html)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("xb") as fh:
            fh.write(body)
        logger.debug("Saved %s -> %s", url, path)
        return path
