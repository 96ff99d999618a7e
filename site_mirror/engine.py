# File: site_mirror/engine.py
"""site_mirror.engine: orchestration layer that runs a mirror and its archives."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit

from site_mirror.aggregator import MirrorReport, build_report
from site_mirror.archive import create_tar, create_zip
from site_mirror.config import MirrorConfig, load_config
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.crawler.models import CrawlResult
from site_mirror.logger import logger

__all__ = ["Engine", "start_mirror", "validate_start_url"]


def validate_start_url(url: str) -> str:
    """Reject seeds the crawler cannot start from (no http(s) scheme or no host)."""
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError as exc:
        raise ValueError(f"Invalid URL {url!r}: {exc}") from exc
    if parts.scheme.lower() not in ("http", "https") or not host:
        raise ValueError(f"Not an absolute http(s) URL: {url!r}")
    return url


async def start_mirror(config: MirrorConfig, url: str) -> CrawlResult:
    """Mirror *url* according to *config*, then build the requested archives."""
    validate_start_url(url)
    async with MirrorCrawler(config, url) as crawler:
        result = await crawler.crawl()

    archives: List[Path] = []
    if config.tar:
        archives.append(create_tar(result))
    if config.zip:
        archives.append(create_zip(result))
    if archives:
        result = dataclasses.replace(result, archives=tuple(archives))
    return result


class Engine:
    """Facade for the CLI and tests: load config, run the mirror, build the report."""

    @staticmethod
    def load_config(path: Optional[str]) -> MirrorConfig:
        """Load YAML/JSON config (or defaults) with environment overrides."""
        return load_config(path)

    def __init__(self, config: MirrorConfig) -> None:
        self.config = config

    def run(self, url: str) -> MirrorReport:
        """Run the mirror to completion and return its summary report."""
        logger.info("Starting mirror of %s", url)
        try:
            result = asyncio.run(start_mirror(self.config, url))
        except Exception as exc:
            logger.error("Mirroring failed: %s", exc)
            raise
        return build_report(result)
