# site_mirror/crawler/crawler.py
from __future__ import annotations

import asyncio
import errno
import random
import socket
from pathlib import Path
from typing import Awaitable, Callable, Optional

from aiohttp import ClientSession, ClientTimeout, CookieJar

from site_mirror.config import MirrorConfig
from site_mirror.crawler.fetcher import Fetcher
from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.link_extractor import enqueue_links
from site_mirror.crawler.models import ContentKind, CrawlResult, Stats
from site_mirror.crawler.processor import ResponseProcessor
from site_mirror.crawler.storage import StorageWriter
from site_mirror.crawler.urls import Resolver, ScopeFilter, canonicalize
from site_mirror.logger import logger

__all__ = ("MirrorCrawler",)

Sleeper = Callable[[float], Awaitable[None]]


class MirrorCrawler:
    """
    Sequential mirroring crawler.

    One URL at a time is fetched, stored and (for HTML) link-extracted before
    the next one leaves the frontier.
    """

    def __init__(
        self,
        config: MirrorConfig,
        start_url: str,
        sleep: Sleeper = asyncio.sleep,
        resolver: Resolver = socket.gethostbyaddr,
    ) -> None:
        self.config = config
        self.start_url = canonicalize(start_url)
        self.scope, self.domain = ScopeFilter.for_seed(
            self.start_url, config.allowed_hosts, config.referer, resolver=resolver
        )
        self.stats = Stats()
        self.frontier = Frontier([self.start_url])
        if config.referer:
            self.frontier.set_referer(self.start_url, config.referer)
        root = Path(config.output_dir).resolve()
        if not root.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, "Output directory does not exist", str(root))
        self.storage = StorageWriter(root, self.stats, flat=config.flat)
        self.fetcher = Fetcher(None, config, self.storage, self.stats)
        self.processor = ResponseProcessor(self.frontier, self.storage, self.stats)
        self.session: Optional[ClientSession] = None
        self._sleep = sleep
        self._count = 0

    async def __aenter__(self) -> MirrorCrawler:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            cookie_jar=CookieJar(unsafe=True),
            raise_for_status=False,
        )
        self.fetcher.session = self.session
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlResult:
        logger.info("Mirroring %s into %s", self.start_url, self.storage.root)
        self.stats.start()
        try:
            while True:
                entry = self.frontier.dequeue()
                if entry is None:
                    break
                self._count += 1
                logger.info("[%5d] %s", self._count, entry.url)
                await self._visit(entry.url, entry.referer)
                if self._should_stop():
                    dropped = self.frontier.clear()
                    logger.debug("Discarded %d queued URLs", dropped)
                    break
                await self._throttle()
        finally:
            self.stats.stop()
        logger.info(
            "Finished: %d requests, %d files stored in %.2f s",
            self.stats.requests,
            self.stats.stored_files,
            self.stats.elapsed,
        )
        return self.result()

    async def _visit(self, url: str, referer: Optional[str]) -> None:
        request = self.fetcher.build_request(url, referer)
        response = await self.fetcher.execute(request)
        page = self.processor.process(response, request)
        if page is None or page.kind is not ContentKind.HTML:
            return
        logger.debug("Base is %s", page.base_url)
        enqueue_links(page.body, page.base_url, url, self.scope, self.frontier)

    def _should_stop(self) -> bool:
        limit = self.config.max_stored_files
        if limit is not None and self.stats.stored_files >= limit:
            logger.warning("Stopping after storing %d files", limit)
            return True
        limit = self.config.max_requests
        if limit is not None and self.stats.requests >= limit:
            logger.warning("Stopping after %d requests", limit)
            return True
        return False

    async def _throttle(self) -> None:
        if not self.config.delay:
            return
        pause = random.uniform(0, self.config.delay)
        logger.debug("Sleeping %.2f seconds", pause)
        await self._sleep(pause)

    def result(self) -> CrawlResult:
        return CrawlResult(
            start_url=self.start_url,
            domain=self.domain,
            output_dir=self.storage.root,
            stats=self.stats,
            allowed_domains=frozenset(self.scope.allowed_domains),
            directories=frozenset(self.storage.created_directories()),
        )
