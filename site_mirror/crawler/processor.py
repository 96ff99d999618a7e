# site_mirror/crawler/processor.py
"""
Response processor: decides what happens to a fetched response.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.models import ContentKind, FetchResponse, MirrorRequest, ProcessedPage, Stats
from site_mirror.crawler.storage import StorageWriter
from site_mirror.crawler.urls import canonicalize
from site_mirror.logger import logger


class ResponseProcessor:
    """Marks the final URL seen, tallies the response and stores successful bodies."""

    def __init__(self, frontier: Frontier, storage: StorageWriter, stats: Stats) -> None:
        self.frontier = frontier
        self.storage = storage
        self.stats = stats

    @staticmethod
    def base_url(response: FetchResponse, final_url: str) -> str:
        for header in ("Content-Base", "Content-Location"):
            value = response.headers.get(header)
            if value:
                return urljoin(final_url, value)
        return final_url

    def process(self, response: FetchResponse, request: Optional[MirrorRequest] = None) -> Optional[ProcessedPage]:
        """
        Return the page for link extraction, or ``None`` when there is nothing
        more to do with this entry.
        """
        try:
            final_url = canonicalize(response.url)
        except ValueError:
            final_url = request.url if request is not None else response.url

        # a redirect target counts as seen even if the frontier finds it later
        self.frontier.mark_seen(final_url)
        logger.debug("Final is [%s]", final_url)

        if final_url.startswith("file:"):
            return None

        path = self.storage.store_path(final_url)
        if self.storage.exists(path):
            logger.debug("Already downloaded [%s]", path)
            return None

        self.stats.record_response(response.status, response.server)
        logger.debug("Server is %s", response.server)
        logger.info("%s ... %s", final_url, response.status or response.error)

        if response.is_error:
            return None

        if path is not None and not self.storage.store(response.body, path):
            return None

        return ProcessedPage(
            url=final_url,
            base_url=self.base_url(response, final_url),
            kind=ContentKind.from_mime(response.content_type),
            body=response.body,
        )
