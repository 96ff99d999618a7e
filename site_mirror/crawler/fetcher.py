# site_mirror/crawler/fetcher.py
"""
Fetcher module: builds one GET per frontier entry and performs it.

Earlier downloads act as a cache: when the store path of a URL already holds a
non-empty file, the request is pointed at that file instead of the network.
"""
from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import urlsplit

from aiohttp import BasicAuth, ClientError, ClientSession

from site_mirror.config import MirrorConfig
from site_mirror.crawler.models import FetchResponse, MirrorRequest, Stats
from site_mirror.crawler.storage import StorageWriter
from site_mirror.logger import logger


class Fetcher:
    """Prepares requests with the crawler's header/auth policy and executes them."""

    def __init__(
        self,
        session: Optional[ClientSession],
        config: MirrorConfig,
        storage: StorageWriter,
        stats: Stats,
    ) -> None:
        self.session = session
        self.config = config
        self.storage = storage
        self.stats = stats
        self._auth: Optional[BasicAuth] = None
        if config.has_credentials:
            self._auth = BasicAuth(config.username, config.password)
            logger.debug("User is %s", config.username)

    def build_request(self, url: str, referer: Optional[str] = None) -> MirrorRequest:
        """Prepare the GET for *url*; counts as one request whatever happens next."""
        parts = urlsplit(url)
        host = parts.hostname or ""
        if parts.port is not None:
            host = f"{host}:{parts.port}"

        target = url
        local_path = None
        store_path = self.storage.store_path(url)
        if self.storage.exists(store_path):
            local_path = self.storage.absolute(store_path).resolve()
            target = local_path.as_uri()
            logger.info("Using local file: %s", local_path)

        headers = {
            "Accept-Language": "en",
            "Connection": "close",
            "Accept": "*/*",
            "Host": host,
            "User-Agent": self.config.user_agent,
        }
        if referer:
            headers["Referer"] = referer

        self.stats.requests += 1
        # credentials go out with every request, whatever the host
        return MirrorRequest(url=url, target=target, headers=headers, auth=self._auth, local_path=local_path)

    async def execute(self, request: MirrorRequest) -> FetchResponse:
        """
        Perform the request once. Redirects follow the client default; errors
        come back as a :class:`FetchResponse` instead of being raised.
        """
        if request.is_local:
            return FetchResponse(url=request.target, status=200)

        if self.session is None:
            raise RuntimeError("Session not initialized")

        # aiohttp writes Host itself, so it stays right across redirects
        headers = {k: v for k, v in request.headers.items() if k != "Host"}
        try:
            async with self.session.get(
                request.target,
                headers=headers,
                auth=request.auth,
                allow_redirects=True,
            ) as resp:
                body = await resp.read()
                return FetchResponse(
                    url=str(resp.url),
                    status=resp.status,
                    headers={k: v for k, v in resp.headers.items()},
                    body=body,
                    content_type=resp.content_type or "",
                )
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.debug("Request for %s failed: %s", request.target, exc)
            return FetchResponse(url=request.url, status=0, error=str(exc) or type(exc).__name__)
