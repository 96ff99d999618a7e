# site_mirror/crawler/frontier.py
"""
Frontier: FIFO queue of pending URLs, the seen-set and the referer map.
"""
from __future__ import annotations

from collections import Counter, deque
from typing import Deque, Dict, Iterable, Optional

from site_mirror.crawler.models import CrawlEntry
from site_mirror.crawler.urls import canonicalize
from site_mirror.logger import logger


class Frontier:
    """
    Pending URLs in discovery order.

    Deduplication is lazy: a URL may be queued several times, but
    :meth:`dequeue` only hands out the first copy and drops the rest once the
    URL is in the seen-set.
    """

    def __init__(self, seeds: Iterable[str] = ()) -> None:
        self._queue: Deque[str] = deque()
        self._seen: Counter = Counter()
        self._referers: Dict[str, str] = {}
        self.enqueue_many(seeds)

    def __len__(self) -> int:
        return len(self._queue)

    @staticmethod
    def _key(url: str) -> str:
        try:
            return canonicalize(url)
        except ValueError:
            return url

    def enqueue_many(self, urls: Iterable[str], referer: Optional[str] = None) -> int:
        """Append *urls*; each remembers *referer* (the last one recorded wins)."""
        added = 0
        for url in urls:
            self._queue.append(url)
            if referer is not None:
                self._referers[self._key(url)] = referer
            added += 1
        return added

    def dequeue(self) -> Optional[CrawlEntry]:
        """
        Pop the next unseen URL and mark it seen.

        Returns ``None`` once the queue is exhausted.
        """
        while self._queue:
            key = self._key(self._queue.popleft())
            if key in self._seen:
                logger.debug("Skipping [%s]: seen %d times", key, self._seen[key])
                continue
            self._seen[key] += 1
            return CrawlEntry(url=key, referer=self._referers.get(key))
        return None

    def mark_seen(self, url: str) -> int:
        key = self._key(url)
        self._seen[key] += 1
        return self._seen[key]

    def is_seen(self, url: str) -> bool:
        return self._key(url) in self._seen

    def seen_count(self, url: str) -> int:
        return self._seen.get(self._key(url), 0)

    def referer_for(self, url: str) -> Optional[str]:
        return self._referers.get(self._key(url))

    def set_referer(self, url: str, referer: str) -> None:
        self._referers[self._key(url)] = referer

    def clear(self) -> int:
        """Drop every pending entry; returns how many were discarded."""
        dropped = len(self._queue)
        self._queue.clear()
        return dropped
