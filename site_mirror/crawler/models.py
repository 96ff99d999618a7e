# site_mirror/crawler/models.py
"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple

from aiohttp import BasicAuth


class ContentKind(Enum):
    """Content categories the crawler distinguishes; only HTML is parsed for links."""

    HTML = "html"
    OPAQUE = "opaque"

    @classmethod
    def from_mime(cls, content_type: Optional[str]) -> ContentKind:
        mime = (content_type or "").split(";", 1)[0].strip().lower()
        return cls.HTML if mime == "text/html" else cls.OPAQUE


@dataclass(slots=True)
class CrawlEntry:
    """A URL waiting in the frontier and the page it was found on."""

    url: str
    referer: Optional[str] = None


@dataclass(slots=True)
class MirrorRequest:
    """A prepared GET: what was asked for and what will actually be read."""

    url: str
    target: str
    headers: Dict[str, str]
    auth: Optional[BasicAuth] = None
    local_path: Optional[Path] = None

    @property
    def is_local(self) -> bool:
        return self.local_path is not None


@dataclass(slots=True)
class FetchResponse:
    """Outcome of one fetch. ``status == 0`` marks a transport failure."""

    url: str
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    content_type: str = ""
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None or self.status == 0 or self.status >= 400

    @property
    def server(self) -> str:
        return self.headers.get("Server") or "unknown"


@dataclass(slots=True)
class ProcessedPage:
    """A stored response handed to link extraction."""

    url: str
    base_url: str
    kind: ContentKind
    body: bytes


@dataclass
class Stats:
    """Counters collected during one run."""

    requests: int = 0
    stored_files: int = 0
    stored_bytes: int = 0
    codes: Counter = field(default_factory=Counter)
    servers: Counter = field(default_factory=Counter)
    started_at: Optional[float] = None
    stopped_at: Optional[float] = None

    def start(self) -> None:
        self.started_at = time.time()

    def stop(self) -> None:
        self.stopped_at = time.time()

    def record_response(self, status: int, server: str) -> None:
        self.codes[status] += 1
        self.servers[server] += 1

    def record_store(self, size: int) -> None:
        self.stored_files += 1
        self.stored_bytes += size

    @property
    def elapsed(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.stopped_at if self.stopped_at is not None else time.time()
        return max(0.0, end - self.started_at)


@dataclass(frozen=True)
class CrawlResult:
    """Everything a finished run hands to the archiver, summary and reports."""

    start_url: str
    domain: str
    output_dir: Path
    stats: Stats
    allowed_domains: FrozenSet[str]
    directories: FrozenSet[Path]
    archives: Tuple[Path, ...] = ()
