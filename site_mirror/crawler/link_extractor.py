# site_mirror/crawler/link_extractor.py
"""
Link extraction and scope filtering for SiteMirror.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.urls import ScopeFilter, UrlParseError, parse_url
from site_mirror.logger import logger

# element -> attributes that carry a link
LINK_ATTRIBUTES: Dict[str, Tuple[str, ...]] = {
    "a": ("href",),
    "area": ("href",),
    "link": ("href",),
    "img": ("src",),
    "script": ("src",),
    "frame": ("src",),
    "iframe": ("src",),
    "embed": ("src",),
    "input": ("src",),
    "source": ("src",),
    "audio": ("src",),
    "video": ("src", "poster"),
    "body": ("background",),
    "table": ("background",),
    "td": ("background",),
    "form": ("action",),
}


def _document_base(soup: BeautifulSoup, fallback: str) -> str:
    tag = soup.find("base", href=True)
    if isinstance(tag, Tag):
        href = tag.get("href")
        if isinstance(href, str) and href.strip():
            return urljoin(fallback, href.strip())
    return fallback


def extract_links(html: Union[str, bytes], base_url: str) -> List[str]:
    """
    Every link target in *html*, resolved against the document's ``<base>``
    (if any) or *base_url*, in document order.
    """
    soup = BeautifulSoup(html, "html.parser")
    base = _document_base(soup, base_url)
    links: List[str] = []
    for tag in soup.find_all(list(LINK_ATTRIBUTES)):
        if not isinstance(tag, Tag):
            continue
        for attr in LINK_ATTRIBUTES[tag.name]:
            value = tag.get(attr)
            if not isinstance(value, str):
                continue
            raw = value.strip()
            if not raw:
                continue
            try:
                links.append(urljoin(base, raw))
            except ValueError:
                # kept raw; parse_url rejects it downstream
                links.append(raw)
    logger.debug("Found %d links", len(links))
    return links


def select_links(raw_links: Iterable[str], scope: ScopeFilter, frontier: Frontier) -> List[str]:
    """
    Links worth queueing. Each must, in order: have an allowed host, be unseen,
    not be a ``javascript`` link, and sit under the scope path.
    """
    kept: List[str] = []
    for raw in raw_links:
        url = parse_url(raw)
        if isinstance(url, UrlParseError):
            logger.debug("Dropping link [%s]: %s", url.raw, url.reason)
            continue
        if not scope.is_allowed_domain(url.host):
            continue
        if frontier.is_seen(url.text):
            continue
        if url.text.startswith("javascript"):
            continue
        if not scope.has_scope_path(url.path):
            continue
        kept.append(url.text)
    return kept


def enqueue_links(
    html: Union[str, bytes],
    base_url: str,
    referer: str,
    scope: ScopeFilter,
    frontier: Frontier,
) -> List[str]:
    """Extract, filter and queue the links of one page; returns what was queued."""
    kept = select_links(extract_links(html, base_url), scope, frontier)
    frontier.enqueue_many(kept, referer=referer)
    logger.debug("Kept %d links, queue is now %d", len(kept), len(frontier))
    return kept
