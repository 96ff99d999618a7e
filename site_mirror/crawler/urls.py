# site_mirror/crawler/urls.py
"""
URL canonicalization and the crawl scope (allowed domains + path prefix).
"""
from __future__ import annotations

import posixpath
import re
import socket
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Set, Tuple, Union
from urllib.parse import urljoin, urlsplit, urlunsplit

from site_mirror.logger import logger

__all__ = (
    "Url",
    "UrlParseError",
    "canonicalize",
    "parse_url",
    "scope_path_for",
    "ScopeFilter",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}
_ESCAPE_RE = re.compile(r"%[0-9a-fA-F]{2}")
_IPV4_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")
_UNRESERVED = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~")

Resolver = Callable[[str], Tuple[str, list, list]]


def _remove_dot_segments(path: str) -> str:
    # RFC 3986, section 5.2.4
    output: list[str] = []
    while path:
        if path.startswith("../"):
            path = path[3:]
        elif path.startswith("./"):
            path = path[2:]
        elif path.startswith("/./"):
            path = path[2:]
        elif path == "/.":
            path = "/"
        elif path.startswith("/../"):
            path = path[3:]
            if output:
                output.pop()
        elif path == "/..":
            path = "/"
            if output:
                output.pop()
        elif path in (".", ".."):
            path = ""
        else:
            start = 1 if path.startswith("/") else 0
            end = path.find("/", start)
            if end == -1:
                end = len(path)
            output.append(path[:end])
            path = path[end:]
    return "".join(output)


def _normalize_escape(match: re.Match) -> str:
    char = chr(int(match.group(0)[1:], 16))
    return char if char in _UNRESERVED else match.group(0).upper()


def canonicalize(url: str, base: Optional[str] = None) -> str:
    """
    Canonical string form of *url* (resolved against *base* when given).

    Lowercases scheme and host, strips the fragment, removes dot segments,
    drops default ports, decodes escaped unreserved characters (`%7E` is `~`)
    and upper-cases the remaining percent escapes. Raises ``ValueError``
    for URLs ``urllib`` cannot split (e.g. a broken IPv6 literal or port).
    """
    if base is not None:
        url = urljoin(base, url)
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()

    netloc = parts.netloc
    if netloc:
        host = parts.hostname or ""
        if ":" in host:
            host = f"[{host}]"
        port = parts.port
        userinfo, _, _ = netloc.rpartition("@")
        netloc = host
        if port is not None and _DEFAULT_PORTS.get(scheme) != port:
            netloc = f"{netloc}:{port}"
        if userinfo:
            netloc = f"{userinfo}@{netloc}"

    path = _remove_dot_segments(parts.path) if parts.path.startswith("/") or netloc else parts.path
    if not path and netloc and scheme in _DEFAULT_PORTS:
        path = "/"
    path = _ESCAPE_RE.sub(_normalize_escape, path)
    query = _ESCAPE_RE.sub(_normalize_escape, parts.query)
    return urlunsplit((scheme, netloc, path, query, ""))


@dataclass(frozen=True, slots=True)
class Url:
    """A parsed, canonical absolute URL."""

    text: str
    scheme: str
    host: str
    path: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class UrlParseError:
    """A link that could not be turned into a usable URL."""

    raw: str
    reason: str


def parse_url(raw: str, base: Optional[str] = None) -> Union[Url, UrlParseError]:
    """Parse *raw* into a :class:`Url`, or describe why that is impossible."""
    try:
        text = canonicalize(raw, base)
        parts = urlsplit(text)
        host = (parts.hostname or "").lower()
    except ValueError as exc:
        return UrlParseError(raw, str(exc))
    if not host:
        return UrlParseError(raw, "no host")
    return Url(text=text, scheme=parts.scheme, host=host, path=parts.path)


def scope_path_for(url: str) -> str:
    """Directory portion of *url*'s path; the prefix every in-scope path needs."""
    path = urlsplit(url).path or "/"
    return posixpath.dirname(path)


class ScopeFilter:
    """Allowed domains plus the path prefix that bound a crawl."""

    def __init__(
        self,
        scope_path: str = "",
        allowed_domains: Iterable[str] = (),
        resolver: Resolver = socket.gethostbyaddr,
    ) -> None:
        self.scope_path = scope_path
        self.allowed_domains: Set[str] = {d.lower() for d in allowed_domains}
        self._resolver = resolver

    @classmethod
    def for_seed(
        cls,
        seed_url: str,
        extra_hosts: Iterable[str] = (),
        referer: Optional[str] = None,
        resolver: Resolver = socket.gethostbyaddr,
    ) -> Tuple[ScopeFilter, str]:
        """Build the scope for a run and return it with the primary domain."""
        scope = cls(scope_path_for(seed_url), resolver=resolver)
        for host in extra_hosts:
            scope.register_allowed_domain(host)
        seed_host = (urlsplit(seed_url).hostname or "").lower()
        domain = scope.register_allowed_domain(seed_host)
        if referer:
            referer_host = urlsplit(referer).hostname
            if referer_host:
                scope.allow_host(referer_host)
        logger.debug("Domain is %s, path is %s", domain, scope.scope_path)
        return scope, domain

    def allow_host(self, host: str) -> None:
        self.allowed_domains.add(host.lower())

    def register_allowed_domain(self, domain: str) -> str:
        """
        Allow *domain*. For an IPv4 literal also allow the host name it
        reverse-resolves to and return that name; on lookup failure the
        literal stays the effective domain.
        """
        domain = domain.strip().lower()
        self.allow_host(domain)
        if not _IPV4_RE.match(domain):
            return domain
        try:
            hostname = self._resolver(domain)[0]
        except (OSError, UnicodeError) as exc:
            logger.debug("Reverse lookup of %s failed: %s", domain, exc)
            return domain
        hostname = hostname.lower()
        logger.info("Matched IP address [%s|%s]", domain, hostname)
        self.allow_host(hostname)
        return hostname

    def is_allowed_domain(self, host: Optional[str]) -> bool:
        return bool(host) and host.lower() in self.allowed_domains

    def has_scope_path(self, path: str) -> bool:
        # literal prefix: "/blog" also admits "/blog2/x"
        return path.startswith(self.scope_path)

    def is_in_scope(self, url: Union[str, Url]) -> bool:
        parsed = parse_url(str(url))
        if isinstance(parsed, UrlParseError):
            return False
        return (
            self.is_allowed_domain(parsed.host)
            and self.has_scope_path(parsed.path)
            and parsed.scheme != "javascript"
        )
