# File: tests/conftest.py
from pathlib import Path

import pytest

from site_mirror.config import MirrorConfig
from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.models import Stats
from site_mirror.crawler.storage import StorageWriter
from site_mirror.crawler.urls import ScopeFilter


def _failing_resolver(address):
    raise OSError("reverse lookup disabled in tests")


@pytest.fixture()
def no_reverse_dns():
    """Resolver stub: every reverse lookup fails."""
    return _failing_resolver


@pytest.fixture()
def mirror_dir(tmp_path) -> Path:
    """Empty directory the mirror is written to."""
    out = tmp_path / "mirror"
    out.mkdir()
    return out


@pytest.fixture()
def basic_config(mirror_dir) -> MirrorConfig:
    """
    Return a basic valid MirrorConfig writing into a temporary directory.
    """
    return MirrorConfig(
        user_agent="TestAgent/1.0",
        output_dir=mirror_dir,
        timeout=5.0,
    )


@pytest.fixture()
def stats() -> Stats:
    return Stats()


@pytest.fixture()
def storage(mirror_dir, stats) -> StorageWriter:
    return StorageWriter(mirror_dir, stats)


@pytest.fixture()
def frontier() -> Frontier:
    return Frontier()


@pytest.fixture()
def blog_scope(no_reverse_dns) -> ScopeFilter:
    """Scope allowing example.com below /blog."""
    return ScopeFilter("/blog", allowed_domains={"example.com"}, resolver=no_reverse_dns)


@pytest.fixture()
def mock_html() -> str:
    """
    Provide a simple HTML page with internal, external and pseudo links.
    """
    return (
        '<html><body>'
        '<a href="/blog/post1#comments">Post</a>'
        '<a href="http://external.com/blog/x">X</a>'
        '<a href="javascript:void(0)">JS</a>'
        '<a href="mailto:me@example.com">Mail</a>'
        '<img src="/blog/pic.png">'
        '<a href="/other">Other</a>'
        '</body></html>'
    )
