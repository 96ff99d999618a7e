# File: tests/test_fetcher.py
import pytest
from aiohttp import BasicAuth

from site_mirror.config import MirrorConfig
from site_mirror.crawler.fetcher import Fetcher


@pytest.fixture()
def fetcher(basic_config, storage, stats) -> Fetcher:
    return Fetcher(None, basic_config, storage, stats)


def test_build_request_headers(fetcher, stats):
    request = fetcher.build_request("http://example.com/a.html", referer="http://example.com/")
    assert request.target == "http://example.com/a.html"
    assert not request.is_local
    assert request.headers == {
        "Accept-Language": "en",
        "Connection": "close",
        "Accept": "*/*",
        "Host": "example.com",
        "User-Agent": "TestAgent/1.0",
        "Referer": "http://example.com/",
    }
    assert request.auth is None
    assert stats.requests == 1


def test_host_header_keeps_port(fetcher):
    request = fetcher.build_request("http://localhost:8080/")
    assert request.headers["Host"] == "localhost:8080"
    assert "Referer" not in request.headers


def test_every_call_counts_as_request(fetcher, stats):
    for _ in range(3):
        fetcher.build_request("http://example.com/")
    assert stats.requests == 3


def test_credentials_sent_to_every_host(mirror_dir, storage, stats):
    config = MirrorConfig(output_dir=mirror_dir, username="joe", password="secret")
    fetcher = Fetcher(None, config, storage, stats)
    for url in ("http://example.com/", "http://other.org/"):
        assert fetcher.build_request(url).auth == BasicAuth("joe", "secret")


def test_credentials_need_both_parts(mirror_dir, storage, stats):
    config = MirrorConfig(output_dir=mirror_dir, username="joe")
    assert Fetcher(None, config, storage, stats).build_request("http://example.com/").auth is None


@pytest.mark.asyncio()
async def test_existing_file_is_used_as_cache(fetcher, mirror_dir):
    stored = mirror_dir / "example.com/index.html"
    stored.parent.mkdir()
    stored.write_bytes(b"<html>cached</html>")

    request = fetcher.build_request("http://example.com/")
    assert request.is_local
    assert request.target == stored.resolve().as_uri()
    assert request.headers["Host"] == "example.com"

    # no session: a network request would raise
    response = await fetcher.execute(request)
    assert response.url.startswith("file:")
    assert not response.is_error


@pytest.mark.asyncio()
async def test_execute_without_session_fails_loudly(fetcher):
    request = fetcher.build_request("http://example.com/")
    with pytest.raises(RuntimeError):
        await fetcher.execute(request)
