# File: tests/test_archive.py
import tarfile
import zipfile

import pytest

import site_mirror.engine as engine_module
from site_mirror.archive import archive_roots, create_tar, create_zip
from site_mirror.crawler.models import CrawlResult, Stats
from site_mirror.engine import Engine, validate_start_url


@pytest.fixture()
def mirrored(mirror_dir) -> CrawlResult:
    for rel in ("example.com/index.html", "example.com/a/b.html", "cdn.example.com/x.css"):
        path = mirror_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(rel, encoding="utf-8")
    (mirror_dir / "unrelated.txt").write_text("not part of the mirror", encoding="utf-8")
    return CrawlResult(
        start_url="http://example.com/",
        domain="example.com",
        output_dir=mirror_dir,
        stats=Stats(),
        allowed_domains=frozenset({"example.com", "cdn.example.com"}),
        directories=frozenset(
            {mirror_dir / "example.com", mirror_dir / "example.com/a", mirror_dir / "cdn.example.com"}
        ),
    )


def test_archive_roots(mirrored, mirror_dir):
    assert archive_roots(mirrored) == [mirror_dir / "cdn.example.com", mirror_dir / "example.com"]


def test_archive_roots_fall_back_to_domain(mirrored, mirror_dir):
    cached_run = CrawlResult(
        start_url=mirrored.start_url,
        domain="example.com",
        output_dir=mirror_dir,
        stats=Stats(),
        allowed_domains=mirrored.allowed_domains,
        directories=frozenset(),
    )
    assert archive_roots(cached_run) == [mirror_dir / "example.com"]


def test_create_tar(mirrored, mirror_dir):
    target = create_tar(mirrored)
    assert target == mirror_dir / "example.com.tgz"
    with tarfile.open(target, "r:gz") as tar:
        assert sorted(tar.getnames()) == [
            "cdn.example.com/x.css",
            "example.com/a/b.html",
            "example.com/index.html",
        ]
        assert tar.extractfile("example.com/a/b.html").read() == b"example.com/a/b.html"


def test_create_zip(mirrored, mirror_dir):
    target = create_zip(mirrored)
    assert target == mirror_dir / "example.com.zip"
    with zipfile.ZipFile(target) as zf:
        assert "unrelated.txt" not in zf.namelist()
        assert zf.read("cdn.example.com/x.css") == b"cdn.example.com/x.css"


@pytest.mark.parametrize("url", ["http://example.com/", "HTTPS://Example.com:8443/a"])
def test_validate_start_url_accepts(url):
    assert validate_start_url(url) == url


@pytest.mark.parametrize("url", ["example.com", "ftp://example.com/", "http:///path", "http://[::1/"])
def test_validate_start_url_rejects(url):
    with pytest.raises(ValueError):
        validate_start_url(url)


def test_engine_run_builds_report(basic_config, mirrored, monkeypatch):
    async def fake_mirror(cfg, url):
        assert cfg is basic_config
        return mirrored

    monkeypatch.setattr(engine_module, "start_mirror", fake_mirror)
    report = Engine(basic_config).run("http://example.com/")
    assert report.domain == "example.com"
    assert report.allowed_domains == ["cdn.example.com", "example.com"]


def test_engine_run_rejects_missing_output_directory(basic_config, tmp_path):
    config = basic_config.with_overrides(output_dir=tmp_path / "absent")
    with pytest.raises(NotADirectoryError):
        Engine(config).run("http://example.com/")
