# File: tests/test_storage.py
from pathlib import Path

import pytest

from site_mirror.crawler.storage import StorageWriter


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://example.com/", "example.com/index.html"),
        ("http://example.com", "example.com/index.html"),
        ("http://example.com/a/b.html", "example.com/a/b.html"),
        ("http://example.com/docs/", "example.com/docs/index.html"),
        ("http://example.com:8080/a", "example.com/a"),
        ("http://example.com/a?x=1", "example.com/a"),
    ],
)
def test_store_path(storage, url, expected):
    assert storage.store_path(url) == Path(expected)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://example.com/a/b.html", "example.com/b.html"),
        ("http://example.com/x/y/", "example.com/index.html"),
        ("http://example.com/c.css", "example.com/c.css"),
    ],
)
def test_store_path_flat(mirror_dir, stats, url, expected):
    flat = StorageWriter(mirror_dir, stats, flat=True)
    assert flat.store_path(url) == Path(expected)


def test_store_path_without_host(storage):
    assert storage.store_path("file:///tmp/x") is None


def test_store_writes_and_counts(storage, stats, mirror_dir):
    path = storage.store_path("http://example.com/a/b/c.html")
    assert storage.store(b"hello", path)
    assert (mirror_dir / "example.com/a/b/c.html").read_bytes() == b"hello"
    assert stats.stored_files == 1
    assert stats.stored_bytes == 5
    assert storage.exists(path)
    assert storage.created_directories() == {
        mirror_dir / "example.com",
        mirror_dir / "example.com/a",
        mirror_dir / "example.com/a/b",
    }


def test_exists_ignores_empty_files(storage, mirror_dir):
    path = Path("example.com/empty.html")
    (mirror_dir / "example.com").mkdir()
    (mirror_dir / path).write_bytes(b"")
    assert not storage.exists(path)
    assert not storage.exists(None)


def test_store_refuses_to_overwrite_directory(storage, stats, mirror_dir):
    (mirror_dir / "example.com/a").mkdir(parents=True)
    assert not storage.store(b"data", Path("example.com/a"))
    assert (mirror_dir / "example.com/a").is_dir()
    assert stats.stored_files == 0


def test_store_replaces_file_standing_in_for_directory(storage, mirror_dir):
    storage.store(b"page", Path("example.com/a"))
    assert (mirror_dir / "example.com/a").is_file()

    assert storage.store(b"nested", Path("example.com/a/b.html"))
    assert (mirror_dir / "example.com/a").is_dir()
    assert (mirror_dir / "example.com/a/b.html").read_bytes() == b"nested"


def test_store_failure_is_reported_not_raised(mirror_dir, stats, monkeypatch):
    storage = StorageWriter(mirror_dir, stats)

    def boom(self, data):
        raise PermissionError("read-only")

    monkeypatch.setattr(Path, "write_bytes", boom)
    assert storage.store(b"x", Path("example.com/x.html")) is False
    assert stats.stored_files == 0
