# site_mirror/crawler/storage.py
"""
Storage writer: maps URLs onto the mirror directory and writes their bodies.
"""
from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Optional, Set, Union
from urllib.parse import urlsplit

from site_mirror.crawler.models import Stats
from site_mirror.logger import logger


class StorageWriter:
    """Writes fetched resources under ``root/<host>/<path>``."""

    def __init__(self, root: Union[str, Path], stats: Stats, flat: bool = False) -> None:
        self.root = Path(root)
        self.stats = stats
        self.flat = flat
        self._directories: Set[Path] = set()

    def store_path(self, url: str) -> Optional[Path]:
        """
        Relative store path for *url*, or ``None`` when it cannot be stored.

        ``http://example.com/`` → ``example.com/index.html``; in flat mode only
        the last path segment is kept under the host directory.
        """
        parts = urlsplit(url)
        host = parts.hostname
        if not host:
            logger.warning("No domain in %s", url)
            return None

        path = parts.path or "/"
        if path.endswith("/"):
            path += "index.html"
        path = path.lstrip("/")

        if self.flat:
            return Path(host, posixpath.basename(path))

        if path.endswith("/"):
            logger.debug("Skipping path that looks like a directory [%s]", path)
            return None

        store = Path(host, *[p for p in path.split("/") if p])
        logger.debug("Store path is [%s]", store)
        return store

    def absolute(self, path: Path) -> Path:
        return self.root / path

    def exists(self, path: Optional[Path]) -> bool:
        """True if a non-empty file is already stored at *path*."""
        if path is None:
            return False
        target = self.absolute(path)
        return target.is_file() and target.stat().st_size > 0

    def _make_parents(self, directory: Path) -> None:
        current = self.root
        for part in directory.relative_to(self.root).parts:
            current = current / part
            if current.exists() and not current.is_dir():
                logger.debug("Removing file that should be a directory [%s]", current)
                current.unlink()
            if not current.exists():
                current.mkdir()
            self._directories.add(current)

    def store(self, data: bytes, path: Path) -> bool:
        """
        Write *data* at *path* (relative to the root). Returns False when the
        file could not be written; the failure is logged, never raised.
        """
        target = self.absolute(path)
        logger.debug("Saving [%s]", target)

        if target.is_dir():
            logger.warning("File path is already a directory [%s]", target)
            return False

        try:
            self._make_parents(target.parent)
        except OSError as exc:
            logger.warning("Could not make directory %s: %s", target.parent, exc)
            return False

        try:
            target.write_bytes(data)
        except OSError as exc:
            logger.warning("Could not write file [%s]: %s", target, exc)
            return False

        self.stats.record_store(len(data))
        return True

    def created_directories(self) -> Set[Path]:
        """Directories made or reused while storing; input for the archiver."""
        return set(self._directories)
