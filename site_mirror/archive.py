# File: site_mirror/archive.py
"""site_mirror.archive: packs the mirrored host directories into tar or zip files."""

from __future__ import annotations

import tarfile
import zipfile
from pathlib import Path
from typing import Iterator, List

from site_mirror.crawler.models import CrawlResult
from site_mirror.logger import logger

__all__ = ["archive_roots", "create_tar", "create_zip"]


def archive_roots(result: CrawlResult) -> List[Path]:
    """Host directories to archive: those created during the run, else the primary domain."""
    hosts = set()
    for directory in result.directories:
        try:
            rel = directory.relative_to(result.output_dir)
        except ValueError:
            continue
        if rel.parts:
            hosts.add(rel.parts[0])
    if not hosts:
        hosts.add(result.domain)
    roots = [result.output_dir / host for host in sorted(hosts)]
    return [root for root in roots if root.is_dir()]


def _files(roots: List[Path]) -> Iterator[Path]:
    for root in roots:
        for path in sorted(root.rglob("*")):
            if path.is_file():
                yield path


def create_tar(result: CrawlResult) -> Path:
    """Write ``<domain>.tgz`` next to the mirror and return its path."""
    target = result.output_dir / f"{result.domain}.tgz"
    roots = archive_roots(result)
    logger.debug("Domains are %s", [r.name for r in roots])
    with tarfile.open(target, "w:gz", compresslevel=9) as tar:
        for path in _files(roots):
            tar.add(path, arcname=path.relative_to(result.output_dir).as_posix())
    logger.info("Tar archive: %s", target)
    return target


def create_zip(result: CrawlResult) -> Path:
    """Write ``<domain>.zip`` next to the mirror and return its path."""
    target = result.output_dir / f"{result.domain}.zip"
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in _files(archive_roots(result)):
            zf.write(path, arcname=path.relative_to(result.output_dir).as_posix())
    logger.info("Zip archive: %s", target)
    return target
