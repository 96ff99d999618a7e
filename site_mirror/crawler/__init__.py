"""
Crawl engine of SiteMirror: frontier, scope, fetch, process, extract, store.
"""
from site_mirror.crawler.crawler import MirrorCrawler
from site_mirror.crawler.models import CrawlResult, Stats

__all__ = ["MirrorCrawler", "CrawlResult", "Stats"]
