"""
Crawl subsystem: the Selenium session and the per-site crawlers.

`CrawlSession` owns the browser for one tick; the crawlers in
`sources` turn a rendered ranking page into a `RankingSnapshot`.
"""

from .driver import CrawlSession  # noqa: F401
from .sources import SourceCrawler, build_crawlers  # noqa: F401
