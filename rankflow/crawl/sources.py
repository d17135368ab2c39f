"""
Per-site ranking crawlers.

Each crawler knows how to recognise a loaded ranking page (its
`wait_selector`) and how to pull the ordered keywords out of the
rendered HTML.  The pages are parsed with BeautifulSoup after Selenium
has finished rendering them; Selenium is only used to navigate and to
wait.

A crawler raises Selenium's ``TimeoutException`` when the ranking list
never appears and `ParseError` when the page loaded but contained no
entries.  Site layouts change often; the selectors are class attributes
so they can be adjusted without touching the fetch logic.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from bs4 import BeautifulSoup

from ..errors import ParseError, UnknownSourceError
from ..models import RankingSnapshot, Source
from .driver import DEFAULT_WAIT_TIMEOUT, Driver, get_page_html, navigate_and_wait

logger = logging.getLogger(__name__)

KST = ZoneInfo("Asia/Seoul")
MAX_KEYWORDS = 10

Entry = Tuple[str, Optional[str]]


def _clean(text: str) -> str:
    return " ".join(text.split())


def _dedupe(entries: Iterable[Entry], limit: int = MAX_KEYWORDS) -> List[Entry]:
    seen = set()
    result: List[Entry] = []
    for keyword, link in entries:
        if not keyword or keyword in seen:
            continue
        seen.add(keyword)
        result.append((keyword, link))
        if len(result) >= limit:
            break
    return result


class SourceCrawler(ABC):
    """Fetch the ranked keywords of a single site."""

    name: str = ""
    wait_selector: Optional[str] = None

    def __init__(self, wait_timeout: float = DEFAULT_WAIT_TIMEOUT) -> None:
        self.wait_timeout = wait_timeout

    @abstractmethod
    def parse(self, html: str) -> List[Entry]:
        """Return ``(keyword, link)`` pairs in rank order."""
        raise NotImplementedError

    def fetch(self, driver: Driver, url: str) -> RankingSnapshot:
        navigate_and_wait(driver, url, self.wait_selector, self.wait_timeout)
        entries = _dedupe(self.parse(get_page_html(driver)))
        if not entries:
            raise ParseError(f"No ranking entries found on {url}")
        logger.info("Fetched %d keywords from %s", len(entries), self.name)
        return RankingSnapshot.build(
            self.name,
            [kw for kw, _ in entries],
            [link for _, link in entries],
            captured_at=datetime.now(KST),
        )


class SelectorCrawler(SourceCrawler):
    """Crawler whose entries are the text of the elements under `item_selector`."""

    item_selector: str = ""

    def parse(self, html: str) -> List[Entry]:
        soup = BeautifulSoup(html, "html.parser")
        entries: List[Entry] = []
        for node in soup.select(self.item_selector):
            anchor = node if node.name == "a" else node.find_parent("a")
            if anchor is None:
                anchor = node.find("a")
            link = anchor.get("href") if anchor is not None else None
            entries.append((_clean(node.get_text(" ")), link))
        return entries


class NaverCrawler(SelectorCrawler):
    """Naver real-time keywords as mirrored by signal.bz."""

    name = "naver"
    wait_selector = "div.realtime-rank"
    item_selector = "div.realtime-rank span.rank-text"


class NateCrawler(SelectorCrawler):
    name = "nate"
    wait_selector = "ol.kwd_list"
    item_selector = "ol.kwd_list li span.txt_rank"


class ZumCrawler(SelectorCrawler):
    name = "zum"
    wait_selector = "div.issue_keyword"
    item_selector = "div.issue_keyword li span.keyword"


class NamuwikiCrawler(SelectorCrawler):
    """Namuwiki trending pages as collected by the namu-soup blog."""

    name = "namuwiki"
    wait_selector = "ol"
    item_selector = "div.entry-content ol li"


class GoogleTrendsCrawler(SourceCrawler):
    """Google Trends daily RSS feed for Korea."""

    name = "google"
    wait_selector = None

    def parse(self, html: str) -> List[Entry]:
        soup = BeautifulSoup(html, "html.parser")
        entries: List[Entry] = []
        for item in soup.find_all("item"):
            title = item.find("title")
            if title is not None:
                entries.append((_clean(title.get_text()), None))
        return entries


CRAWLER_TYPES = {
    cls.name: cls
    for cls in (NaverCrawler, NateCrawler, ZumCrawler, GoogleTrendsCrawler, NamuwikiCrawler)
}


def build_crawlers(sources: Iterable[Source],
                   wait_timeout: float = DEFAULT_WAIT_TIMEOUT) -> Dict[str, SourceCrawler]:
    """Instantiate one crawler per configured source."""
    crawlers: Dict[str, SourceCrawler] = {}
    for source in sources:
        cls = CRAWLER_TYPES.get(source.name)
        if cls is None:
            raise UnknownSourceError(f"No crawler registered for source '{source.name}'")
        crawlers[source.name] = cls(wait_timeout=wait_timeout)
    return crawlers
