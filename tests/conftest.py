"""Shared fixtures: a mocked Chrome driver and fake crawl collaborators."""

from __future__ import annotations

from typing import Dict, List
from unittest.mock import MagicMock

import pytest
from selenium import webdriver

from rankflow.crawl.driver import CrawlSession
from rankflow.crawl.sources import SourceCrawler
from rankflow.models import DEFAULT_SOURCES, RankingSnapshot
from rankflow.ports import AlarmService, DebateService, KeywordFinalizer
from rankflow.schedule.orchestrator import SchedulerOrchestrator
from rankflow.schedule.retry import RetryExecutor
from rankflow.store.base import RankingStore


@pytest.fixture
def mock_driver():
    """Mock Selenium WebDriver for testing."""
    driver = MagicMock(spec=webdriver.Chrome)
    driver.page_source = "<html><body>Test content</body></html>"
    return driver


def make_snapshot(source: str, keywords: List[str]) -> RankingSnapshot:
    return RankingSnapshot.build(source, keywords)


@pytest.fixture
def crawlers() -> Dict[str, MagicMock]:
    """One mocked crawler per default source, each returning a small snapshot."""
    result = {}
    for source in DEFAULT_SOURCES:
        crawler = MagicMock(spec=SourceCrawler)
        crawler.fetch.return_value = make_snapshot(source.name, [f"{source.name}-1", f"{source.name}-2"])
        result[source.name] = crawler
    return result


@pytest.fixture
def session(mock_driver):
    session = MagicMock(spec=CrawlSession)
    session.driver = mock_driver
    session.__enter__.return_value = session
    return session


@pytest.fixture
def collaborators():
    return {
        "store": MagicMock(spec=RankingStore),
        "keyword_finalizer": MagicMock(spec=KeywordFinalizer),
        "debate_service": MagicMock(spec=DebateService),
        "alarm_service": MagicMock(spec=AlarmService),
    }


@pytest.fixture
def no_wait_retry():
    """Retry executor whose backoff returns immediately and records delays."""
    delays: List[float] = []

    def wait(seconds: float) -> bool:
        delays.append(seconds)
        return False

    executor = RetryExecutor(wait=wait)
    executor.delays = delays  # type: ignore[attr-defined]
    return executor


@pytest.fixture
def orchestrator(crawlers, session, collaborators, no_wait_retry) -> SchedulerOrchestrator:
    return SchedulerOrchestrator(
        DEFAULT_SOURCES,
        crawlers,
        collaborators["store"],
        collaborators["keyword_finalizer"],
        collaborators["debate_service"],
        collaborators["alarm_service"],
        retry=no_wait_retry,
        session_factory=lambda: session,
    )
