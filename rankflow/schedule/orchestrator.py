"""
Tick orchestration.

`SchedulerOrchestrator.perform_scheduled_tasks` is called at the top of
every hour.  Each tick crawls all sources inside a single browser
session and saves the real-time total ranking.  The 19:00 tick then
rolls the day up and finalizes the daily keywords of every source, and
on Mondays it also rolls the week up.  `update_trend_debate` is the
independent half-past trigger that refreshes trending debates and
raises alarms for them.

Failures are contained at the smallest scope possible: a source that
cannot be crawled only loses its own data, and nothing a tick does is
allowed to propagate to the scheduler.
"""

from __future__ import annotations

import functools
import logging
import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..crawl.driver import CrawlSession
from ..crawl.sources import SourceCrawler
from ..errors import UnknownSourceError
from ..models import CrawlTask, PeriodType, RankingSnapshot, Source, TaskKind
from ..ports import AlarmService, DebateService, KeywordFinalizer
from ..store.base import RankingStore
from .retry import RetryExecutor
from .windows import TimeWindowEvaluator

logger = logging.getLogger(__name__)


class SchedulerOrchestrator:
    """Sequences the crawl, aggregation and notification steps of a tick.

    Args:
        sources: Sources crawled every tick, in crawl order.
        crawlers: Crawler for each source, keyed by source name.
        store: Where snapshots and rollups are written.
        keyword_finalizer: Notified once per source after the daily rollup.
        debate_service: Computes hot debates for the half-past trigger.
        alarm_service: Receives the hot debates.
        retry: Wraps each source crawl.
        evaluator: Classifies tick timestamps.
        session_factory: Returns a new, unopened `CrawlSession`.
    """

    def __init__(
        self,
        sources: Sequence[Source],
        crawlers: Dict[str, SourceCrawler],
        store: RankingStore,
        keyword_finalizer: KeywordFinalizer,
        debate_service: DebateService,
        alarm_service: AlarmService,
        *,
        retry: Optional[RetryExecutor] = None,
        evaluator: Optional[TimeWindowEvaluator] = None,
        session_factory: Optional[Callable[[], CrawlSession]] = None,
    ) -> None:
        self.sources = list(sources)
        self.crawlers = crawlers
        self.store = store
        self.keyword_finalizer = keyword_finalizer
        self.debate_service = debate_service
        self.alarm_service = alarm_service
        self.retry = retry or RetryExecutor()
        self.evaluator = evaluator or TimeWindowEvaluator()
        self.session_factory = session_factory or CrawlSession
        # At most one crawl session in flight across overlapping ticks.
        self._crawl_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Trigger entry points
    # ------------------------------------------------------------------

    def perform_scheduled_tasks(self, now: Optional[datetime] = None) -> None:
        """Run one hourly tick as if it fired at `now` (default: current time)."""
        logger.info("Starting scheduled tasks...")
        try:
            plan = self.evaluator.plan(now)
            if TaskKind.DAILY in plan:
                self.perform_daily_tasks()
                if TaskKind.WEEKLY in plan:
                    self.perform_weekly_tasks()
            else:
                self.perform_hourly_tasks()
        except Exception:  # noqa: BLE001
            logger.exception("Scheduled tick failed")
        logger.info("Scheduled tasks completed.")

    def update_trend_debate(self) -> None:
        """Half-past trigger: recompute hot debates and raise trend alarms."""
        try:
            debates = self.debate_service.compute_hot_debates()
            self.alarm_service.raise_trend_alarm(debates)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to update trend debates")

    # ------------------------------------------------------------------
    # Task sets
    # ------------------------------------------------------------------

    def perform_hourly_tasks(self) -> None:
        if not self._crawl_lock.acquire(blocking=False):
            logger.warning("Previous crawl is still running; skipping this tick's crawl")
            return
        session: Optional[CrawlSession] = None
        try:
            session = self.session_factory()
            session.open()
            for task in self._crawl_tasks(session):
                task.action()
            self.store.save_total_ranking(PeriodType.REAL_TIME)
        except Exception:  # noqa: BLE001
            logger.exception("Error during hourly task")
        finally:
            if session is not None:
                session.close()
            self._crawl_lock.release()

    def perform_daily_tasks(self) -> None:
        logger.info("Starting daily tasks...")
        self.perform_hourly_tasks()

        self.store.roll_up_day()
        self.store.save_total_ranking(PeriodType.DAY)

        for source in self.sources:
            try:
                self.keyword_finalizer.finalize_daily(source.name)
            except Exception:  # noqa: BLE001
                logger.exception("Failed to finalize daily keywords for %s", source.label)
        logger.info("Daily tasks completed.")

    def perform_weekly_tasks(self) -> None:
        logger.info("Starting weekly tasks...")
        self.store.roll_up_week()
        self.store.save_total_ranking(PeriodType.WEEK)
        logger.info("Weekly tasks completed.")

    # ------------------------------------------------------------------
    # One-off crawl
    # ------------------------------------------------------------------

    def crawl_source(self, name: str) -> Optional[RankingSnapshot]:
        """Crawl a single source in its own session without touching the store."""
        source = self._source(name)
        crawler = self.crawlers[source.name]
        with self._crawl_lock:
            with self.session_factory() as session:
                return self.retry.run(
                    functools.partial(crawler.fetch, session.driver, source.url),
                    _label(source),
                )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _source(self, name: str) -> Source:
        for source in self.sources:
            if source.name == name:
                return source
        raise UnknownSourceError(
            f"Unknown source '{name}'; expected one of: "
            + ", ".join(src.name for src in self.sources)
        )

    def _crawl_tasks(self, session: CrawlSession) -> List[CrawlTask]:
        return [
            CrawlTask(
                name=_label(source),
                action=functools.partial(self._collect, session, source),
            )
            for source in self.sources
        ]

    def _collect(self, session: CrawlSession, source: Source) -> None:
        crawler = self.crawlers.get(source.name)
        if crawler is None:
            logger.error("No crawler configured for %s; skipping", source.label)
            return
        snapshot = self.retry.run(
            functools.partial(crawler.fetch, session.driver, source.url),
            _label(source),
        )
        if snapshot is None:
            return
        try:
            self.store.save_source_ranking(source.name, snapshot)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to store %s ranking", source.label)


def _label(source: Source) -> str:
    return f"{source.label} data collection"
