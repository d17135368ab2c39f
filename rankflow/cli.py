"""
Command line interface for rankflow.

Subcommands:

* ``run`` – host the hourly and half-past triggers until interrupted.
* ``tick`` – run one hourly tick now, or as if it fired at ``--at``.
* ``debate`` – run one half-past tick.
* ``crawl`` – fetch a single source and print its snapshot as JSON.
* ``show`` – print a stored ranking.

All commands read the same YAML configuration (``--config``) and
``.env`` file.
"""

from __future__ import annotations

import argparse
import functools
import json
import logging
import sys
from datetime import datetime
from typing import List

from .config import Settings, load_settings
from .crawl.driver import CrawlSession, create_browser_config, init_selenium
from .crawl.sources import build_crawlers
from .errors import RankflowError
from .models import PeriodType
from .ports import LoggingAlarmService, LoggingDebateService, LoggingKeywordFinalizer
from .schedule.orchestrator import SchedulerOrchestrator
from .schedule.retry import RetryExecutor
from .schedule.runner import run_forever
from .schedule.windows import TimeWindowEvaluator
from .store.base import RankingStore
from .store.memory_store import MemoryRankingStore
from .store.redis_store import RedisRankingStore

logger = logging.getLogger("rankflow.cli")


def _configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.logging.level.upper(), logging.INFO)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.logging.file:
        handlers.append(logging.FileHandler(settings.logging.file, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=handlers,
    )


def build_store(settings: Settings) -> RankingStore:
    names = [src.name for src in settings.sources]
    if settings.store.backend == "memory":
        return MemoryRankingStore(names)
    return RedisRankingStore.from_url(settings.store.url, names, settings.store.key_prefix)


def build_orchestrator(settings: Settings) -> SchedulerOrchestrator:
    """Wire the orchestrator and its collaborators from `settings`."""
    browser = settings.browser

    def driver_factory():
        return init_selenium(create_browser_config(browser.headless, browser.page_load_timeout))

    return SchedulerOrchestrator(
        settings.sources,
        build_crawlers(settings.sources, browser.wait_timeout),
        build_store(settings),
        LoggingKeywordFinalizer(),
        LoggingDebateService(),
        LoggingAlarmService(),
        retry=RetryExecutor(settings.retry.max_retries, settings.retry.delay_seconds),
        evaluator=TimeWindowEvaluator(
            settings.schedule.daily_hour,
            settings.schedule.daily_minute,
            settings.schedule.timezone,
        ),
        session_factory=functools.partial(CrawlSession, driver_factory),
    )


def cmd_run(args: argparse.Namespace, settings: Settings) -> None:
    """Host both triggers until interrupted."""
    run_forever(build_orchestrator(settings), settings.schedule)


def cmd_tick(args: argparse.Namespace, settings: Settings) -> None:
    """Run one hourly tick."""
    now = datetime.fromisoformat(args.at) if args.at else None
    build_orchestrator(settings).perform_scheduled_tasks(now)


def cmd_debate(args: argparse.Namespace, settings: Settings) -> None:
    build_orchestrator(settings).update_trend_debate()


def cmd_crawl(args: argparse.Namespace, settings: Settings) -> None:
    """Fetch one source and print the snapshot."""
    snapshot = build_orchestrator(settings).crawl_source(args.source)
    if snapshot is None:
        raise RankflowError(f"Crawling {args.source} failed; see log for details")
    print(json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2))


def cmd_show(args: argparse.Namespace, settings: Settings) -> None:
    """Print a stored ranking."""
    store = build_store(settings)
    period = PeriodType.from_name(args.period)
    if args.source:
        ranking = store.get_source_ranking(args.source, period, args.limit)
    else:
        ranking = store.get_total_ranking(period, args.limit)
    for i, (keyword, score) in enumerate(ranking, start=1):
        print(f"{i:02d}. {keyword} ({score:g})")


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="rankflow", description="Trending keyword crawl scheduler")
    parser.add_argument("--config", default="config.yaml", help="YAML config file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_cmd = subparsers.add_parser("run", help="Run the hourly and half-past triggers")
    run_cmd.set_defaults(func=cmd_run)

    tick_cmd = subparsers.add_parser("tick", help="Run one hourly tick")
    tick_cmd.add_argument("--at", help="Pretend the tick fired at this ISO8601 time")
    tick_cmd.set_defaults(func=cmd_tick)

    debate_cmd = subparsers.add_parser("debate", help="Refresh hot debates and raise trend alarms")
    debate_cmd.set_defaults(func=cmd_debate)

    crawl_cmd = subparsers.add_parser("crawl", help="Crawl a single source and print it")
    crawl_cmd.add_argument("--source", required=True, help="Source name, e.g. naver")
    crawl_cmd.set_defaults(func=cmd_crawl)

    show_cmd = subparsers.add_parser("show", help="Print a stored ranking")
    show_cmd.add_argument("--period", default="realtime", choices=[p.value for p in PeriodType])
    show_cmd.add_argument("--source", help="Show a single source instead of the total")
    show_cmd.add_argument("--limit", type=int, default=10, help="Number of keywords to print")
    show_cmd.set_defaults(func=cmd_show)

    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
        _configure_logging(settings)
        args.func(args, settings)
    except RankflowError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
