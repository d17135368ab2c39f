"""
Recurring triggers hosted on APScheduler.

Two cron jobs drive the orchestrator: the crawl tick at the top of every
hour and the trend debate refresh at half past.  Both run in the
configured timezone with ``max_instances=1`` so a tick that overruns
the hour is never started twice, and ``coalesce=True`` so a backlog of
missed runs collapses into one.
"""

from __future__ import annotations

import logging
from typing import Optional, Type

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from ..config import ScheduleSettings
from .orchestrator import SchedulerOrchestrator

logger = logging.getLogger(__name__)

HOURLY_JOB_ID = "perform_scheduled_tasks"
DEBATE_JOB_ID = "update_trend_debate"


def build_scheduler(
    orchestrator: SchedulerOrchestrator,
    settings: Optional[ScheduleSettings] = None,
    scheduler_cls: Type[BaseScheduler] = BlockingScheduler,
) -> BaseScheduler:
    """Create a scheduler with the hourly and half-past jobs registered."""
    settings = settings or ScheduleSettings()
    scheduler = scheduler_cls(timezone=settings.timezone)
    job_defaults = {"max_instances": 1, "coalesce": True, "misfire_grace_time": 300}
    scheduler.add_job(
        orchestrator.perform_scheduled_tasks,
        CronTrigger(minute=settings.hourly_minute, timezone=settings.timezone),
        id=HOURLY_JOB_ID,
        **job_defaults,
    )
    scheduler.add_job(
        orchestrator.update_trend_debate,
        CronTrigger(minute=settings.debate_minute, timezone=settings.timezone),
        id=DEBATE_JOB_ID,
        **job_defaults,
    )
    return scheduler


def start_background(orchestrator: SchedulerOrchestrator,
                     settings: Optional[ScheduleSettings] = None) -> BackgroundScheduler:
    """Start the triggers on a background thread and return the scheduler."""
    scheduler = build_scheduler(orchestrator, settings, BackgroundScheduler)
    scheduler.start()
    logger.info("Background scheduler started")
    return scheduler


def run_forever(orchestrator: SchedulerOrchestrator,
                settings: Optional[ScheduleSettings] = None) -> None:
    """Block the calling thread running the triggers until interrupted."""
    settings = settings or ScheduleSettings()
    scheduler = build_scheduler(orchestrator, settings, BlockingScheduler)
    logger.info("Scheduler started; hourly tick at :%02d, debate refresh at :%02d",
                settings.hourly_minute, settings.debate_minute)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
