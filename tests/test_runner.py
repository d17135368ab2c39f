"""Tests for the APScheduler trigger wiring."""

from __future__ import annotations

from apscheduler.schedulers.background import BackgroundScheduler

from rankflow.config import ScheduleSettings
from rankflow.schedule.runner import DEBATE_JOB_ID, HOURLY_JOB_ID, build_scheduler


def test_build_scheduler_registers_both_triggers(orchestrator) -> None:
    scheduler = build_scheduler(orchestrator, ScheduleSettings(), BackgroundScheduler)

    hourly = scheduler.get_job(HOURLY_JOB_ID)
    debate = scheduler.get_job(DEBATE_JOB_ID)

    assert hourly.func == orchestrator.perform_scheduled_tasks
    assert debate.func == orchestrator.update_trend_debate
    assert "minute='0'" in str(hourly.trigger)
    assert "minute='30'" in str(debate.trigger)
    for job in (hourly, debate):
        assert job.max_instances == 1
        assert job.coalesce is True


def test_custom_minutes(orchestrator) -> None:
    settings = ScheduleSettings(hourly_minute=5, debate_minute=35)
    scheduler = build_scheduler(orchestrator, settings, BackgroundScheduler)

    assert "minute='5'" in str(scheduler.get_job(HOURLY_JOB_ID).trigger)
    assert "minute='35'" in str(scheduler.get_job(DEBATE_JOB_ID).trigger)
