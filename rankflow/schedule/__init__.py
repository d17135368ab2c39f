"""
Scheduling subsystem.

`TimeWindowEvaluator` classifies a tick, `RetryExecutor` wraps each
source crawl, `SchedulerOrchestrator` sequences one tick end to end and
`runner` hosts the two recurring triggers on APScheduler.
"""

from .orchestrator import SchedulerOrchestrator  # noqa: F401
from .retry import RetryExecutor  # noqa: F401
from .windows import TimeWindowEvaluator  # noqa: F401
