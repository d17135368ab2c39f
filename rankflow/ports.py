"""
Downstream collaborators notified by the orchestrator.

The keyword, debate and alarm services live in the web backend; the
orchestrator only needs the narrow interfaces below.  The ``Logging*``
implementations stand in when rankflow runs on its own: they record
what would have been sent and do nothing else.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Sequence

logger = logging.getLogger(__name__)


class KeywordFinalizer(ABC):
    @abstractmethod
    def finalize_daily(self, source: str) -> None:
        """Mark the 19:00 keywords of `source` as that day's daily keywords."""
        raise NotImplementedError


class DebateService(ABC):
    @abstractmethod
    def compute_hot_debates(self) -> List[Any]:
        """Recompute and return the currently trending debates."""
        raise NotImplementedError


class AlarmService(ABC):
    @abstractmethod
    def raise_trend_alarm(self, debates: Sequence[Any]) -> None:
        """Notify subscribers about trending `debates`."""
        raise NotImplementedError


class LoggingKeywordFinalizer(KeywordFinalizer):
    def finalize_daily(self, source: str) -> None:
        logger.info("Daily keywords finalized for %s", source)


class LoggingDebateService(DebateService):
    def compute_hot_debates(self) -> List[Any]:
        logger.info("No debate backend configured; reporting no hot debates")
        return []


class LoggingAlarmService(AlarmService):
    def raise_trend_alarm(self, debates: Sequence[Any]) -> None:
        logger.info("Trend alarm raised for %d debates", len(debates))
