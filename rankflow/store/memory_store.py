"""In-process ranking store used for dry runs and tests."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import Dict, Iterable, Optional

from ..models import PeriodType, RankingSnapshot
from .base import DEFAULT_LIMIT, Ranking, RankingStore

logger = logging.getLogger(__name__)


def _top(counter: Counter, limit: Optional[int]) -> Ranking:
    ordered = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    return ordered if limit is None else ordered[:limit]


class MemoryRankingStore(RankingStore):
    """Keeps every ranking in dictionaries of `Counter` objects."""

    def __init__(self, source_names: Iterable[str]) -> None:
        super().__init__(source_names)
        self._rankings: Dict[PeriodType, Dict[str, Counter]] = {
            period: defaultdict(Counter) for period in PeriodType
        }
        self._day_acc: Dict[str, Counter] = defaultdict(Counter)
        self._week_acc: Dict[str, Counter] = defaultdict(Counter)
        self._totals: Dict[PeriodType, Counter] = {period: Counter() for period in PeriodType}

    def save_source_ranking(self, source: str, snapshot: RankingSnapshot) -> None:
        scores = Counter(snapshot.scores())
        self._rankings[PeriodType.REAL_TIME][source] = scores
        self._day_acc[source].update(scores)
        logger.debug("Saved %d keywords for %s", len(scores), source)

    def save_total_ranking(self, period: PeriodType) -> None:
        total: Counter = Counter()
        for source in self.source_names:
            total.update(self._rankings[period].get(source, Counter()))
        self._totals[period] = total
        logger.debug("Saved %s total ranking with %d keywords", period.value, len(total))

    def roll_up_day(self) -> None:
        for source in self.source_names:
            day = self._day_acc.pop(source, Counter())
            self._rankings[PeriodType.DAY][source] = day
            self._week_acc[source].update(day)

    def roll_up_week(self) -> None:
        for source in self.source_names:
            self._rankings[PeriodType.WEEK][source] = self._week_acc.pop(source, Counter())

    def get_source_ranking(self, source: str, period: PeriodType,
                           limit: Optional[int] = DEFAULT_LIMIT) -> Ranking:
        return _top(self._rankings[period].get(source, Counter()), limit)

    def get_total_ranking(self, period: PeriodType,
                          limit: Optional[int] = DEFAULT_LIMIT) -> Ranking:
        return _top(self._totals[period], limit)
