"""
Ranking store interface.

Points for a keyword in one snapshot are ``n - rank + 1`` for a list of
n keywords.  The store keeps, per source:

* the latest real-time snapshot,
* an accumulation of every real-time snapshot since the last daily
  rollup,
* the last daily ranking and an accumulation of daily rankings since
  the last weekly rollup,
* the last weekly ranking,

plus one total ranking per `PeriodType` that sums the per-source
rankings of that period.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from ..models import PeriodType, RankingSnapshot

Ranking = List[Tuple[str, float]]

DEFAULT_LIMIT = 10


class RankingStore(ABC):
    """Abstract base class for ranking stores."""

    def __init__(self, source_names: Iterable[str]) -> None:
        self.source_names: List[str] = list(source_names)

    @abstractmethod
    def save_source_ranking(self, source: str, snapshot: RankingSnapshot) -> None:
        """Replace the real-time ranking of `source` and add it to the day accumulation."""
        raise NotImplementedError

    @abstractmethod
    def save_total_ranking(self, period: PeriodType) -> None:
        """Merge the per-source rankings of `period` into its total ranking."""
        raise NotImplementedError

    @abstractmethod
    def roll_up_day(self) -> None:
        """Turn the day accumulation into the daily ranking of each source."""
        raise NotImplementedError

    @abstractmethod
    def roll_up_week(self) -> None:
        """Turn the week accumulation into the weekly ranking of each source."""
        raise NotImplementedError

    @abstractmethod
    def get_source_ranking(self, source: str, period: PeriodType,
                           limit: Optional[int] = DEFAULT_LIMIT) -> Ranking:
        raise NotImplementedError

    @abstractmethod
    def get_total_ranking(self, period: PeriodType,
                          limit: Optional[int] = DEFAULT_LIMIT) -> Ranking:
        raise NotImplementedError
