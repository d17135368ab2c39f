"""
Redis-backed ranking store.

Every ranking is a sorted set whose members are keywords and whose
scores are accumulated points.  Keys, with the default ``ranking``
prefix::

    ranking:<source>:realtime     latest snapshot
    ranking:<source>:day:acc      real-time snapshots since the last daily rollup
    ranking:<source>:day          last daily ranking
    ranking:<source>:week:acc     daily rankings since the last weekly rollup
    ranking:<source>:week         last weekly ranking
    ranking:total:<period>        sum of the per-source rankings of a period

Writes that touch more than one key go through a transactional
pipeline so a reader never sees a half-rolled day.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import redis

from ..models import PeriodType, RankingSnapshot
from .base import DEFAULT_LIMIT, Ranking, RankingStore

logger = logging.getLogger(__name__)


class RedisRankingStore(RankingStore):
    def __init__(self, client: redis.Redis, source_names: Iterable[str],
                 key_prefix: str = "ranking") -> None:
        super().__init__(source_names)
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, source_names: Iterable[str],
                 key_prefix: str = "ranking") -> "RedisRankingStore":
        client = redis.Redis.from_url(url, decode_responses=True)
        return cls(client, source_names, key_prefix)

    # ------------------------------------------------------------------
    # Key helpers
    # ------------------------------------------------------------------

    def source_key(self, source: str, period: PeriodType) -> str:
        return f"{self.key_prefix}:{source}:{period.value}"

    def accumulation_key(self, source: str, period: PeriodType) -> str:
        return f"{self.source_key(source, period)}:acc"

    def total_key(self, period: PeriodType) -> str:
        return f"{self.key_prefix}:total:{period.value}"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_source_ranking(self, source: str, snapshot: RankingSnapshot) -> None:
        scores = snapshot.scores()
        realtime_key = self.source_key(source, PeriodType.REAL_TIME)
        acc_key = self.accumulation_key(source, PeriodType.DAY)
        pipe = self.client.pipeline(transaction=True)
        pipe.delete(realtime_key)
        if scores:
            pipe.zadd(realtime_key, scores)
            for keyword, points in scores.items():
                pipe.zincrby(acc_key, points, keyword)
        pipe.execute()
        logger.debug("Saved %d keywords to %s", len(scores), realtime_key)

    def save_total_ranking(self, period: PeriodType) -> None:
        keys = [self.source_key(source, period) for source in self.source_names]
        dest = self.total_key(period)
        pipe = self.client.pipeline(transaction=True)
        pipe.delete(dest)
        pipe.zunionstore(dest, keys, aggregate="SUM")
        pipe.execute()
        logger.info("Saved %s total ranking", period.value)

    def roll_up_day(self) -> None:
        pipe = self.client.pipeline(transaction=True)
        for source in self.source_names:
            acc_key = self.accumulation_key(source, PeriodType.DAY)
            day_key = self.source_key(source, PeriodType.DAY)
            week_acc_key = self.accumulation_key(source, PeriodType.WEEK)
            pipe.zunionstore(day_key, [acc_key])
            pipe.zunionstore(week_acc_key, [week_acc_key, acc_key], aggregate="SUM")
            pipe.delete(acc_key)
        pipe.execute()
        logger.info("Rolled up daily rankings for %d sources", len(self.source_names))

    def roll_up_week(self) -> None:
        pipe = self.client.pipeline(transaction=True)
        for source in self.source_names:
            week_acc_key = self.accumulation_key(source, PeriodType.WEEK)
            pipe.zunionstore(self.source_key(source, PeriodType.WEEK), [week_acc_key])
            pipe.delete(week_acc_key)
        pipe.execute()
        logger.info("Rolled up weekly rankings for %d sources", len(self.source_names))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _read(self, key: str, limit: Optional[int]) -> Ranking:
        end = -1 if limit is None else limit - 1
        return [
            (member, float(score))
            for member, score in self.client.zrevrange(key, 0, end, withscores=True)
        ]

    def get_source_ranking(self, source: str, period: PeriodType,
                           limit: Optional[int] = DEFAULT_LIMIT) -> Ranking:
        return self._read(self.source_key(source, period), limit)

    def get_total_ranking(self, period: PeriodType,
                          limit: Optional[int] = DEFAULT_LIMIT) -> Ranking:
        return self._read(self.total_key(period), limit)
