"""
Data model shared by the crawl, store and schedule packages.

`PeriodType` selects the aggregation bucket a ranking belongs to.
`Source` describes one ranking site polled every tick, and
`RankingSnapshot` is what a source crawler hands back after a
successful fetch.  `CrawlTask` pairs a label with the zero-argument
callable the retry executor runs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class PeriodType(Enum):
    """Aggregation granularity of a ranking."""

    REAL_TIME = "realtime"
    DAY = "day"
    WEEK = "week"

    @classmethod
    def from_name(cls, value: str) -> "PeriodType":
        """Look up a period by its value (``realtime``) or member name."""
        normalized = value.strip().lower().replace("-", "_")
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown period type: {value}")


class TaskKind(Enum):
    """Task sets a single tick may run."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class Source:
    """A ranking site polled for trending keywords."""

    name: str     # 'naver' | 'nate' | 'zum' | 'google' | 'namuwiki'
    label: str    # human readable, used in log lines
    url: str


DEFAULT_SOURCES: List[Source] = [
    Source("naver", "Naver", "https://www.signal.bz/"),
    Source("nate", "Nate", "https://m.nate.com/"),
    Source("zum", "Zum", "https://news.zum.com/"),
    Source("google", "Google", "https://trends.google.co.kr/trending/rss?geo=KR"),
    Source("namuwiki", "Namuwiki", "https://blog.anteater-lab.link/namu-soup/"),
]


@dataclass
class RankedKeyword:
    rank: int
    keyword: str
    link: Optional[str] = None


@dataclass
class RankingSnapshot:
    """Ordered keywords captured from one source at one point in time."""

    source: str
    captured_at: str              # ISO8601
    keywords: List[RankedKeyword] = field(default_factory=list)

    def scores(self) -> Dict[str, float]:
        """Map each keyword to its points, ``n - rank + 1`` for n entries.

        Duplicate keywords keep the points of their best rank.
        """
        total = len(self.keywords)
        points: Dict[str, float] = {}
        for entry in self.keywords:
            value = float(total - entry.rank + 1)
            if value > points.get(entry.keyword, 0.0):
                points[entry.keyword] = value
        return points

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def build(cls, source: str, keywords: List[str], links: Optional[List[Optional[str]]] = None,
              captured_at: Optional[datetime] = None) -> "RankingSnapshot":
        """Create a snapshot from keywords listed in rank order."""
        links = links or [None] * len(keywords)
        stamp = (captured_at or datetime.now()).isoformat(timespec="seconds")
        entries = [
            RankedKeyword(rank=i + 1, keyword=kw, link=link)
            for i, (kw, link) in enumerate(zip(keywords, links))
        ]
        return cls(source=source, captured_at=stamp, keywords=entries)


@dataclass
class CrawlTask:
    """A named unit of work built per tick and never persisted."""

    name: str
    action: Callable[[], Any]
