"""
Ranking stores.

`RankingStore` is the interface the orchestrator writes through.
`RedisRankingStore` is the production backend; `MemoryRankingStore`
keeps the same semantics in process for local runs and tests.
"""

from .base import RankingStore  # noqa: F401
from .memory_store import MemoryRankingStore  # noqa: F401
from .redis_store import RedisRankingStore  # noqa: F401
