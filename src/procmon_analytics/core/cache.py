"""
Bounded memoization of analytics results.

Entries are keyed by an input-shape fingerprint. Once the cache holds
``max_entries`` results new inserts are refused; nothing is ever evicted.
"""

import hashlib
from typing import Dict, Optional

from loguru import logger

from ..models.events import AggregateStatistics
from ..models.results import AnalyticsResult


def compute_fingerprint(
    statistics: AggregateStatistics,
    source_hash: Optional[str] = None,
    source_timestamp: Optional[str] = None,
) -> str:
    """
    Derive a cache key from the shape of the input.

    Only the record count and the size of each mapping take part, plus the
    optional caller-supplied file hash and timestamp. Two inputs with the
    same shape and no source hash collide.

    Args:
        statistics: Aggregates being analysed
        source_hash: Optional content hash of the source file(s)
        source_timestamp: Optional modification time of the source file(s)

    Returns:
        Hex SHA-256 fingerprint
    """
    record_count = sum(statistics.results.values())
    parts = [
        str(record_count),
        str(len(statistics.process_types)),
        str(len(statistics.operations)),
        str(len(statistics.results)),
        source_hash or "",
        source_timestamp or "",
    ]
    return hashlib.sha256('|'.join(parts).encode()).hexdigest()


class ResultCache:
    """Fixed-capacity fingerprint to result map."""

    def __init__(self, max_entries: int = 100, enabled: bool = True):
        """
        Initialize result cache.

        Args:
            max_entries: Capacity after which inserts are refused
            enabled: When False every lookup misses and nothing is stored
        """
        if max_entries < 0:
            raise ValueError("max_entries cannot be negative")
        self.max_entries = max_entries
        self.enabled = enabled
        self._entries: Dict[str, AnalyticsResult] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fingerprint: str) -> bool:
        return fingerprint in self._entries

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.max_entries

    def get(self, fingerprint: str) -> Optional[AnalyticsResult]:
        """
        Look up a cached result.

        Returns:
            A private copy of the stored result, None on a miss
        """
        if not self.enabled:
            return None
        result = self._entries.get(fingerprint)
        if result is None:
            self.misses += 1
            return None
        self.hits += 1
        # Nested statistics are plain dicts; callers must not reach the stored entry
        return result.copy(deep=True)

    def put(self, fingerprint: str, result: AnalyticsResult) -> bool:
        """
        Store a result.

        Returns:
            True if the result was stored
        """
        if not self.enabled:
            return False
        if fingerprint in self._entries:
            return True
        if self.is_full:
            logger.debug(f"Result cache full ({self.max_entries} entries), not caching {fingerprint[:12]}")
            return False
        self._entries[fingerprint] = result.copy(deep=True)
        return True

    def clear(self) -> None:
        """Drop all entries and reset counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0
