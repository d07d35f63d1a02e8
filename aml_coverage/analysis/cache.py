"""
Analysis Cache — optional memoization for AnalysisResult objects.

Entries are keyed by (requirement id, content signature) where the signature
hashes the full requirement, every rule handed to the analysis and the
analyzer settings that shape the result (matcher table, obligation cap).  A
change to any of them produces a different key, so a cached result can never
be stale, even when analyzers with different settings share one cache.
Results are deep-copied on the way in and out.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any

from aml_coverage.models.schemas import AnalysisResult, Requirement, Rule
from aml_coverage.utils.hashing import content_signature

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


class AnalysisCache:
    """Bounded LRU cache of analysis results."""

    def __init__(self, max_entries: int = 256):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: OrderedDict[CacheKey, AnalysisResult] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(
        requirement: Requirement,
        rules: list[Rule],
        analyzer_settings: dict[str, Any] | None = None,
    ) -> CacheKey:
        signature = content_signature({
            "requirement": requirement.model_dump(mode="json"),
            "rules": [r.model_dump(mode="json") for r in rules],
            "analyzer": analyzer_settings or {},
        })
        return requirement.id, signature

    def get(self, key: CacheKey) -> AnalysisResult | None:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                logger.debug(f"Cache miss for {key[0]}")
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            logger.debug(f"Cache hit for {key[0]}")
            return result.model_copy(deep=True)

    def put(self, key: CacheKey, result: AnalysisResult) -> None:
        with self._lock:
            self._entries[key] = result.model_copy(deep=True)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cached analysis for {evicted[0]}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, int]:
        return {"entries": len(self), "hits": self.hits, "misses": self.misses, "max_entries": self.max_entries}
