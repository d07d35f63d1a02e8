"""
Evidence Repository — lookup, filtering and statistics over rule-testing
evidence (backtests, threshold analyses, scenario tests).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable

from aml_coverage.models.schemas import Evidence, Requirement

logger = logging.getLogger(__name__)

# Higher is better; unrated evidence sorts below "fair".
QUALITY_ORDER = {"excellent": 3, "good": 2, "fair": 1}


class EvidenceRepository:

    def __init__(self, evidence: list[Evidence]):
        self._evidence = list(evidence)
        self._evidence_by_id = {e.id: e for e in self._evidence}

    def all_evidence(self) -> list[Evidence]:
        return list(self._evidence)

    def get_evidence(self, evidence_id: str) -> Evidence | None:
        return self._evidence_by_id.get(evidence_id)

    def get_evidence_by_ids(self, evidence_ids: Iterable[str]) -> list[Evidence]:
        """Known evidence for the given ids, in id order; unknown ids are dropped."""
        return [self._evidence_by_id[i] for i in evidence_ids if i in self._evidence_by_id]

    def evidence_for_requirement(self, requirement: Requirement) -> list[Evidence]:
        """Resolve a requirement's evidence references, skipping unknown ids."""
        missing = [i for i in requirement.evidence_ids if i not in self._evidence_by_id]
        if missing:
            logger.warning(f"Requirement {requirement.id} references unknown evidence {missing}")
        return self.get_evidence_by_ids(requirement.evidence_ids)

    def evidence_by_type(self, evidence_type: str) -> list[Evidence]:
        return [e for e in self._evidence if e.type == evidence_type]

    def evidence_by_category(self, category: str) -> list[Evidence]:
        """Case-insensitive substring match on the evidence category."""
        needle = category.lower()
        return [e for e in self._evidence if e.category and needle in e.category.lower()]

    def filter_by_quality(self, evidence_ids: Iterable[str], min_quality: str = "good") -> list[Evidence]:
        """Evidence rated at least ``min_quality``. An unknown minimum keeps everything."""
        floor = QUALITY_ORDER.get(min_quality, 0)
        return [
            e for e in self.get_evidence_by_ids(evidence_ids)
            if QUALITY_ORDER.get(e.quality, 0) >= floor
        ]

    def most_recent_evidence_date(self, evidence_ids: Iterable[str]) -> date | None:
        dates = []
        for item in self.get_evidence_by_ids(evidence_ids):
            if not item.last_added:
                continue
            try:
                dates.append(date.fromisoformat(item.last_added[:10]))
            except ValueError:
                logger.warning(f"Evidence {item.id} has unreadable last_added {item.last_added!r}")
        return max(dates) if dates else None

    def evidence_stats(self) -> dict[str, Any]:
        by_type: dict[str, int] = {}
        by_quality: dict[str, int] = {}
        by_category: dict[str, int] = {}

        for item in self._evidence:
            by_type[item.type] = by_type.get(item.type, 0) + 1
            by_quality[item.quality] = by_quality.get(item.quality, 0) + 1
            if item.category:
                by_category[item.category] = by_category.get(item.category, 0) + 1

        return {
            "total": len(self._evidence),
            "by_type": by_type,
            "by_quality": by_quality,
            "by_category": by_category,
        }
