"""
Document Repository — read-only access to regulatory documents and their clauses.
Backed by an in-memory dataset snapshot.
"""

from __future__ import annotations

import logging
from typing import Any

from aml_coverage.models.enums import RiskLevel
from aml_coverage.models.schemas import RegulatoryDocument, Requirement, RequirementSearchHit

logger = logging.getLogger(__name__)

# Relevance weights for search()
_TITLE_SCORE = 100
_REFERENCE_SCORE = 80
_TEXT_SCORE = 50
_JURISDICTION_SCORE = 30
_PRODUCT_SCORE = 20


class DocumentRepository:
    """Lookup, filtering and search over regulatory documents."""

    def __init__(self, documents: list[RegulatoryDocument]):
        self._documents = list(documents)
        self._documents_by_id = {d.id: d for d in self._documents}
        self._requirements: dict[str, tuple[Requirement, RegulatoryDocument]] = {
            clause.id: (clause, document)
            for document in self._documents
            for clause in document.clauses
        }

    def all_documents(self) -> list[RegulatoryDocument]:
        return list(self._documents)

    def get_document(self, document_id: str) -> RegulatoryDocument | None:
        return self._documents_by_id.get(document_id)

    def all_requirements(self) -> list[Requirement]:
        return [clause for clause, _ in self._requirements.values()]

    def get_requirement(self, requirement_id: str) -> Requirement | None:
        entry = self._requirements.get(requirement_id)
        return entry[0] if entry else None

    def get_requirement_with_document(
        self, requirement_id: str
    ) -> tuple[Requirement, RegulatoryDocument] | None:
        return self._requirements.get(requirement_id)

    def filter_requirements(
        self,
        jurisdiction: str | None = None,
        product_type: str | None = None,
        customer_type: str | None = None,
        search_term: str | None = None,
    ) -> list[Requirement]:
        """Requirements matching every given filter (search checks title, text and reference)."""
        needle = search_term.lower() if search_term else None
        results: list[Requirement] = []
        for clause in self.all_requirements():
            meta = clause.metadata
            if jurisdiction and jurisdiction not in meta.jurisdiction:
                continue
            if product_type and product_type not in meta.product_type:
                continue
            if customer_type and customer_type not in meta.customer_type:
                continue
            if needle and not (
                needle in clause.title.lower()
                or needle in clause.text.lower()
                or needle in clause.reference.lower()
            ):
                continue
            results.append(clause)
        return results

    def search(self, query: str, limit: int = 50) -> list[RequirementSearchHit]:
        """Relevance-ranked clause search."""
        needle = query.lower()
        hits: list[RequirementSearchHit] = []
        for clause, document in self._requirements.values():
            score = self._relevance(clause, needle)
            if score > 0:
                hits.append(RequirementSearchHit(
                    requirement=clause,
                    document_id=document.id,
                    relevance_score=score,
                ))
        hits.sort(key=lambda h: h.relevance_score, reverse=True)
        return hits[:limit]

    @staticmethod
    def _relevance(clause: Requirement, needle: str) -> int:
        score = 0
        if needle in clause.title.lower():
            score += _TITLE_SCORE
        if needle in clause.reference.lower():
            score += _REFERENCE_SCORE
        if needle in clause.text.lower():
            score += _TEXT_SCORE
        if any(needle in j.lower() for j in clause.metadata.jurisdiction):
            score += _JURISDICTION_SCORE
        if any(needle in p.lower() for p in clause.metadata.product_type):
            score += _PRODUCT_SCORE
        return score

    def compliance_stats(self) -> dict[str, Any]:
        jurisdiction_stats: dict[str, int] = {}
        risk_stats = {level.value: 0 for level in RiskLevel}
        linked_rules = 0

        for clause in self.all_requirements():
            linked_rules += len(clause.linked_rules)
            for jurisdiction in clause.metadata.jurisdiction:
                jurisdiction_stats[jurisdiction] = jurisdiction_stats.get(jurisdiction, 0) + 1
            risk_stats[clause.metadata.risk_level.value] += 1

        return {
            "total_clauses": len(self._requirements),
            "total_rules": linked_rules,
            "jurisdiction_stats": jurisdiction_stats,
            "risk_stats": risk_stats,
            "document_count": len(self._documents),
        }
