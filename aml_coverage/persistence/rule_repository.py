"""
Rule Repository — read-only access to monitoring rules.

The requirement ↔ rule link is recorded on both sides of the dataset
(rule.linked_requirements and requirement.linked_rules).  Lookups merge both
sides so a one-sided link still counts, and log when the sides disagree.
"""

from __future__ import annotations

import logging
from typing import Any

from aml_coverage.models.enums import RiskLevel
from aml_coverage.models.schemas import Requirement, Rule

logger = logging.getLogger(__name__)

_NAME_SCORE = 100
_DESCRIPTION_SCORE = 50
_CATEGORY_SCORE = 30


def performance_rating(true_positive_rate: float) -> str:
    if true_positive_rate >= 0.8:
        return "excellent"
    if true_positive_rate >= 0.6:
        return "good"
    if true_positive_rate >= 0.4:
        return "fair"
    return "poor"


class RuleRepository:
    """Lookup, filtering and search over monitoring rules."""

    def __init__(self, rules: list[Rule]):
        self._rules = list(rules)
        self._rules_by_id = {r.id: r for r in self._rules}

    def all_rules(self) -> list[Rule]:
        return list(self._rules)

    def get_rule(self, rule_id: str) -> Rule | None:
        return self._rules_by_id.get(rule_id)

    def get_rules_for_requirement(
        self,
        requirement_id: str,
        requirement: Requirement | None = None,
    ) -> list[Rule]:
        """Union of rules linked from either side; rule-side links come first."""
        from_rules = [r.id for r in self._rules if requirement_id in r.linked_requirements]
        from_requirement = list(requirement.linked_rules) if requirement is not None else []

        if requirement is not None:
            only_rule_side = [i for i in from_rules if i not in from_requirement]
            only_requirement_side = [i for i in from_requirement if i not in from_rules]
            if only_rule_side or only_requirement_side:
                logger.warning(
                    f"Link inconsistency for {requirement_id}: "
                    f"rule-side only={only_rule_side}, requirement-side only={only_requirement_side}"
                )

        ordered_ids = list(dict.fromkeys(from_rules + from_requirement))
        return [self._rules_by_id[i] for i in ordered_ids if i in self._rules_by_id]

    def rules_by_category(self, category: str) -> list[Rule]:
        return [r for r in self._rules if r.category == category]

    def filter_rules(
        self,
        jurisdiction: str | None = None,
        product_type: str | None = None,
        customer_type: str | None = None,
        risk_level: RiskLevel | str | None = None,
        min_true_positive_rate: float | None = None,
    ) -> list[Rule]:
        level = RiskLevel(risk_level) if risk_level else None
        results = []
        for rule in self._rules:
            meta = rule.metadata
            if jurisdiction and jurisdiction not in meta.jurisdiction:
                continue
            if product_type and product_type not in meta.product_type:
                continue
            if customer_type and customer_type not in meta.customer_type:
                continue
            if level and meta.risk_level != level:
                continue
            if min_true_positive_rate is not None and rule.performance.true_positive_rate < min_true_positive_rate:
                continue
            results.append(rule)
        return results

    def search_rules(self, query: str, limit: int = 20) -> list[Rule]:
        needle = query.lower()
        scored: list[tuple[int, Rule]] = []
        for rule in self._rules:
            score = 0
            if needle in rule.name.lower():
                score += _NAME_SCORE
            if needle in rule.description.lower():
                score += _DESCRIPTION_SCORE
            if needle in rule.category.lower():
                score += _CATEGORY_SCORE
            if score > 0:
                scored.append((score, rule))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [rule for _, rule in scored[:limit]]

    def performance_summary(self) -> dict[str, Any]:
        distribution = {"excellent": 0, "good": 0, "fair": 0, "poor": 0}
        by_category: dict[str, int] = {}
        total_tpr = 0.0
        total_alerts = 0

        for rule in self._rules:
            tpr = rule.performance.true_positive_rate
            total_tpr += tpr
            total_alerts += rule.performance.alerts_per_month
            by_category[rule.category] = by_category.get(rule.category, 0) + 1
            distribution[performance_rating(tpr)] += 1

        return {
            "total_rules": len(self._rules),
            "average_true_positive_rate": total_tpr / len(self._rules) if self._rules else 0.0,
            "total_alerts_per_month": total_alerts,
            "rules_by_category": by_category,
            "performance_distribution": distribution,
        }
