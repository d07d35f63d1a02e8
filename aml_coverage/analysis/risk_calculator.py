"""Risk Level Calculator — first matching row of the decision table wins."""

from __future__ import annotations

from aml_coverage.models.enums import ObligationPriority, ObligationType, RiskLevel
from aml_coverage.models.schemas import CoverageAssessment, Obligation, Rule


def calculate_risk_level(
    obligations: list[Obligation] | None,
    rules: list[Rule] | None,
    coverage: CoverageAssessment,
) -> RiskLevel:
    obligations = obligations or []
    rules = rules or []

    if not rules:
        return RiskLevel.CRITICAL

    shortfall = coverage.estimated_rules_needed - len(rules)
    has_high_priority = any(o.priority == ObligationPriority.HIGH for o in obligations)
    has_numbered = any(o.type == ObligationType.NUMBERED for o in obligations)

    if shortfall > 2 and has_high_priority:
        return RiskLevel.CRITICAL
    if shortfall > 1 and (has_high_priority or has_numbered):
        return RiskLevel.HIGH
    if shortfall > 0 or len(obligations) > 3:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
