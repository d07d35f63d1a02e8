"""
Warning & Recommendation Generator.

Pure mapping from a CoverageAssessment to presentation records.  Every gap
produces a warning of the same type; two global checks (no rules at all, and
complex requirements with few rules) apply regardless of the gap list.
"""

from __future__ import annotations

from aml_coverage.models.enums import (
    GapType,
    ObligationType,
    RecommendationPriority,
    RecommendationType,
    Severity,
    WarningType,
)
from aml_coverage.models.schemas import (
    CoverageAssessment,
    CoverageGap,
    CoverageWarning,
    Obligation,
    Recommendation,
    Rule,
)

COMPLEX_MIN_OBLIGATIONS = 4
COMPLEX_MAX_RULES = 2


def _s(count: int) -> str:
    return "" if count == 1 else "s"


def _gap_warning(gap: CoverageGap, obligations: list[Obligation], rules: list[Rule]) -> CoverageWarning:
    if gap.type == GapType.UNCOVERED_OBLIGATIONS:
        n = len(gap.obligations)
        return CoverageWarning(
            type=WarningType.UNCOVERED_OBLIGATIONS,
            severity=gap.severity,
            title="Uncovered Obligations",
            message=gap.description,
            details=f"{n} obligation{_s(n)} {'has' if n == 1 else 'have'} no semantic match with existing monitoring rules.",
            specific_gaps=gap.specific_gaps,
        )

    if gap.type == GapType.PARTIAL_COVERAGE:
        return CoverageWarning(
            type=WarningType.PARTIAL_COVERAGE,
            severity=gap.severity,
            title="Partial Rule Coverage",
            message=gap.description,
            details="These obligations have some rule coverage but may need additional specialized monitoring.",
            specific_gaps=gap.specific_gaps,
        )

    if gap.type == GapType.SINGLE_RULE_MULTIPLE_OBLIGATIONS:
        return CoverageWarning(
            type=WarningType.SINGLE_RULE_MULTIPLE_OBLIGATIONS,
            severity=gap.severity,
            title="Single Rule Covers Multiple Obligations",
            message=gap.description,
            details=gap.recommendation or "",
            specific_gaps=[f"{o.source_marker or o.id} {o.text[:60]}" for o in gap.obligations],
        )

    has_numbered = any(o.type == ObligationType.NUMBERED for o in obligations)
    if has_numbered:
        details = (
            f"Found {len(obligations)} numbered obligations but only {len(rules)} monitoring "
            f"rule{_s(len(rules))}. Each numbered obligation typically requires its own dedicated rule."
        )
    else:
        details = (
            f"Found {len(obligations)} distinct obligations but only {len(rules)} monitoring "
            f"rule{_s(len(rules))}"
        )
    return CoverageWarning(
        type=WarningType.INSUFFICIENT_RULES,
        severity=gap.severity,
        title="Missing Rules for Numbered Obligations" if has_numbered else "Insufficient Rule Coverage",
        message=gap.description,
        details=details,
        specific_gaps=gap.specific_gaps,
    )


def generate_warnings(
    obligations: list[Obligation] | None,
    rules: list[Rule] | None,
    coverage: CoverageAssessment,
) -> list[CoverageWarning]:
    obligations = obligations or []
    rules = rules or []
    warnings: list[CoverageWarning] = []

    if not rules:
        warnings.append(
            CoverageWarning(
                type=WarningType.NO_COVERAGE,
                severity=Severity.CRITICAL,
                title="No Monitoring Rules",
                message="This requirement has no associated monitoring rules",
            )
        )

    for gap in coverage.gaps:
        warnings.append(_gap_warning(gap, obligations, rules))

    if len(obligations) >= COMPLEX_MIN_OBLIGATIONS and len(rules) <= COMPLEX_MAX_RULES:
        warnings.append(
            CoverageWarning(
                type=WarningType.COMPLEX_REQUIREMENT,
                severity=Severity.MEDIUM,
                title="Complex Requirement Detection",
                message=f"Complex requirement with {len(obligations)} obligations may need additional rules",
                details="Consider whether each obligation is adequately monitored",
            )
        )

    return warnings


def generate_recommendations(
    obligations: list[Obligation] | None,
    rules: list[Rule] | None,
    coverage: CoverageAssessment,
) -> list[Recommendation]:
    obligations = obligations or []
    rules = rules or []
    recommendations: list[Recommendation] = []
    needed = coverage.estimated_rules_needed

    if not rules:
        recommendations.append(
            Recommendation(
                type=RecommendationType.CREATE_RULES,
                priority=RecommendationPriority.CRITICAL,
                title="Create Monitoring Rules",
                description=f"Create {needed} monitoring rule{_s(needed)} to cover identified obligations",
                action="Create Rules",
            )
        )

    shortfall = needed - len(rules)
    if shortfall > 0:
        recommendations.append(
            Recommendation(
                type=RecommendationType.ADD_RULES,
                priority=RecommendationPriority.HIGH if shortfall > 2 else RecommendationPriority.MEDIUM,
                title="Add Additional Rules",
                description=f"Consider adding {shortfall} more rule{_s(shortfall)} to fully cover all obligations",
                action="Review Coverage",
            )
        )

    numbered = [o for o in obligations if o.type == ObligationType.NUMBERED]
    if len(numbered) > 1 and len(rules) == 1:
        recommendations.append(
            Recommendation(
                type=RecommendationType.SPLIT_RULES,
                priority=RecommendationPriority.HIGH,
                title="Split Monitoring Rules",
                description=f"Consider separate rules for each of the {len(numbered)} numbered obligations",
                action="Analyze Obligations",
            )
        )

    if any(o.type == ObligationType.THRESHOLD for o in obligations) and len(rules) == 1:
        recommendations.append(
            Recommendation(
                type=RecommendationType.THRESHOLD_RULES,
                priority=RecommendationPriority.MEDIUM,
                title="Threshold Monitoring",
                description="Multiple thresholds may require separate monitoring approaches",
                action="Review Thresholds",
            )
        )

    return recommendations
