"""
Coverage Assessor — aggregates per-obligation matches into gaps, an estimate of
how many rules the requirement needs, and a confidence score.

Branches:
  - no obligations         → nothing to find (optimistic confidence, no gaps)
  - no rules               → every obligation uncovered (critical)
  - numbered obligations   → per-obligation semantic matching
  - otherwise              → count-based estimate by obligation priority
"""

from __future__ import annotations

import logging
import math

from aml_coverage.analysis.matcher_config import MatcherConfig
from aml_coverage.analysis.rule_matcher import match_rule_to_obligation
from aml_coverage.models.enums import (
    CoverageLevel,
    CoverageStatus,
    GapType,
    ObligationPriority,
    ObligationType,
    Severity,
)
from aml_coverage.models.schemas import (
    CoverageAssessment,
    CoverageGap,
    Obligation,
    ObligationMapping,
    Rule,
    RuleObligationMatch,
)

logger = logging.getLogger(__name__)

NO_OBLIGATIONS_WITH_RULES_CONFIDENCE = 0.8
NO_OBLIGATIONS_NO_RULES_CONFIDENCE = 0.9
NO_RULES_CONFIDENCE = 0.95
BASE_CONFIDENCE = 0.7
CONFIDENCE_STEP = 0.05
MAX_CONFIDENCE = 0.95
PARTIAL_RULE_FACTOR = 0.5
MEDIUM_PRIORITY_RULE_FACTOR = 0.7

_PARTIAL_LEVELS = (CoverageLevel.LOW, CoverageLevel.MEDIUM)


def _label(obligation: Obligation, index: int) -> str:
    return obligation.source_marker or str(index + 1)


def _plural(count: int, singular: str, plural: str | None = None) -> str:
    return singular if count == 1 else (plural or f"{singular}s")


def best_match(
    rules: list[Rule],
    obligation: Obligation,
    config: MatcherConfig | None = None,
) -> RuleObligationMatch | None:
    """Highest-confidence match; earlier rules win ties, zero confidence is no match."""
    best: RuleObligationMatch | None = None
    for rule in rules:
        match = match_rule_to_obligation(rule, obligation, config)
        if match.confidence > (best.confidence if best else 0.0):
            best = match
    return best


def assess_coverage(
    obligations: list[Obligation] | None,
    rules: list[Rule] | None,
    config: MatcherConfig | None = None,
) -> CoverageAssessment:
    obligations = list(obligations or [])
    rules = list(rules or [])

    assessment = CoverageAssessment(
        total_obligations=len(obligations),
        rules_provided=len(rules),
        estimated_rules_needed=len(obligations),
    )

    if not obligations:
        assessment.confidence = (
            NO_OBLIGATIONS_WITH_RULES_CONFIDENCE if rules else NO_OBLIGATIONS_NO_RULES_CONFIDENCE
        )
        return assessment

    if not rules:
        assessment.gaps.append(
            CoverageGap(
                type=GapType.UNCOVERED_OBLIGATIONS,
                severity=Severity.CRITICAL,
                description=(
                    f"{len(obligations)} {_plural(len(obligations), 'obligation')} "
                    f"{_plural(len(obligations), 'has', 'have')} no monitoring rule"
                ),
                obligations=obligations,
                specific_gaps=[
                    f"No monitoring rule covers obligation {_label(o, i)}: {o.text[:80]}"
                    for i, o in enumerate(obligations)
                ],
                recommended_rule_count=len(obligations),
            )
        )
        assessment.confidence = NO_RULES_CONFIDENCE
        return assessment

    if any(o.type == ObligationType.NUMBERED for o in obligations):
        _assess_semantic(assessment, obligations, rules, config)
    else:
        _assess_by_priority(assessment, obligations, rules)

    assessment.confidence = min(
        MAX_CONFIDENCE,
        BASE_CONFIDENCE + CONFIDENCE_STEP * min(len(rules), len(obligations)),
    )
    logger.debug(
        f"Assessed {len(obligations)} obligations against {len(rules)} rules: "
        f"{len(assessment.gaps)} gaps, {assessment.estimated_rules_needed} rules needed"
    )
    return assessment


def _assess_semantic(
    assessment: CoverageAssessment,
    obligations: list[Obligation],
    rules: list[Rule],
    config: MatcherConfig | None,
) -> None:
    numbered = [o for o in obligations if o.type == ObligationType.NUMBERED]

    for obligation in numbered:
        match = best_match(rules, obligation, config)
        level = match.coverage if match else CoverageLevel.NONE
        covered = level != CoverageLevel.NONE
        assessment.rule_obligation_mapping.append(
            ObligationMapping(
                obligation=obligation,
                rules_covering=[match.rule_id] if covered else [],
                coverage_status=CoverageStatus.COVERED if covered else CoverageStatus.UNCOVERED,
                coverage_level=level,
                reasoning=match.reasoning if match else "No rule produced a semantic match",
            )
        )

    mapping = assessment.rule_obligation_mapping
    uncovered = [m for m in mapping if m.coverage_status == CoverageStatus.UNCOVERED]
    partial = [m for m in mapping if m.coverage_level in _PARTIAL_LEVELS]
    covered = [m for m in mapping if m.coverage_status == CoverageStatus.COVERED]

    assessment.estimated_rules_needed = len(uncovered) + math.ceil(len(partial) * PARTIAL_RULE_FACTOR)

    if uncovered:
        assessment.gaps.append(
            CoverageGap(
                type=GapType.UNCOVERED_OBLIGATIONS,
                severity=Severity.CRITICAL if len(uncovered) > 2 else Severity.HIGH,
                description=(
                    f"{len(uncovered)} {_plural(len(uncovered), 'obligation')} "
                    f"{_plural(len(uncovered), 'has', 'have')} no rule coverage"
                ),
                obligations=[m.obligation for m in uncovered],
                specific_gaps=[f"{m.obligation.source_marker} {m.obligation.text[:60]}" for m in uncovered],
                recommended_rule_count=len(uncovered),
            )
        )

    if partial:
        assessment.gaps.append(
            CoverageGap(
                type=GapType.PARTIAL_COVERAGE,
                severity=Severity.MEDIUM,
                description=(
                    f"{len(partial)} {_plural(len(partial), 'obligation')} "
                    f"{_plural(len(partial), 'has', 'have')} only partial rule coverage"
                ),
                obligations=[m.obligation for m in partial],
                specific_gaps=[
                    f"{m.obligation.source_marker} {m.obligation.text[:60]} ({m.coverage_level.value} coverage)"
                    for m in partial
                ],
            )
        )

    if len(rules) == 1 and len(numbered) > 1 and len(covered) > 1:
        assessment.gaps.append(
            CoverageGap(
                type=GapType.SINGLE_RULE_MULTIPLE_OBLIGATIONS,
                severity=Severity.MEDIUM,
                description=f"One rule provides coverage for {len(covered)} distinct obligations",
                obligations=[m.obligation for m in covered],
                recommendation="Consider dedicated rules for better coverage granularity",
            )
        )


def _assess_by_priority(
    assessment: CoverageAssessment,
    obligations: list[Obligation],
    rules: list[Rule],
) -> None:
    high = sum(1 for o in obligations if o.priority == ObligationPriority.HIGH)
    medium = sum(1 for o in obligations if o.priority == ObligationPriority.MEDIUM)
    assessment.estimated_rules_needed = math.ceil(high * 1 + medium * MEDIUM_PRIORITY_RULE_FACTOR)

    shortfall = assessment.estimated_rules_needed - len(rules)
    if shortfall > 0:
        assessment.gaps.append(
            CoverageGap(
                type=GapType.INSUFFICIENT_RULES,
                severity=Severity.HIGH if shortfall > 1 else Severity.MEDIUM,
                description=(
                    f"{shortfall} additional monitoring {_plural(shortfall, 'rule')} recommended"
                ),
                obligations=obligations[len(rules):],
                recommended_rule_count=assessment.estimated_rules_needed,
            )
        )
