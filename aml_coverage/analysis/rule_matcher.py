"""
Heuristic Rule-Obligation Matcher.

Bag-of-keywords scoring: the obligation text is classified against the
semantic categories of a MatcherConfig, and every detected category whose
keywords also appear in the rule's name/description/category adds its weight.
The matched category labels double as the human-readable justification.
"""

from __future__ import annotations

import logging

from aml_coverage.analysis.matcher_config import MatcherConfig
from aml_coverage.models.enums import CoverageLevel
from aml_coverage.models.schemas import Obligation, Rule, RuleObligationMatch

logger = logging.getLogger(__name__)

NO_MATCH_REASONING = "No semantic match found between rule and obligation"

_DEFAULT_CONFIG = MatcherConfig()


def rule_text(rule: Rule) -> str:
    return f"{rule.name} {rule.description} {rule.category or ''}".lower()


def coverage_from_score(score: float, config: MatcherConfig | None = None) -> CoverageLevel:
    config = config or _DEFAULT_CONFIG
    if score >= config.high_threshold:
        return CoverageLevel.HIGH
    if score >= config.medium_threshold:
        return CoverageLevel.MEDIUM
    if score >= config.low_threshold:
        return CoverageLevel.LOW
    return CoverageLevel.NONE


def detect_categories(obligation_text: str, config: MatcherConfig | None = None) -> list[str]:
    """Keys of every category whose detector fires on the obligation text."""
    config = config or _DEFAULT_CONFIG
    lowered = obligation_text.lower()
    return [c.key for c in config.categories if c.pattern.search(lowered)]


def match_rule_to_obligation(
    rule: Rule,
    obligation: Obligation,
    config: MatcherConfig | None = None,
) -> RuleObligationMatch:
    """Score how well one rule covers one obligation."""
    config = config or _DEFAULT_CONFIG
    text_of_rule = rule_text(rule)
    obligation_text = obligation.text.lower()

    score = 0.0
    matched: list[str] = []
    for category in config.categories:
        if category.weight <= 0:
            continue
        if not category.pattern.search(obligation_text):
            continue
        if any(keyword in text_of_rule for keyword in category.keywords):
            score += category.weight
            matched.append(category.label)

    coverage = coverage_from_score(score, config)
    confidence = max(0.0, min(config.max_confidence, score))

    logger.debug(
        f"{rule.id} x {obligation.id}: score={score:.2f} coverage={coverage.value} "
        f"categories={matched}"
    )
    return RuleObligationMatch(
        rule_id=rule.id,
        obligation_id=obligation.id,
        coverage=coverage,
        confidence=confidence,
        matched_categories=matched,
        reasoning=f"Rule covers: {', '.join(matched)}" if matched else NO_MATCH_REASONING,
    )
