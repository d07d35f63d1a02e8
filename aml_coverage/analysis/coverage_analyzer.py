"""
Coverage Analysis Facade.

Runs extraction → assessment → warnings/recommendations → risk level for one
requirement and its linked rules.  The analyzer holds configuration only; every
call is a pure function of its inputs.  Pass an AnalysisCache to memoize.

Module-level helpers use a default-configured analyzer:

    from aml_coverage.analysis import analyze_requirement_coverage
    result = analyze_requirement_coverage(requirement, rules)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from aml_coverage.analysis.advisories import generate_recommendations, generate_warnings
from aml_coverage.analysis.cache import AnalysisCache
from aml_coverage.analysis.coverage_assessor import assess_coverage
from aml_coverage.analysis.matcher_config import MatcherConfig
from aml_coverage.analysis.obligation_extractor import MAX_OBLIGATIONS, extract_obligations
from aml_coverage.analysis.risk_calculator import calculate_risk_level
from aml_coverage.models.enums import RiskLevel
from aml_coverage.models.schemas import AnalysisResult, CoverageSummary, Requirement, Rule

logger = logging.getLogger(__name__)

RuleLookup = Callable[[str], list[Rule]]


class CoverageAnalyzer:
    """Orchestrates the coverage analysis pipeline for requirements."""

    def __init__(
        self,
        matcher_config: MatcherConfig | None = None,
        max_obligations: int = MAX_OBLIGATIONS,
        cache: AnalysisCache | None = None,
    ):
        self.matcher_config = matcher_config or MatcherConfig()
        self.max_obligations = max_obligations
        self.cache = cache

    def settings_signature(self) -> dict[str, Any]:
        """The analyzer settings that change results; part of every cache key."""
        return {
            "matcher_config": self.matcher_config.model_dump(mode="json"),
            "max_obligations": self.max_obligations,
        }

    def analyze_requirement_coverage(
        self,
        requirement: Requirement,
        rules: list[Rule] | None = None,
    ) -> AnalysisResult:
        rules = list(rules or [])

        key = None
        if self.cache is not None:
            key = self.cache.make_key(requirement, rules, self.settings_signature())
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        obligations = extract_obligations(requirement.text, self.max_obligations)
        coverage = assess_coverage(obligations, rules, self.matcher_config)

        result = AnalysisResult(
            requirement_id=requirement.id,
            title=requirement.title,
            reference=requirement.reference,
            has_multiple_obligations=len(obligations) > 1,
            obligations=obligations,
            rule_count=len(rules),
            estimated_rules_needed=coverage.estimated_rules_needed,
            gaps=coverage.gaps,
            rule_obligation_mapping=coverage.rule_obligation_mapping,
            warnings=generate_warnings(obligations, rules, coverage),
            recommendations=generate_recommendations(obligations, rules, coverage),
            risk_level=calculate_risk_level(obligations, rules, coverage),
            confidence_score=coverage.confidence,
        )
        logger.debug(
            f"[{requirement.id}] {len(obligations)} obligations, {len(rules)} rules, "
            f"risk={result.risk_level.value}, warnings={len(result.warnings)}"
        )

        if self.cache is not None and key is not None:
            self.cache.put(key, result)
        return result

    def analyze_bulk_coverage(
        self,
        requirements: Iterable[Requirement],
        rule_lookup: RuleLookup,
    ) -> list[AnalysisResult]:
        """Analyze every requirement; keep only results that carry warnings."""
        results = [
            self.analyze_requirement_coverage(requirement, rule_lookup(requirement.id))
            for requirement in requirements
        ]
        return [r for r in results if r.warnings]

    @staticmethod
    def get_coverage_summary(results: list[AnalysisResult] | None) -> CoverageSummary:
        results = results or []
        total = len(results)
        if total == 0:
            return CoverageSummary()
        return CoverageSummary(
            total_requirements=total,
            requirements_with_warnings=sum(1 for r in results if r.warnings),
            critical_gaps=sum(1 for r in results if r.risk_level == RiskLevel.CRITICAL),
            high_risk_gaps=sum(1 for r in results if r.risk_level == RiskLevel.HIGH),
            average_obligations_per_requirement=sum(len(r.obligations) for r in results) / total,
            average_rules_per_requirement=sum(r.rule_count for r in results) / total,
        )


# ── Module-level helpers ─────────────────────────────────

def analyze_requirement_coverage(requirement: Requirement, rules: list[Rule] | None = None) -> AnalysisResult:
    return CoverageAnalyzer().analyze_requirement_coverage(requirement, rules)


def analyze_bulk_coverage(requirements: Iterable[Requirement], rule_lookup: RuleLookup) -> list[AnalysisResult]:
    return CoverageAnalyzer().analyze_bulk_coverage(requirements, rule_lookup)


def get_coverage_summary(results: list[AnalysisResult] | None) -> CoverageSummary:
    return CoverageAnalyzer.get_coverage_summary(results)
