"""
Tests: Warning / recommendation generation and risk levels.

Run with:
    pytest aml_coverage/tests/test_advisories.py -v
"""

import pytest

from aml_coverage.analysis.advisories import generate_recommendations, generate_warnings
from aml_coverage.analysis.coverage_assessor import assess_coverage
from aml_coverage.analysis.obligation_extractor import extract_obligations
from aml_coverage.analysis.risk_calculator import calculate_risk_level
from aml_coverage.models.enums import (
    ObligationPriority,
    ObligationType,
    RecommendationPriority,
    RecommendationType,
    RiskLevel,
    Severity,
    WarningType,
)
from aml_coverage.models.schemas import CoverageAssessment, Obligation

from conftest import SCENARIO_TEXT, make_rule

CASES = [
    (SCENARIO_TEXT, []),
    (SCENARIO_TEXT, [make_rule(name="Cash Deposit Rule", description="cash deposit monitoring")]),
    ("(1) Monitor cash deposits above $8,000, (2) Detect wire transfers above $15,000",
     [make_rule(name="Cash and Wire Monitoring", description="Monitors cash deposits and wire transfers")]),
    ("Banks must verify customer identity. Banks must maintain records. Banks must screen customers.",
     [make_rule()]),
    ("(1) Apply enhanced scrutiny to business accounts with ratios exceeding 40%, (2) Monitor cash deposits",
     [make_rule(name="Commercial Cash Review", description="Reviews commercial cash activity")]),
]


def _obligations(count: int, obligation_type=ObligationType.NUMBERED, priority=ObligationPriority.HIGH):
    return [
        Obligation(id=f"obligation-{i + 1}", type=obligation_type, text=f"Obligation {i + 1}",
                   priority=priority)
        for i in range(count)
    ]


class TestWarnings:
    @pytest.mark.parametrize("text,rules", CASES)
    def test_every_gap_has_matching_warning(self, text, rules):
        obligations = extract_obligations(text)
        coverage = assess_coverage(obligations, rules)
        warning_types = {w.type.value for w in generate_warnings(obligations, rules, coverage)}
        for gap in coverage.gaps:
            assert gap.type.value in warning_types

    def test_no_rules_leads_with_no_coverage(self):
        obligations = extract_obligations(SCENARIO_TEXT)
        coverage = assess_coverage(obligations, [])
        warnings = generate_warnings(obligations, [], coverage)
        assert [w.type for w in warnings] == [WarningType.NO_COVERAGE, WarningType.UNCOVERED_OBLIGATIONS]
        assert warnings[0].severity == Severity.CRITICAL
        assert warnings[1].specific_gaps == coverage.gaps[0].specific_gaps

    def test_complex_requirement_warning(self):
        obligations = _obligations(4)
        coverage = CoverageAssessment(total_obligations=4, rules_provided=2, estimated_rules_needed=2)
        warnings = generate_warnings(obligations, [make_rule("a"), make_rule("b")], coverage)
        assert [w.type for w in warnings] == [WarningType.COMPLEX_REQUIREMENT]
        assert "4 obligations" in warnings[0].message

    def test_no_complex_warning_with_three_rules(self):
        obligations = _obligations(4)
        rules = [make_rule(f"r{i}") for i in range(3)]
        coverage = CoverageAssessment(total_obligations=4, rules_provided=3, estimated_rules_needed=3)
        assert generate_warnings(obligations, rules, coverage) == []

    def test_insufficient_rules_title_depends_on_numbering(self):
        text = "Banks must verify customer identity. Banks must maintain records. Banks must screen customers."
        obligations = extract_obligations(text)
        coverage = assess_coverage(obligations, [make_rule()])
        warnings = generate_warnings(obligations, [make_rule()], coverage)
        assert warnings[0].type == WarningType.INSUFFICIENT_RULES
        assert warnings[0].title == "Insufficient Rule Coverage"


class TestRecommendations:
    def test_no_rules(self):
        obligations = extract_obligations(SCENARIO_TEXT)
        coverage = assess_coverage(obligations, [])
        recs = generate_recommendations(obligations, [], coverage)
        assert [r.type for r in recs] == [RecommendationType.CREATE_RULES, RecommendationType.ADD_RULES]
        assert recs[0].priority == RecommendationPriority.CRITICAL
        assert recs[0].description == "Create 3 monitoring rules to cover identified obligations"
        assert recs[1].priority == RecommendationPriority.HIGH

    def test_split_for_single_rule(self, cash_rule):
        obligations = extract_obligations(SCENARIO_TEXT)
        coverage = assess_coverage(obligations, [cash_rule])
        recs = generate_recommendations(obligations, [cash_rule], coverage)
        assert [r.type for r in recs] == [RecommendationType.ADD_RULES, RecommendationType.SPLIT_RULES]
        assert recs[0].priority == RecommendationPriority.MEDIUM
        assert recs[0].description == "Consider adding 1 more rule to fully cover all obligations"

    def test_threshold_rules_for_single_rule(self, cash_rule):
        text = "Report transactions above $10,000 to the authority. Keep records for transfers of $3,000 or more."
        obligations = extract_obligations(text)
        coverage = assess_coverage(obligations, [cash_rule])
        types = [r.type for r in generate_recommendations(obligations, [cash_rule], coverage)]
        assert RecommendationType.THRESHOLD_RULES in types

    def test_nothing_to_recommend(self):
        obligations = _obligations(1)
        coverage = CoverageAssessment(total_obligations=1, rules_provided=2, estimated_rules_needed=1)
        assert generate_recommendations(obligations, [make_rule("a"), make_rule("b")], coverage) == []


class TestRiskLevel:
    def test_zero_rules_always_critical(self):
        for obligations in ([], _obligations(1), _obligations(5, ObligationType.MUST_CLAUSE,
                                                              ObligationPriority.MEDIUM)):
            coverage = CoverageAssessment(estimated_rules_needed=len(obligations))
            assert calculate_risk_level(obligations, [], coverage) == RiskLevel.CRITICAL

    def test_large_shortfall_with_high_priority(self):
        coverage = CoverageAssessment(estimated_rules_needed=4)
        assert calculate_risk_level(_obligations(4), [make_rule()], coverage) == RiskLevel.CRITICAL

    def test_large_shortfall_medium_priority_only(self):
        obligations = _obligations(5, ObligationType.MUST_CLAUSE, ObligationPriority.MEDIUM)
        coverage = CoverageAssessment(estimated_rules_needed=4)
        assert calculate_risk_level(obligations, [make_rule()], coverage) == RiskLevel.MEDIUM

    def test_shortfall_two_with_numbered(self):
        coverage = CoverageAssessment(estimated_rules_needed=3)
        assert calculate_risk_level(_obligations(3), [make_rule()], coverage) == RiskLevel.HIGH

    def test_many_obligations_without_shortfall(self):
        coverage = CoverageAssessment(estimated_rules_needed=0)
        assert calculate_risk_level(_obligations(4), [make_rule()], coverage) == RiskLevel.MEDIUM

    def test_low(self):
        coverage = CoverageAssessment(estimated_rules_needed=1)
        assert calculate_risk_level(_obligations(2), [make_rule()], coverage) == RiskLevel.LOW
