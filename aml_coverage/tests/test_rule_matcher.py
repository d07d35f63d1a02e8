"""
Tests: Heuristic rule ↔ obligation matcher.

Run with:
    pytest aml_coverage/tests/test_rule_matcher.py -v
"""

import pytest

from aml_coverage.analysis.matcher_config import MatcherConfig, SemanticCategory
from aml_coverage.analysis.rule_matcher import (
    NO_MATCH_REASONING,
    coverage_from_score,
    detect_categories,
    match_rule_to_obligation,
)
from aml_coverage.models.enums import CoverageLevel, ObligationPriority, ObligationType
from aml_coverage.models.schemas import Obligation

from conftest import make_rule


def _obligation(text: str) -> Obligation:
    return Obligation(
        id="obligation-1",
        type=ObligationType.NUMBERED,
        text=text,
        source_marker="(1)",
        priority=ObligationPriority.HIGH,
    )


class TestScoring:
    def test_cash_match_is_high(self, cash_rule):
        match = match_rule_to_obligation(cash_rule, _obligation("Monitor cash deposits above $8,000"))
        assert match.coverage == CoverageLevel.HIGH
        assert match.confidence == pytest.approx(0.8)
        assert match.matched_categories == ["cash monitoring"]
        assert match.reasoning == "Rule covers: cash monitoring"

    def test_no_match(self, cash_rule):
        match = match_rule_to_obligation(cash_rule, _obligation("Detect wire transfers above $15,000"))
        assert match.coverage == CoverageLevel.NONE
        assert match.confidence == 0.0
        assert match.matched_categories == []
        assert match.reasoning == NO_MATCH_REASONING

    def test_medium_from_business_weight(self):
        rule = make_rule(name="Commercial Account Review", description="Reviews commercial customers")
        match = match_rule_to_obligation(
            rule, _obligation("Apply enhanced scrutiny to business accounts with ratios exceeding 40%")
        )
        assert match.coverage == CoverageLevel.MEDIUM
        assert match.confidence == pytest.approx(0.5)

    def test_category_field_counts_as_rule_text(self):
        rule = make_rule(name="Rule A", description="", category="Wire Transfer")
        match = match_rule_to_obligation(rule, _obligation("Detect wire transfers above $15,000"))
        assert match.coverage == CoverageLevel.HIGH
        assert match.matched_categories == ["wire transfer"]

    def test_confidence_capped(self):
        rule = make_rule(
            name="Everything Rule",
            description="cash wire velocity business cross-border monitoring",
        )
        obligation = _obligation(
            "Monitor cash deposits and wire transfers to high-risk jurisdictions "
            "with unusual velocity patterns for business accounts"
        )
        match = match_rule_to_obligation(rule, obligation)
        assert len(match.matched_categories) == 5
        assert match.confidence == pytest.approx(0.95)
        assert match.coverage == CoverageLevel.HIGH

    def test_detect_only_categories_never_score(self):
        rule = make_rule(name="Real-time alert threshold", description="immediate alert above limit")
        match = match_rule_to_obligation(rule, _obligation("Generate real-time alerts above the limit"))
        assert match.confidence == 0.0
        assert match.reasoning == NO_MATCH_REASONING

    @pytest.mark.parametrize("text", [
        "",
        "Monitor cash deposits above $8,000",
        "Screen correspondent banks in FATF jurisdictions for unusual volume",
    ])
    def test_confidence_bounds(self, text, cash_rule):
        match = match_rule_to_obligation(cash_rule, _obligation(text))
        assert 0.0 <= match.confidence <= 0.95


class TestCoverageLevels:
    @pytest.mark.parametrize("score,level", [
        (0.95, CoverageLevel.HIGH),
        (0.7, CoverageLevel.HIGH),
        (0.5, CoverageLevel.MEDIUM),
        (0.4, CoverageLevel.MEDIUM),
        (0.2, CoverageLevel.LOW),
        (0.1, CoverageLevel.NONE),
        (0.0, CoverageLevel.NONE),
    ])
    def test_thresholds(self, score, level):
        assert coverage_from_score(score) == level


class TestDetection:
    def test_detects_threshold_and_real_time(self):
        keys = detect_categories("Generate real-time alerts for transfers above $5,000")
        assert "threshold" in keys
        assert "real_time" in keys
        assert "wire" in keys
        assert "cross_border" in keys

    def test_custom_table(self):
        config = MatcherConfig(categories=[
            SemanticCategory(key="crypto", label="virtual assets", detector=r"crypto|virtual asset",
                             keywords=["crypto", "wallet"], weight=0.9),
        ])
        rule = make_rule(name="Crypto Wallet Screening")
        match = match_rule_to_obligation(rule, _obligation("Monitor crypto exchange flows"), config)
        assert match.matched_categories == ["virtual assets"]
        assert match.coverage == CoverageLevel.HIGH
