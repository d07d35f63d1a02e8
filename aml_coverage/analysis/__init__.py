"""
Analysis core — obligation extraction, heuristic rule matching, coverage
assessment, warnings/recommendations and risk levels.

Callers import from this package:
    from aml_coverage.analysis import CoverageAnalyzer
"""

from .advisories import generate_recommendations, generate_warnings
from .cache import AnalysisCache
from .coverage_analyzer import (
    CoverageAnalyzer,
    analyze_bulk_coverage,
    analyze_requirement_coverage,
    get_coverage_summary,
)
from .coverage_assessor import assess_coverage
from .matcher_config import MatcherConfig, MatcherConfigStore, SemanticCategory
from .obligation_extractor import extract_obligations
from .risk_calculator import calculate_risk_level
from .rule_matcher import match_rule_to_obligation

__all__ = [
    "AnalysisCache",
    "CoverageAnalyzer",
    "MatcherConfig",
    "MatcherConfigStore",
    "SemanticCategory",
    "analyze_bulk_coverage",
    "analyze_requirement_coverage",
    "assess_coverage",
    "calculate_risk_level",
    "extract_obligations",
    "generate_recommendations",
    "generate_warnings",
    "get_coverage_summary",
    "match_rule_to_obligation",
]
