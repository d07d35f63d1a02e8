"""Domain models — enums and pydantic schemas."""

from .enums import (
    CoverageLevel,
    CoverageStatus,
    GapType,
    ObligationPriority,
    ObligationType,
    RecommendationPriority,
    RecommendationType,
    RiskLevel,
    Severity,
    WarningType,
)
from .schemas import (
    AnalysisResult,
    CoverageAssessment,
    CoverageGap,
    CoverageSummary,
    CoverageWarning,
    Evidence,
    ImplementedRequirement,
    LinkConsistencyReport,
    LinkIssue,
    Obligation,
    ObligationMapping,
    Recommendation,
    RegulatoryDocument,
    Requirement,
    RequirementMetadata,
    Rule,
    RuleObligationMatch,
    RulePerformance,
)

__all__ = [
    "AnalysisResult",
    "CoverageAssessment",
    "CoverageGap",
    "CoverageLevel",
    "CoverageStatus",
    "CoverageSummary",
    "CoverageWarning",
    "Evidence",
    "GapType",
    "ImplementedRequirement",
    "LinkConsistencyReport",
    "LinkIssue",
    "Obligation",
    "ObligationMapping",
    "ObligationPriority",
    "ObligationType",
    "Recommendation",
    "RecommendationPriority",
    "RecommendationType",
    "RegulatoryDocument",
    "Requirement",
    "RequirementMetadata",
    "RiskLevel",
    "Rule",
    "RuleObligationMatch",
    "RulePerformance",
    "Severity",
    "WarningType",
]
