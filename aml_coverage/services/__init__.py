"""Services — CoverageAnalysisService and its lookup errors."""

from aml_coverage.services.analysis_service import (
    CoverageAnalysisService,
    EvidenceNotFoundError,
    RequirementNotFoundError,
    RuleNotFoundError,
    get_analysis_service,
)

__all__ = [
    "CoverageAnalysisService",
    "EvidenceNotFoundError",
    "RequirementNotFoundError",
    "RuleNotFoundError",
    "get_analysis_service",
]
