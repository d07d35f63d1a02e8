"""
Data schemas shared by the repositories, the analysis core and the API.

Input records (requirements, rules, evidence) are owned by the data edge and
treated as read-only snapshots by the analysis core.  Everything under
"Analysis" is derived and created fresh on every analysis call.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, computed_field

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


# ── Regulatory documents ─────────────────────────────────


class RequirementMetadata(BaseModel):
    jurisdiction: list[str] = []
    product_type: list[str] = []
    customer_type: list[str] = []
    risk_level: RiskLevel = RiskLevel.MEDIUM
    last_reviewed: Optional[str] = None


class Requirement(BaseModel):
    """A single regulatory clause."""
    id: str
    title: str
    reference: str = ""
    text: str
    metadata: RequirementMetadata
    evidence_ids: list[str] = []
    linked_rules: list[str] = []


class RegulatoryDocument(BaseModel):
    id: str
    title: str
    type: str = "regulatory"
    jurisdiction: str = ""
    last_updated: Optional[str] = None
    clauses: list[Requirement] = []


class DocumentInfo(BaseModel):
    """A document's header fields, without its clauses."""
    id: str
    title: str
    type: str = "regulatory"
    jurisdiction: str = ""
    last_updated: Optional[str] = None


class RequirementContext(BaseModel):
    requirement: Requirement
    document: DocumentInfo


class RequirementSearchHit(BaseModel):
    requirement: Requirement
    document_id: str
    relevance_score: int


# ── Monitoring rules ─────────────────────────────────────


class RulePerformance(BaseModel):
    alerts_per_month: int = 0
    true_positive_rate: float = Field(0.0, ge=0.0, le=1.0)
    alerts_investigated: int = 0
    backtest_score: float = 0.0
    coverage: Optional[float] = None
    avg_resolution_days: Optional[float] = None
    last_backtest: Optional[str] = None


class ImplementedRequirement(BaseModel):
    requirement_id: str
    description: str = ""


class Rule(BaseModel):
    """An automated transaction-monitoring control."""
    id: str
    name: str
    category: str = ""
    description: str = ""
    regulatory_basis: Optional[str] = None
    implemented_requirements: list[ImplementedRequirement] = []
    performance: RulePerformance = Field(default_factory=RulePerformance)
    metadata: RequirementMetadata = Field(default_factory=RequirementMetadata)
    linked_requirements: list[str] = []
    last_updated: Optional[str] = None


class Evidence(BaseModel):
    id: str
    type: str
    description: str
    quality: str = ""
    category: str = ""
    last_added: Optional[str] = None


# ── Analysis ─────────────────────────────────────────────


class Obligation(BaseModel):
    """One discrete duty extracted from a requirement's text."""
    id: str
    type: ObligationType
    text: str
    source_marker: Optional[str] = None  # e.g. "(3)" for numbered obligations
    indicators: list[str] = []
    priority: ObligationPriority


class RuleObligationMatch(BaseModel):
    rule_id: str
    obligation_id: str
    coverage: CoverageLevel = CoverageLevel.NONE
    confidence: float = Field(0.0, ge=0.0, le=0.95)
    matched_categories: list[str] = []
    reasoning: str = ""


class ObligationMapping(BaseModel):
    obligation: Obligation
    rules_covering: list[str] = []  # rule ids
    coverage_status: CoverageStatus = CoverageStatus.UNCOVERED
    coverage_level: CoverageLevel = CoverageLevel.NONE
    reasoning: str = ""


class CoverageGap(BaseModel):
    type: GapType
    severity: Severity
    description: str
    obligations: list[Obligation] = []
    specific_gaps: list[str] = []
    recommended_rule_count: Optional[int] = None
    recommendation: Optional[str] = None


class CoverageAssessment(BaseModel):
    total_obligations: int = 0
    rules_provided: int = 0
    estimated_rules_needed: int = 0
    gaps: list[CoverageGap] = []
    confidence: float = 0.0
    rule_obligation_mapping: list[ObligationMapping] = []


class CoverageWarning(BaseModel):
    type: WarningType
    severity: Severity
    title: str
    message: str
    details: str = ""
    specific_gaps: list[str] = []


class Recommendation(BaseModel):
    type: RecommendationType
    priority: RecommendationPriority
    title: str
    description: str
    action: str


class AnalysisResult(BaseModel):
    requirement_id: str
    title: str
    reference: str = ""
    has_multiple_obligations: bool = False
    obligations: list[Obligation] = []
    rule_count: int = 0
    estimated_rules_needed: int = 0
    gaps: list[CoverageGap] = []
    rule_obligation_mapping: list[ObligationMapping] = []
    warnings: list[CoverageWarning] = []
    recommendations: list[Recommendation] = []
    risk_level: RiskLevel = RiskLevel.LOW
    confidence_score: float = 0.0


class CoverageSummary(BaseModel):
    total_requirements: int = 0
    requirements_with_warnings: int = 0
    critical_gaps: int = 0
    high_risk_gaps: int = 0
    average_obligations_per_requirement: float = 0.0
    average_rules_per_requirement: float = 0.0


# ── Data consistency ─────────────────────────────────────


class LinkIssue(BaseModel):
    issue_type: str  # "invalid_rule_ref" | "invalid_requirement_ref" | "requirement_to_rule" | "rule_to_requirement"
    requirement_id: str
    rule_id: str
    message: str


class LinkConsistencyReport(BaseModel):
    total_requirements: int = 0
    total_rules: int = 0
    issues: list[LinkIssue] = []
    requirements_without_rules: list[str] = []
    rules_without_requirements: list[str] = []

    @computed_field
    @property
    def is_consistent(self) -> bool:
        return not self.issues
