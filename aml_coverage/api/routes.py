"""
API routes — thin HTTP layer that delegates to the CoverageAnalysisService.

Routes:
  GET  /health                                  → API health check
  GET  /api/requirements                        → List requirements (jurisdiction/product/customer/search filters)
  GET  /api/requirements/search?q=              → Relevance-ranked clause search
  GET  /api/requirements/stats                  → Clause counts per jurisdiction / risk level
  GET  /api/requirements/{id}                   → One requirement
  GET  /api/requirements/{id}/document          → Requirement plus its owning document
  GET  /api/requirements/{id}/rules             → Rules linked to a requirement (both link directions)
  GET  /api/requirements/{id}/evidence          → Evidence backing a requirement (optional min_quality)
  GET  /api/requirements/{id}/evidence/latest   → Most recent evidence date for a requirement
  GET  /api/rules                               → List rules (jurisdiction/product/customer/risk/TPR filters)
  GET  /api/rules/search?q=                     → Relevance-ranked rule search
  GET  /api/rules/performance                   → Rule performance summary
  GET  /api/rules/category/{category}           → Rules in one category
  GET  /api/rules/{id}                          → One rule
  GET  /api/evidence                            → List evidence (type/category filters)
  GET  /api/evidence/stats                      → Evidence counts per type / quality / category
  GET  /api/evidence/{id}                       → One evidence item
  POST /api/analysis/analyze                    → Coverage analysis for one requirement
  GET  /api/analysis/bulk                       → Requirements whose analysis carries warnings
  GET  /api/analysis/summary                    → Coverage summary over every requirement
  GET  /api/analysis/consistency                → Requirement ↔ rule link consistency report
  GET  /api/config/matcher                      → Active matcher keyword table
  PUT  /api/config/matcher                      → Replace the matcher table (omitted fields take defaults)
  POST /api/config/matcher/reload               → Re-read the matcher table from its file
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, ValidationError

from aml_coverage.analysis import MatcherConfig
from aml_coverage.config import get_settings
from aml_coverage.models.enums import RiskLevel
from aml_coverage.models.schemas import (
    AnalysisResult,
    CoverageSummary,
    Evidence,
    LinkConsistencyReport,
    Requirement,
    RequirementContext,
    RequirementSearchHit,
    Rule,
)
from aml_coverage.services.analysis_service import (
    CoverageAnalysisService,
    EvidenceNotFoundError,
    RequirementNotFoundError,
    RuleNotFoundError,
    get_analysis_service,
)

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
requirements_router = APIRouter()
rules_router = APIRouter()
evidence_router = APIRouter()
analysis_router = APIRouter()
config_router = APIRouter()


# ── Request schemas ──────────────────────────────────────
class AnalyzeRequest(BaseModel):
    requirement_id: str


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "ok",
        "app": settings.app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── Requirements ─────────────────────────────────────────

@requirements_router.get("", response_model=list[Requirement])
async def list_requirements(
    jurisdiction: Optional[str] = None,
    product_type: Optional[str] = None,
    customer_type: Optional[str] = None,
    search: Optional[str] = None,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    return service.documents.filter_requirements(
        jurisdiction=jurisdiction,
        product_type=product_type,
        customer_type=customer_type,
        search_term=search,
    )


@requirements_router.get("/search", response_model=list[RequirementSearchHit])
async def search_requirements(
    q: str = Query(..., min_length=1),
    limit: int = Query(50, ge=1, le=200),
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    return service.documents.search(q, limit)


@requirements_router.get("/stats")
async def requirement_stats(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.documents.compliance_stats()


@requirements_router.get("/{requirement_id}", response_model=Requirement)
async def get_requirement(
    requirement_id: str,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        return service.get_requirement(requirement_id)
    except RequirementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@requirements_router.get("/{requirement_id}/document", response_model=RequirementContext)
async def get_requirement_document(
    requirement_id: str,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        return service.get_requirement_context(requirement_id)
    except RequirementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@requirements_router.get("/{requirement_id}/rules", response_model=list[Rule])
async def get_requirement_rules(
    requirement_id: str,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        return service.rules_for_requirement(requirement_id)
    except RequirementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@requirements_router.get("/{requirement_id}/evidence", response_model=list[Evidence])
async def get_requirement_evidence(
    requirement_id: str,
    min_quality: Optional[str] = None,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        return service.evidence_for_requirement(requirement_id, min_quality)
    except RequirementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@requirements_router.get("/{requirement_id}/evidence/latest")
async def get_requirement_latest_evidence(
    requirement_id: str,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        latest = service.latest_evidence_date(requirement_id)
    except RequirementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {
        "requirement_id": requirement_id,
        "most_recent_evidence_date": latest.isoformat() if latest else None,
    }


# ── Rules ────────────────────────────────────────────────

@rules_router.get("", response_model=list[Rule])
async def list_rules(
    jurisdiction: Optional[str] = None,
    product_type: Optional[str] = None,
    customer_type: Optional[str] = None,
    risk_level: Optional[RiskLevel] = None,
    min_true_positive_rate: Optional[float] = Query(None, ge=0.0, le=1.0),
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    return service.rules.filter_rules(
        jurisdiction=jurisdiction,
        product_type=product_type,
        customer_type=customer_type,
        risk_level=risk_level,
        min_true_positive_rate=min_true_positive_rate,
    )


@rules_router.get("/search", response_model=list[Rule])
async def search_rules(
    q: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=200),
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    return service.rules.search_rules(q, limit)


@rules_router.get("/performance")
async def rule_performance(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.rules.performance_summary()


@rules_router.get("/category/{category}", response_model=list[Rule])
async def rules_in_category(
    category: str,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    return service.rules.rules_by_category(category)


@rules_router.get("/{rule_id}", response_model=Rule)
async def get_rule(
    rule_id: str,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        return service.get_rule(rule_id)
    except RuleNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ── Evidence ─────────────────────────────────────────────

@evidence_router.get("", response_model=list[Evidence])
async def list_evidence(
    evidence_type: Optional[str] = Query(None, alias="type"),
    category: Optional[str] = None,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    if evidence_type:
        items = service.evidence.evidence_by_type(evidence_type)
    else:
        items = service.evidence.all_evidence()
    if category:
        in_category = {e.id for e in service.evidence.evidence_by_category(category)}
        items = [e for e in items if e.id in in_category]
    return items


@evidence_router.get("/stats")
async def evidence_stats(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.evidence.evidence_stats()


@evidence_router.get("/{evidence_id}", response_model=Evidence)
async def get_evidence(
    evidence_id: str,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        return service.get_evidence(evidence_id)
    except EvidenceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ── Analysis ─────────────────────────────────────────────

@analysis_router.post("/analyze", response_model=AnalysisResult)
async def analyze_requirement(
    request: AnalyzeRequest,
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        return service.analyze_requirement(request.requirement_id)
    except RequirementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@analysis_router.get("/bulk", response_model=list[AnalysisResult])
async def analyze_bulk(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.analyze_bulk()


@analysis_router.get("/summary", response_model=CoverageSummary)
async def coverage_summary(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.coverage_summary()


@analysis_router.get("/consistency", response_model=LinkConsistencyReport)
async def link_consistency(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.consistency_report()


# ── Matcher config (admin) ───────────────────────────────

@config_router.get("/matcher", response_model=MatcherConfig)
async def get_matcher_config(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.matcher_config()


@config_router.put("/matcher", response_model=MatcherConfig)
async def update_matcher_config(
    config: dict[str, Any] = Body(...),
    service: CoverageAnalysisService = Depends(get_analysis_service),
):
    try:
        updated = service.update_matcher_config(config)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info(f"Matcher table replaced via API ({len(updated.categories)} categories)")
    return updated


@config_router.post("/matcher/reload", response_model=MatcherConfig)
async def reload_matcher_config(service: CoverageAnalysisService = Depends(get_analysis_service)):
    return service.reload_matcher_config()
