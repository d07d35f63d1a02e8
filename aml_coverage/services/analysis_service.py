"""
Coverage Analysis Service — binds the dataset repositories to the analysis core.

The service resolves ids against the repositories, looks up each
requirement's linked rules server-side, and runs the CoverageAnalyzer.
Unknown ids raise the *NotFoundError family (all LookupError subclasses)
which the API turns into 404s.

The matcher table can be replaced or reloaded at runtime through the
MatcherConfigStore; the running analyzer picks the new table up immediately
and its cache is emptied.
"""

from __future__ import annotations

import logging
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any

from aml_coverage.analysis import AnalysisCache, CoverageAnalyzer, MatcherConfig, MatcherConfigStore
from aml_coverage.config import get_settings
from aml_coverage.models.schemas import (
    AnalysisResult,
    CoverageSummary,
    DocumentInfo,
    Evidence,
    LinkConsistencyReport,
    Requirement,
    RequirementContext,
    Rule,
)
from aml_coverage.persistence import (
    Dataset,
    DocumentRepository,
    EvidenceRepository,
    RuleRepository,
    check_link_consistency,
    load_dataset,
)

logger = logging.getLogger(__name__)


class RequirementNotFoundError(LookupError):
    pass


class RuleNotFoundError(LookupError):
    pass


class EvidenceNotFoundError(LookupError):
    pass


class CoverageAnalysisService:
    """Requirement/rule lookups plus coverage analysis over one dataset."""

    def __init__(
        self,
        dataset: Dataset,
        analyzer: CoverageAnalyzer | None = None,
        config_store: MatcherConfigStore | None = None,
    ):
        self.documents = DocumentRepository(dataset.documents)
        self.rules = RuleRepository(dataset.rules)
        self.evidence = EvidenceRepository(dataset.evidence)
        self.analyzer = analyzer or CoverageAnalyzer()
        # No file behind the default store: updates live in memory only
        self.config_store = config_store or MatcherConfigStore(config_path="")

    @classmethod
    def from_settings(cls, dataset_path: str | Path | None = None) -> "CoverageAnalysisService":
        """Build a service from application settings (dataset, matcher table, cache)."""
        settings = get_settings()
        dataset = load_dataset(dataset_path or settings.dataset_path)

        cache = None
        if settings.analysis_cache_enabled:
            cache = AnalysisCache(max_entries=settings.analysis_cache_size)

        store = MatcherConfigStore(settings.matcher_config_path)
        analyzer = CoverageAnalyzer(
            matcher_config=store.get_config(),
            max_obligations=settings.max_obligations,
            cache=cache,
        )
        return cls(dataset, analyzer, store)

    # ── Lookups ──────────────────────────────────────────

    def get_requirement(self, requirement_id: str) -> Requirement:
        requirement = self.documents.get_requirement(requirement_id)
        if requirement is None:
            raise RequirementNotFoundError(f"Requirement not found: {requirement_id}")
        return requirement

    def get_requirement_context(self, requirement_id: str) -> RequirementContext:
        """The requirement together with the header of the document that owns it."""
        entry = self.documents.get_requirement_with_document(requirement_id)
        if entry is None:
            raise RequirementNotFoundError(f"Requirement not found: {requirement_id}")
        requirement, document = entry
        return RequirementContext(
            requirement=requirement,
            document=DocumentInfo(**document.model_dump(exclude={"clauses"})),
        )

    def get_rule(self, rule_id: str) -> Rule:
        rule = self.rules.get_rule(rule_id)
        if rule is None:
            raise RuleNotFoundError(f"Rule not found: {rule_id}")
        return rule

    def get_evidence(self, evidence_id: str) -> Evidence:
        item = self.evidence.get_evidence(evidence_id)
        if item is None:
            raise EvidenceNotFoundError(f"Evidence not found: {evidence_id}")
        return item

    def rules_for_requirement(self, requirement_id: str) -> list[Rule]:
        requirement = self.get_requirement(requirement_id)
        return self.rules.get_rules_for_requirement(requirement_id, requirement)

    def evidence_for_requirement(self, requirement_id: str, min_quality: str | None = None) -> list[Evidence]:
        requirement = self.get_requirement(requirement_id)
        if min_quality:
            return self.evidence.filter_by_quality(requirement.evidence_ids, min_quality)
        return self.evidence.evidence_for_requirement(requirement)

    def latest_evidence_date(self, requirement_id: str) -> date | None:
        requirement = self.get_requirement(requirement_id)
        return self.evidence.most_recent_evidence_date(requirement.evidence_ids)

    def _rule_lookup(self, requirement_id: str) -> list[Rule]:
        return self.rules.get_rules_for_requirement(
            requirement_id, self.documents.get_requirement(requirement_id)
        )

    # ── Analysis ─────────────────────────────────────────

    def analyze_requirement(self, requirement_id: str) -> AnalysisResult:
        requirement = self.get_requirement(requirement_id)
        rules = self.rules.get_rules_for_requirement(requirement_id, requirement)
        result = self.analyzer.analyze_requirement_coverage(requirement, rules)
        logger.info(
            f"Analyzed {requirement_id}: {len(result.obligations)} obligations, "
            f"{result.rule_count} rules, risk={result.risk_level.value}"
        )
        return result

    def analyze_all(self) -> list[AnalysisResult]:
        """Every requirement in the dataset, warnings or not."""
        return [
            self.analyzer.analyze_requirement_coverage(req, self._rule_lookup(req.id))
            for req in self.documents.all_requirements()
        ]

    def analyze_bulk(self) -> list[AnalysisResult]:
        """Only the requirements whose analysis produced warnings."""
        results = self.analyzer.analyze_bulk_coverage(
            self.documents.all_requirements(), self._rule_lookup
        )
        logger.info(f"Bulk analysis: {len(results)} requirements with warnings")
        self._log_cache_stats()
        return results

    def coverage_summary(self) -> CoverageSummary:
        summary = self.analyzer.get_coverage_summary(self.analyze_all())
        self._log_cache_stats()
        return summary

    def consistency_report(self) -> LinkConsistencyReport:
        return check_link_consistency(self.documents.all_documents(), self.rules.all_rules())

    # ── Matcher table admin ──────────────────────────────

    def matcher_config(self) -> MatcherConfig:
        return self.analyzer.matcher_config

    def update_matcher_config(self, config_dict: dict[str, Any]) -> MatcherConfig:
        """Validate, persist and activate a new matcher table (raises ValidationError)."""
        config = self.config_store.update_config(config_dict)
        self._activate(config)
        return config

    def reload_matcher_config(self) -> MatcherConfig:
        config = self.config_store.reload()
        self._activate(config)
        return config

    def _activate(self, config: MatcherConfig) -> None:
        self.analyzer.matcher_config = config
        if self.analyzer.cache is not None:
            dropped = len(self.analyzer.cache)
            self.analyzer.cache.clear()
            logger.info(f"Matcher table changed, cleared {dropped} cached analyses")
        else:
            logger.info("Matcher table changed")

    # ── Cache ────────────────────────────────────────────

    def cache_stats(self) -> dict[str, Any] | None:
        if self.analyzer.cache is None:
            return None
        return self.analyzer.cache.stats()

    def _log_cache_stats(self) -> None:
        stats = self.cache_stats()
        if stats is not None:
            logger.info(
                f"Analysis cache: {stats['entries']}/{stats['max_entries']} entries, "
                f"{stats['hits']} hits, {stats['misses']} misses"
            )


@lru_cache()
def get_analysis_service() -> CoverageAnalysisService:
    """Return the process-wide service built from settings."""
    return CoverageAnalysisService.from_settings()
