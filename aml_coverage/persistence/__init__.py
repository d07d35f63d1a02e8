"""Persistence — dataset loading, repositories, link consistency."""

from aml_coverage.persistence.consistency import check_link_consistency
from aml_coverage.persistence.data_loader import Dataset, DatasetValidationError, load_dataset, parse_dataset
from aml_coverage.persistence.document_repository import DocumentRepository
from aml_coverage.persistence.evidence_repository import EvidenceRepository
from aml_coverage.persistence.rule_repository import RuleRepository

__all__ = [
    "Dataset",
    "DatasetValidationError",
    "DocumentRepository",
    "EvidenceRepository",
    "RuleRepository",
    "check_link_consistency",
    "load_dataset",
    "parse_dataset",
]
