"""
Dataset Loader — reads the regulatory documents, monitoring rules and evidence
catalogue from a JSON file and validates the whole thing up front.

A dataset that fails validation is rejected entirely; the analysis core never
sees partial data.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from aml_coverage.models.schemas import Evidence, RegulatoryDocument, Rule

logger = logging.getLogger(__name__)


class DatasetValidationError(ValueError):
    """Raised when a dataset cannot be read or fails schema validation."""


class Dataset(BaseModel):
    documents: list[RegulatoryDocument] = []
    rules: list[Rule] = []
    evidence: list[Evidence] = []


def _duplicates(ids: list[str]) -> list[str]:
    return sorted(i for i, n in Counter(ids).items() if n > 1)


def parse_dataset(raw: Any) -> Dataset:
    """Validate an already-decoded dataset payload."""
    if not isinstance(raw, dict):
        raise DatasetValidationError("Dataset must be a JSON object with documents/rules/evidence")

    try:
        dataset = Dataset(**raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(p) for p in first.get("loc", ()))
        raise DatasetValidationError(
            f"Invalid dataset at {location}: {first.get('msg')} ({exc.error_count()} errors)"
        ) from exc

    requirement_ids = [c.id for d in dataset.documents for c in d.clauses]
    for label, ids in (
        ("document", [d.id for d in dataset.documents]),
        ("requirement", requirement_ids),
        ("rule", [r.id for r in dataset.rules]),
        ("evidence", [e.id for e in dataset.evidence]),
    ):
        dupes = _duplicates(ids)
        if dupes:
            raise DatasetValidationError(f"Duplicate {label} ids: {', '.join(dupes)}")

    return dataset


def load_dataset(path: str | Path) -> Dataset:
    """Load and validate a dataset file."""
    path = Path(path)
    if not path.exists():
        raise DatasetValidationError(f"Dataset file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DatasetValidationError(f"Dataset {path} is not valid JSON: {exc}") from exc

    dataset = parse_dataset(raw)
    logger.info(
        f"Loaded dataset {path.name}: {len(dataset.documents)} documents, "
        f"{sum(len(d.clauses) for d in dataset.documents)} requirements, "
        f"{len(dataset.rules)} rules, {len(dataset.evidence)} evidence items"
    )
    return dataset
