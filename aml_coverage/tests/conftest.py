"""Shared fixtures and record builders for the coverage analysis tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from aml_coverage.models.schemas import (
    RegulatoryDocument,
    Requirement,
    RequirementMetadata,
    Rule,
)
from aml_coverage.persistence import Dataset, load_dataset

SAMPLE_DATASET = Path(__file__).resolve().parent.parent / "data" / "sample_dataset.json"

SCENARIO_TEXT = (
    "Systems must: (1) Monitor cash deposits above $8,000, "
    "(2) Detect wire transfers above $15,000, "
    "(3) Flag velocity anomalies exceeding 200%."
)


def make_rule(
    rule_id: str = "rule-1",
    name: str = "Test Rule",
    description: str = "",
    category: str = "",
    linked_requirements: list[str] | None = None,
    **extra,
) -> Rule:
    return Rule(
        id=rule_id,
        name=name,
        description=description,
        category=category,
        linked_requirements=linked_requirements or [],
        **extra,
    )


def make_requirement(
    requirement_id: str = "req-1",
    text: str = SCENARIO_TEXT,
    linked_rules: list[str] | None = None,
    **meta,
) -> Requirement:
    return Requirement(
        id=requirement_id,
        title=f"Requirement {requirement_id}",
        reference=f"REF {requirement_id}",
        text=text,
        metadata=RequirementMetadata(**meta),
        linked_rules=linked_rules or [],
    )


def make_dataset(requirements: list[Requirement], rules: list[Rule], evidence=None) -> Dataset:
    document = RegulatoryDocument(id="doc-1", title="Test Regulation", clauses=requirements)
    return Dataset(documents=[document], rules=rules, evidence=evidence or [])


@pytest.fixture
def scenario_requirement() -> Requirement:
    return make_requirement("req-scenario", SCENARIO_TEXT)


@pytest.fixture
def cash_rule() -> Rule:
    return make_rule("rule-cash", name="Cash Deposit Rule", description="cash deposit monitoring")


@pytest.fixture(scope="session")
def sample_dataset() -> Dataset:
    return load_dataset(SAMPLE_DATASET)
