"""
Tests: Dataset loading, repositories and link consistency.

Run with:
    pytest aml_coverage/tests/test_persistence.py -v
"""

import json
import logging
from datetime import date

import pytest

from aml_coverage.models.schemas import Evidence
from aml_coverage.persistence import (
    DatasetValidationError,
    DocumentRepository,
    EvidenceRepository,
    RuleRepository,
    check_link_consistency,
    load_dataset,
)
from aml_coverage.persistence.rule_repository import performance_rating

from conftest import SAMPLE_DATASET, make_dataset, make_requirement, make_rule


def _write(tmp_path, payload) -> str:
    path = tmp_path / "dataset.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return str(path)


class TestDataLoader:
    def test_sample_dataset_loads(self, sample_dataset):
        assert len(sample_dataset.documents) == 2
        assert len(sample_dataset.rules) == 6
        assert len(sample_dataset.evidence) == 7

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetValidationError, match="not found"):
            load_dataset(tmp_path / "nope.json")

    def test_bad_json(self, tmp_path):
        with pytest.raises(DatasetValidationError, match="not valid JSON"):
            load_dataset(_write(tmp_path, "{not json"))

    def test_not_an_object(self, tmp_path):
        with pytest.raises(DatasetValidationError):
            load_dataset(_write(tmp_path, [1, 2, 3]))

    def test_invalid_record_names_location(self, tmp_path):
        payload = json.loads(SAMPLE_DATASET.read_text(encoding="utf-8"))
        del payload["documents"][0]["clauses"][1]["text"]
        with pytest.raises(DatasetValidationError, match=r"documents\.0\.clauses\.1\.text"):
            load_dataset(_write(tmp_path, payload))

    def test_invalid_tpr_rejected(self, tmp_path):
        payload = json.loads(SAMPLE_DATASET.read_text(encoding="utf-8"))
        payload["rules"][0]["performance"]["true_positive_rate"] = 1.7
        with pytest.raises(DatasetValidationError, match="rules.0"):
            load_dataset(_write(tmp_path, payload))

    def test_duplicate_ids_rejected(self, tmp_path):
        payload = json.loads(SAMPLE_DATASET.read_text(encoding="utf-8"))
        payload["rules"].append(dict(payload["rules"][0]))
        with pytest.raises(DatasetValidationError, match="Duplicate rule ids: rule-us-01"):
            load_dataset(_write(tmp_path, payload))


class TestDocumentRepository:
    def test_lookups(self, sample_dataset):
        repo = DocumentRepository(sample_dataset.documents)
        assert repo.get_document("bsa").title == "Bank Secrecy Act"
        assert repo.get_requirement("bsa-1020-220").title == "Customer Identification Program"
        requirement, document = repo.get_requirement_with_document("eu-amlr-cash-limit")
        assert document.id == "eu-amlr"
        assert repo.get_requirement("missing") is None
        assert len(repo.all_requirements()) == 7

    def test_filters(self, sample_dataset):
        repo = DocumentRepository(sample_dataset.documents)
        assert [r.id for r in repo.filter_requirements(jurisdiction="EU")] == ["eu-amlr-cash-limit"]
        assert {r.id for r in repo.filter_requirements(customer_type="business", product_type="wealth-management")} \
            == {"bsa-1020-210", "bsa-complex-monitoring", "bsa-1020-320-a", "bsa-1020-320-b"}
        assert [r.id for r in repo.filter_requirements(search_term="1020.220")] == ["bsa-1020-220"]

    def test_search_ranks_title_first(self, sample_dataset):
        repo = DocumentRepository(sample_dataset.documents)
        hits = repo.search("suspicious activity")
        assert hits[0].requirement.id == "bsa-1020-320-a"
        assert hits[0].relevance_score == 100
        assert hits[0].document_id == "bsa"
        assert all(h.relevance_score > 0 for h in hits)
        assert repo.search("zzz-nothing") == []

    def test_compliance_stats(self, sample_dataset):
        stats = DocumentRepository(sample_dataset.documents).compliance_stats()
        assert stats["total_clauses"] == 7
        assert stats["document_count"] == 2
        assert stats["jurisdiction_stats"]["US"] == 6
        assert stats["risk_stats"]["critical"] == 4
        assert stats["total_rules"] == 7


class TestRuleRepository:
    def test_union_of_both_link_directions(self, caplog):
        requirement = make_requirement("req-1", linked_rules=["rule-b", "rule-c"])
        rules = [
            make_rule("rule-a", linked_requirements=["req-1"]),
            make_rule("rule-b", linked_requirements=["req-1"]),
            make_rule("rule-c"),
        ]
        repo = RuleRepository(rules)
        with caplog.at_level(logging.WARNING):
            found = repo.get_rules_for_requirement("req-1", requirement)
        assert [r.id for r in found] == ["rule-a", "rule-b", "rule-c"]
        assert "Link inconsistency for req-1" in caplog.text

    def test_rule_side_only_without_requirement(self):
        repo = RuleRepository([make_rule("rule-a", linked_requirements=["req-1"]), make_rule("rule-b")])
        assert [r.id for r in repo.get_rules_for_requirement("req-1")] == ["rule-a"]

    def test_unknown_rule_ids_skipped(self):
        requirement = make_requirement("req-1", linked_rules=["ghost"])
        assert RuleRepository([]).get_rules_for_requirement("req-1", requirement) == []

    def test_filters(self, sample_dataset):
        repo = RuleRepository(sample_dataset.rules)
        assert [r.id for r in repo.filter_rules(jurisdiction="EU")] == ["rule-eu-01"]
        assert [r.id for r in repo.filter_rules(risk_level="medium")] == ["rule-us-04"]
        assert {r.id for r in repo.filter_rules(min_true_positive_rate=0.85)} == {"rule-us-05", "rule-eu-01"}
        assert [r.id for r in repo.rules_by_category("Wire Transfer")] == ["rule-us-02"]

    def test_search_rules(self, sample_dataset):
        repo = RuleRepository(sample_dataset.rules)
        results = repo.search_rules("wire transfer")
        assert results[0].id == "rule-us-02"

    def test_performance_summary(self, sample_dataset):
        summary = RuleRepository(sample_dataset.rules).performance_summary()
        assert summary["total_rules"] == 6
        assert summary["performance_distribution"] == {"excellent": 3, "good": 2, "fair": 0, "poor": 1}
        assert summary["rules_by_category"]["Cash Monitoring"] == 3
        assert RuleRepository([]).performance_summary()["average_true_positive_rate"] == 0.0

    @pytest.mark.parametrize("tpr,rating", [(0.8, "excellent"), (0.6, "good"), (0.4, "fair"), (0.39, "poor")])
    def test_performance_rating(self, tpr, rating):
        assert performance_rating(tpr) == rating


class TestEvidenceRepository:
    def test_resolves_known_evidence(self, sample_dataset):
        repo = EvidenceRepository(sample_dataset.evidence)
        requirement = DocumentRepository(sample_dataset.documents).get_requirement("bsa-1020-320-a")
        assert [e.id for e in repo.evidence_for_requirement(requirement)] == [
            "ev-backtest-002", "ev-backtest-004", "ev-scenario-001",
        ]

    def test_unknown_evidence_skipped(self):
        repo = EvidenceRepository([Evidence(id="ev-1", type="backtest", description="Backtest")])
        requirement = make_requirement("req-1").model_copy(update={"evidence_ids": ["ev-1", "ev-404"]})
        assert [e.id for e in repo.evidence_for_requirement(requirement)] == ["ev-1"]
        assert repo.get_evidence("ev-404") is None

    def test_by_type_and_category(self, sample_dataset):
        repo = EvidenceRepository(sample_dataset.evidence)
        assert [e.id for e in repo.evidence_by_type("backtest")] == [
            "ev-backtest-001", "ev-backtest-002", "ev-backtest-004",
        ]
        assert {e.id for e in repo.evidence_by_category("cash")} == {
            "ev-backtest-001", "ev-threshold-001", "ev-threshold-009",
        }
        assert repo.evidence_by_type("interview") == []

    def test_stats(self, sample_dataset):
        stats = EvidenceRepository(sample_dataset.evidence).evidence_stats()
        assert stats["total"] == 7
        assert stats["by_type"] == {"backtest": 3, "threshold-sensitivity": 2, "atl-btl-test": 1, "scenario-test": 1}
        assert stats["by_quality"] == {"excellent": 7}
        assert stats["by_category"]["Cash Monitoring"] == 2

    def test_filter_by_quality(self):
        repo = EvidenceRepository([
            Evidence(id="ev-a", type="backtest", description="A", quality="excellent"),
            Evidence(id="ev-b", type="backtest", description="B", quality="good"),
            Evidence(id="ev-c", type="backtest", description="C", quality="fair"),
            Evidence(id="ev-d", type="backtest", description="D"),
        ])
        ids = ["ev-a", "ev-b", "ev-c", "ev-d", "ev-404"]
        assert [e.id for e in repo.filter_by_quality(ids)] == ["ev-a", "ev-b"]
        assert [e.id for e in repo.filter_by_quality(ids, "excellent")] == ["ev-a"]
        assert [e.id for e in repo.filter_by_quality(ids, "fair")] == ["ev-a", "ev-b", "ev-c"]
        assert len(repo.filter_by_quality(ids, "unrated")) == 4

    def test_most_recent_date(self, sample_dataset):
        repo = EvidenceRepository(sample_dataset.evidence)
        ids = ["ev-backtest-002", "ev-backtest-004", "ev-scenario-001"]
        assert repo.most_recent_evidence_date(ids) == date(2024, 12, 18)
        assert repo.most_recent_evidence_date([]) is None
        assert repo.most_recent_evidence_date(["ev-404"]) is None

    def test_most_recent_date_skips_missing_and_unreadable(self):
        repo = EvidenceRepository([
            Evidence(id="ev-a", type="backtest", description="A", last_added="2024-03-01"),
            Evidence(id="ev-b", type="backtest", description="B", last_added="sometime"),
            Evidence(id="ev-c", type="backtest", description="C"),
        ])
        assert repo.most_recent_evidence_date(["ev-a", "ev-b", "ev-c"]) == date(2024, 3, 1)
        assert repo.most_recent_evidence_date(["ev-b", "ev-c"]) is None


class TestLinkConsistency:
    def test_sample_dataset_is_consistent(self, sample_dataset):
        report = check_link_consistency(sample_dataset.documents, sample_dataset.rules)
        assert report.is_consistent
        assert report.total_requirements == 7
        assert set(report.requirements_without_rules) == {"bsa-1020-220", "bsa-1020-320-b"}
        assert report.rules_without_requirements == ["rule-us-04"]

    def test_all_issue_kinds(self):
        dataset = make_dataset(
            requirements=[
                make_requirement("req-1", linked_rules=["rule-a", "ghost-rule"]),
                make_requirement("req-2"),
            ],
            rules=[
                make_rule("rule-a"),
                make_rule("rule-b", linked_requirements=["req-2", "ghost-req"]),
            ],
        )
        report = check_link_consistency(dataset.documents, dataset.rules)
        kinds = sorted(i.issue_type for i in report.issues)
        assert kinds == [
            "invalid_requirement_ref",
            "invalid_rule_ref",
            "requirement_to_rule",
            "rule_to_requirement",
        ]
        assert report.is_consistent is False
        assert report.model_dump()["is_consistent"] is False
        assert report.requirements_without_rules == []
        assert report.rules_without_requirements == ["rule-a"]
