"""
Link consistency checks between requirements and rules.

Reports dangling references on either side, one-sided links, requirements with
no rules and rules with no requirements.  Nothing here raises: the report is
for operators (CLI --validate, /api/analysis/consistency).
"""

from __future__ import annotations

import logging

from aml_coverage.models.schemas import (
    LinkConsistencyReport,
    LinkIssue,
    RegulatoryDocument,
    Rule,
)

logger = logging.getLogger(__name__)


def check_link_consistency(
    documents: list[RegulatoryDocument],
    rules: list[Rule],
) -> LinkConsistencyReport:
    requirements = {c.id: c for d in documents for c in d.clauses}
    rules_by_id = {r.id: r for r in rules}
    report = LinkConsistencyReport(total_requirements=len(requirements), total_rules=len(rules))

    for requirement_id, requirement in requirements.items():
        for rule_id in requirement.linked_rules:
            rule = rules_by_id.get(rule_id)
            if rule is None:
                report.issues.append(LinkIssue(
                    issue_type="invalid_rule_ref",
                    requirement_id=requirement_id,
                    rule_id=rule_id,
                    message=f"Requirement {requirement_id} references non-existent rule {rule_id}",
                ))
            elif requirement_id not in rule.linked_requirements:
                report.issues.append(LinkIssue(
                    issue_type="requirement_to_rule",
                    requirement_id=requirement_id,
                    rule_id=rule_id,
                    message=f"Requirement {requirement_id} links to rule {rule_id}, but rule doesn't link back",
                ))

    for rule in rules:
        for requirement_id in rule.linked_requirements:
            requirement = requirements.get(requirement_id)
            if requirement is None:
                report.issues.append(LinkIssue(
                    issue_type="invalid_requirement_ref",
                    requirement_id=requirement_id,
                    rule_id=rule.id,
                    message=f"Rule {rule.id} references non-existent requirement {requirement_id}",
                ))
            elif rule.id not in requirement.linked_rules:
                report.issues.append(LinkIssue(
                    issue_type="rule_to_requirement",
                    requirement_id=requirement_id,
                    rule_id=rule.id,
                    message=f"Rule {rule.id} links to requirement {requirement_id}, but requirement doesn't link back",
                ))

    linked_from_rules = {rid for r in rules for rid in r.linked_requirements}
    report.requirements_without_rules = [
        rid for rid, req in requirements.items()
        if not req.linked_rules and rid not in linked_from_rules
    ]
    report.rules_without_requirements = [r.id for r in rules if not r.linked_requirements]

    if report.issues:
        logger.warning(f"Found {len(report.issues)} link consistency issues")
    return report
