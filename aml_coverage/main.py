"""
AML Rule Coverage Analysis — Main Entry Point

Analyze every requirement in the dataset (CLI):
    python -m aml_coverage.main [dataset.json]

Check requirement ↔ rule links (exit code 1 on issues):
    python -m aml_coverage.main --validate [dataset.json]

Run as an API server:
    python -m aml_coverage.main --serve
    # or: uvicorn aml_coverage.api:app --reload --port 8000

Or import and run programmatically:
    from aml_coverage.main import run
    results = run("path/to/dataset.json")
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

from aml_coverage.config import get_settings
from aml_coverage.models.schemas import AnalysisResult, LinkConsistencyReport
from aml_coverage.services.analysis_service import CoverageAnalysisService
from aml_coverage.utils.logger import setup_logging


def run(dataset_path: str = "") -> list[AnalysisResult]:
    """Analyze every requirement in the dataset and log a summary."""
    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("  AML RULE COVERAGE ANALYSIS")
    logger.info(f"  Started: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    service = CoverageAnalysisService.from_settings(dataset_path or None)
    results = service.analyze_all()

    _print_summary(service, results)
    return results


def validate(dataset_path: str = "") -> LinkConsistencyReport:
    """Run the link consistency check and log every issue found."""
    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)

    service = CoverageAnalysisService.from_settings(dataset_path or None)
    report = service.consistency_report()

    logger.info(f"  Requirements:  {report.total_requirements}")
    logger.info(f"  Rules:         {report.total_rules}")
    logger.info(f"  Issues:        {len(report.issues)}")
    for issue in report.issues:
        logger.info(f"    [{issue.issue_type}] {issue.message}")
    if report.requirements_without_rules:
        logger.info(f"  Unmonitored requirements: {', '.join(report.requirements_without_rules)}")
    if report.rules_without_requirements:
        logger.info(f"  Rules without requirements: {', '.join(report.rules_without_requirements)}")
    logger.info(f"  Consistent:    {report.is_consistent}")
    return report


def _print_summary(service: CoverageAnalysisService, results: list[AnalysisResult]) -> None:
    """Print a human-readable summary of the analysis run."""
    logger = logging.getLogger(__name__)
    summary = service.analyzer.get_coverage_summary(results)

    logger.info("")
    logger.info("-" * 60)
    logger.info("  COVERAGE SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Requirements:         {summary.total_requirements}")
    logger.info(f"  With warnings:        {summary.requirements_with_warnings}")
    logger.info(f"  Critical risk:        {summary.critical_gaps}")
    logger.info(f"  High risk:            {summary.high_risk_gaps}")
    logger.info(f"  Avg obligations:      {summary.average_obligations_per_requirement:.2f}")
    logger.info(f"  Avg rules:            {summary.average_rules_per_requirement:.2f}")
    logger.info("-" * 60)

    for result in results:
        logger.info(
            f"    {result.requirement_id:<28} | "
            f"risk={result.risk_level.value:<8} | "
            f"obligations={len(result.obligations)} | "
            f"rules={result.rule_count}/{result.estimated_rules_needed} | "
            f"warnings={len(result.warnings)}"
        )
    logger.info("")


def serve(host: str = "", port: int = 0) -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    host = host or settings.api_host
    port = port or settings.api_port
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("aml_coverage.api:app", host=host, port=port, reload=settings.debug)


def cli(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if "--serve" in argv:
        serve()
        return 0

    positional = [a for a in argv if not a.startswith("--")]
    dataset_arg = positional[0] if positional else ""

    if "--validate" in argv:
        report = validate(dataset_arg)
        return 0 if report.is_consistent else 1

    run(dataset_arg)
    return 0


if __name__ == "__main__":
    sys.exit(cli())
