from enum import Enum


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ObligationType(str, Enum):
    NUMBERED = "numbered"
    MUST_CLAUSE = "must_clause"
    THRESHOLD = "threshold"
    GENERAL = "general"


class ObligationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


class CoverageLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CoverageStatus(str, Enum):
    COVERED = "covered"
    UNCOVERED = "uncovered"


class GapType(str, Enum):
    UNCOVERED_OBLIGATIONS = "uncovered_obligations"
    PARTIAL_COVERAGE = "partial_coverage"
    SINGLE_RULE_MULTIPLE_OBLIGATIONS = "single_rule_multiple_obligations"
    INSUFFICIENT_RULES = "insufficient_rules"


class WarningType(str, Enum):
    NO_COVERAGE = "no_coverage"
    UNCOVERED_OBLIGATIONS = "uncovered_obligations"
    PARTIAL_COVERAGE = "partial_coverage"
    SINGLE_RULE_MULTIPLE_OBLIGATIONS = "single_rule_multiple_obligations"
    INSUFFICIENT_RULES = "insufficient_rules"
    COMPLEX_REQUIREMENT = "complex_requirement"


class RecommendationType(str, Enum):
    CREATE_RULES = "create_rules"
    ADD_RULES = "add_rules"
    SPLIT_RULES = "split_rules"
    THRESHOLD_RULES = "threshold_rules"


class RecommendationPriority(str, Enum):
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
