"""AML Rule Coverage Analysis — regulatory obligation extraction and monitoring-rule coverage."""

__version__ = "0.1.0"
