"""
Matcher Config Store — the heuristic matcher's keyword/weight table.

The table is plain data so it can be tuned (or replaced wholesale) without
touching the assessment logic.  Defaults mirror the production keyword set;
an optional JSON file (settings.matcher_config_path) overrides them.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from aml_coverage.config import get_settings

logger = logging.getLogger(__name__)


# ── Config models ────────────────────────────────────────

class SemanticCategory(BaseModel):
    """One semantic category: how to detect it in an obligation and in a rule."""
    key: str
    label: str
    detector: str  # regex, applied to the lowercased obligation text
    keywords: list[str]  # substrings, looked up in the lowercased rule text
    weight: float = Field(0.0, ge=0.0)  # 0 = detect-only, never scored

    _pattern: re.Pattern[str] = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._pattern = re.compile(self.detector)

    @field_validator("detector")
    @classmethod
    def _detector_compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid detector pattern {value!r}: {exc}") from exc
        return value

    @property
    def pattern(self) -> re.Pattern[str]:
        return self._pattern


def _default_categories() -> list[SemanticCategory]:
    return [
        SemanticCategory(
            key="cash",
            label="cash monitoring",
            detector=r"cash|deposit|structuring|\$8,?000|\$10,?000",
            keywords=["cash", "deposit", "withdrawal", "currency", "structuring", "$8,000", "$10,000", "ctr"],
            weight=0.8,
        ),
        SemanticCategory(
            key="wire",
            label="wire transfer",
            detector=r"wire|transfer|beneficiar|cross-border",
            keywords=["wire", "transfer", "swift", "beneficiary", "cross-border", "remittance"],
            weight=0.7,
        ),
        SemanticCategory(
            key="velocity",
            label="velocity tracking",
            detector=r"velocity|frequenc|pattern|200%|baseline",
            keywords=["velocity", "frequency", "volume", "pattern", "unusual", "anomal", "deviation", "baseline"],
            weight=0.6,
        ),
        SemanticCategory(
            key="business",
            label="business monitoring",
            detector=r"business|commercial|ratio|40%",
            keywords=["business", "commercial", "corporate", "company", "ratio", "cash-to-deposit"],
            weight=0.5,
        ),
        SemanticCategory(
            key="cross_border",
            label="cross-border",
            detector=r"cross-border|jurisdiction|fatf|\$5,?000",
            keywords=["cross-border", "international", "foreign", "jurisdiction", "country", "fatf", "high-risk"],
            weight=0.7,
        ),
        SemanticCategory(
            key="threshold",
            label="threshold",
            detector=r"\$\d+|exceed|above|below",
            keywords=["threshold", "limit", "exceed", "above", "below", "$"],
        ),
        SemanticCategory(
            key="real_time",
            label="real-time",
            detector=r"real-time|alert|immediate",
            keywords=["real-time", "immediate", "instant", "alert", "notification"],
        ),
    ]


class MatcherConfig(BaseModel):
    """Keyword table plus the score → coverage-level cut-offs."""
    categories: list[SemanticCategory] = Field(default_factory=_default_categories)
    high_threshold: float = 0.7
    medium_threshold: float = 0.4
    low_threshold: float = 0.2
    max_confidence: float = Field(0.95, ge=0.0, le=0.95)


# ── Store class ──────────────────────────────────────────

class MatcherConfigStore:
    """
    Loads the matcher table from a JSON file. Falls back to defaults when no
    file is configured or the file is unusable.
    Cached after first load until reload() or update_config().
    """

    def __init__(self, config_path: str | None = None):
        self._path = config_path if config_path is not None else get_settings().matcher_config_path
        self._cache: MatcherConfig | None = None

    def get_config(self) -> MatcherConfig:
        if self._cache is not None:
            return self._cache

        config = self._load_from_file()
        if config is None:
            config = MatcherConfig()
        self._cache = config
        return config

    def _load_from_file(self) -> MatcherConfig | None:
        if not self._path:
            return None
        path = Path(self._path)
        if not path.exists():
            logger.warning(f"Matcher config {path} not found, using defaults")
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            config = MatcherConfig(**raw)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Failed loading matcher config from {path}: {e}")
            return None
        logger.info(f"Loaded matcher config from {path} ({len(config.categories)} categories)")
        return config

    def update_config(self, config_dict: dict[str, Any]) -> MatcherConfig:
        """Admin: validate, persist (when a path is configured) and activate a new table."""
        config = MatcherConfig(**config_dict)
        if self._path:
            Path(self._path).write_text(config.model_dump_json(indent=2), encoding="utf-8")
            logger.info(f"Saved matcher config to {self._path}")
        self._cache = config
        return config

    def reload(self) -> MatcherConfig:
        self._cache = None
        return self.get_config()
