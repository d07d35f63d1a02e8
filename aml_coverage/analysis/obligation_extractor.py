"""
Obligation Extractor — splits a requirement's free text into discrete obligations.

Strategies run in priority order and are mutually exclusive: a later strategy
only runs while nothing has been extracted yet.  Because the must-clause pass
runs before the threshold pass, a text containing any "must ... ." sentence
never yields threshold obligations.
"""

from __future__ import annotations

import logging
import re

from aml_coverage.models.enums import ObligationPriority, ObligationType
from aml_coverage.models.schemas import Obligation

logger = logging.getLogger(__name__)

MAX_OBLIGATIONS = 8
MIN_NUMBERED_LENGTH = 10
GENERAL_MIN_TEXT_LENGTH = 200
GENERAL_MIN_SENTENCE_LENGTH = 20
GENERAL_MIN_SENTENCES = 2
GENERAL_OBLIGATION_TEXT = "Multiple monitoring requirements identified in clause text"

# "(1) text..." up to the next "(n)" marker or the end of the string
_NUMBERED_RE = re.compile(r"\(\d+\)\s+([^(]+?)(?=\s*\(\d+\)|\Z)")
_MARKER_RE = re.compile(r"\(\d+\)")
_TRAILING_JOINER_RE = re.compile(r"[,.]?\s*(?:and\s*)?$")
_MUST_RE = re.compile(r"must\s+[^.]+[.]", re.IGNORECASE)
_THRESHOLD_RE = re.compile(r"\$[\d,]+[^.]*[.]")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def extract_obligations(text: str | None, max_obligations: int = MAX_OBLIGATIONS) -> list[Obligation]:
    """Return at most ``max_obligations`` obligations found in ``text``."""
    text = text or ""
    obligations: list[Obligation] = []

    def _add(obligation_type: ObligationType, body: str, priority: ObligationPriority,
             indicator: str, marker: str | None = None) -> None:
        obligations.append(
            Obligation(
                id=f"obligation-{len(obligations) + 1}",
                type=obligation_type,
                text=body,
                source_marker=marker,
                indicators=[indicator],
                priority=priority,
            )
        )

    # ── 1. Numbered list items ───────────────────────────
    for match in _NUMBERED_RE.finditer(text):
        body = _TRAILING_JOINER_RE.sub("", match.group(1).strip(), count=1)
        if len(body) > MIN_NUMBERED_LENGTH:
            marker = _MARKER_RE.search(match.group(0)).group(0)
            _add(ObligationType.NUMBERED, body, ObligationPriority.HIGH, "numbered_list", marker)

    # ── 2. "must ..." sentences ──────────────────────────
    if not obligations:
        for sentence in _MUST_RE.findall(text):
            _add(ObligationType.MUST_CLAUSE, sentence.strip(), ObligationPriority.MEDIUM, "must_requirement")

    # ── 3. Dollar thresholds ─────────────────────────────
    if not obligations:
        for sentence in _THRESHOLD_RE.findall(text):
            _add(ObligationType.THRESHOLD, sentence.strip(), ObligationPriority.HIGH, "threshold_requirement")

    # ── 4. Long unstructured text ────────────────────────
    if not obligations and len(text) > GENERAL_MIN_TEXT_LENGTH:
        sentences = [
            s for s in _SENTENCE_SPLIT_RE.split(text)
            if len(s.strip()) > GENERAL_MIN_SENTENCE_LENGTH
        ]
        if len(sentences) > GENERAL_MIN_SENTENCES:
            _add(ObligationType.GENERAL, GENERAL_OBLIGATION_TEXT, ObligationPriority.MEDIUM, "complex_text")

    if len(obligations) > max_obligations:
        logger.debug(f"Truncating {len(obligations)} obligations to {max_obligations}")
    return obligations[:max_obligations]
