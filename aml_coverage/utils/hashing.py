"""
Hashing utilities for content signatures used by the analysis cache.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def sha256_hash(content: str | bytes) -> str:
    """Return the SHA-256 hex digest of the given content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def content_signature(payload: Any) -> str:
    """Stable SHA-256 over a JSON-serializable payload (keys sorted)."""
    return sha256_hash(json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str))
