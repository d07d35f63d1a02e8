from .logger import setup_logging
from .hashing import sha256_hash, content_signature

__all__ = ["setup_logging", "sha256_hash", "content_signature"]
