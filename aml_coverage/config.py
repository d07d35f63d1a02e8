"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "AML Rule Coverage Analysis"
    debug: bool = False

    # ── Data ─────────────────────────────────────────────
    dataset_path: str = str(_PACKAGE_DIR / "data" / "sample_dataset.json")

    # ── Analysis ─────────────────────────────────────────
    matcher_config_path: str = ""  # empty = built-in keyword table
    max_obligations: int = 8
    analysis_cache_enabled: bool = True
    analysis_cache_size: int = 256

    # ── API ──────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "AML_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
