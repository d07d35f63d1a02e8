"""
FastAPI application factory and API package.

Run with:
    uvicorn aml_coverage.api:app --reload --port 8000

Or via main.py:
    python -m aml_coverage.main --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aml_coverage.config import get_settings
from aml_coverage.api.routes import (
    analysis_router,
    config_router,
    evidence_router,
    health_router,
    requirements_router,
    rules_router,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory — create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="AML Rule Coverage Analysis API",
        description="Regulatory requirement ↔ monitoring rule coverage analysis",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
    )

    # CORS — allow the dashboard (adjust origins in production)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router, tags=["Health"])
    application.include_router(requirements_router, prefix="/api/requirements", tags=["Requirements"])
    application.include_router(rules_router, prefix="/api/rules", tags=["Rules"])
    application.include_router(evidence_router, prefix="/api/evidence", tags=["Evidence"])
    application.include_router(analysis_router, prefix="/api/analysis", tags=["Analysis"])
    application.include_router(config_router, prefix="/api/config", tags=["Config"])

    logger.info(f"Created {settings.app_name} API")
    return application


# Module-level instance for `uvicorn aml_coverage.api:app`
app = create_app()
