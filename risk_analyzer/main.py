"""
FastAPI Main Application
Risk assessment scoring with narrative enrichment and CRM sync
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from risk_analyzer.config import settings
from risk_analyzer.core.logging import setup_logging
from risk_analyzer.api.routes import analyze_risk, assessment, contact_sync, health, report

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Reports collaborator configuration; nothing to open or close
    """
    logger.info("=" * 60)
    logger.info("🚀 Starting Risk Analyzer")
    logger.info("=" * 60)
    logger.info(f"   ✅ API Server: http://{settings.API_HOST}:{settings.API_PORT}")
    logger.info(f"   ✅ API Docs: http://{settings.API_HOST}:{settings.API_PORT}/docs")
    logger.info(f"   {'✅' if settings.narrative_configured else '⏸️ '} Narrative enrichment: "
                f"{'Enabled' if settings.narrative_configured else 'Disabled (local summary only)'}")
    logger.info(f"   {'✅' if settings.contact_sync_configured else '⏸️ '} Contact sync: "
                f"{'Enabled' if settings.contact_sync_configured else 'Disabled'}")
    logger.info("=" * 60)

    yield

    logger.info("👋 Risk Analyzer shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Risk Analyzer",
    description="Capacity-constrained investor risk profiling",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Risk Analyzer",
        "version": "1.0.0",
        "endpoints": {
            "score": "/api/analyze-risk",
            "report": "/api/generate-report",
            "contact_sync": "/api/hubspot-sync",
            "assessment": "/api/v1/assessment/complete",
        },
        "docs": "/docs",
    }


app.include_router(health.router, tags=["Health"])
app.include_router(analyze_risk.router, prefix="/api", tags=["Scoring"])
app.include_router(report.router, prefix="/api", tags=["Narrative"])
app.include_router(contact_sync.router, prefix="/api", tags=["Contact Sync"])
app.include_router(assessment.router, prefix="/api/v1/assessment", tags=["Assessment"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("risk_analyzer.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
