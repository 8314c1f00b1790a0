from fastapi import APIRouter

from risk_analyzer.config import settings

router = APIRouter()


@router.get("/health")
def health():
    return {
        "status": "healthy",
        "service": "Risk Analyzer",
        "version": "1.0.0",
        "services": {
            "api": "running",
            "narrative": "configured" if settings.narrative_configured else "disabled",
            "contact_sync": "configured" if settings.contact_sync_configured else "disabled",
        },
    }
