"""
Narrative Report API Route
Forward scoring output to the narrative model
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from risk_analyzer.api.dependencies import get_narrative_service
from risk_analyzer.api.routes.analyze_risk import read_json_body
from risk_analyzer.domain.models import NarrativeServiceError
from risk_analyzer.services.narrative_service import NarrativeService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/generate-report",
    summary="Generate AI narrative",
    description="Five-section narrative from {scores, diagnostics, profile}",
)
async def generate_report(
    request: Request,
    narrative_service: NarrativeService = Depends(get_narrative_service),
):
    body = await read_json_body(request)
    if not isinstance(body, dict):
        body = {}

    scores = body.get("scores")
    diagnostics = body.get("diagnostics")
    profile = body.get("profile")

    if not scores or not diagnostics or not isinstance(profile, dict) or not profile:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing structured diagnostics payload"},
        )

    try:
        report = await narrative_service.generate(
            scores=scores,
            diagnostics=diagnostics,
            profile=profile,
        )
    except NarrativeServiceError as e:
        content = {"error": str(e)}
        if e.raw is not None:
            content["raw"] = e.raw
        return JSONResponse(status_code=500, content=content)

    return report.to_dict()
