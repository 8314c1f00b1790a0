"""
Risk Scoring API Route
POST raw answers, receive scores / diagnostics / profile / narrative seed
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from risk_analyzer.api.dependencies import get_scoring_engine
from risk_analyzer.domain.models import AssessmentValidationError
from risk_analyzer.domain.services.risk_scoring_engine import RiskScoringEngine

router = APIRouter()
logger = logging.getLogger(__name__)


async def read_json_body(request: Request):
    """Parse the request body; malformed JSON is treated as an empty object"""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Request body is not valid JSON")
        return {}


@router.post(
    "/analyze-risk",
    summary="Score a risk assessment",
    description="Validate sixteen answers and compute the capacity-constrained risk profile",
)
async def analyze_risk(
    request: Request,
    engine: RiskScoringEngine = Depends(get_scoring_engine),
):
    data = await read_json_body(request)

    try:
        result = engine.score(data)
    except AssessmentValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception:
        logger.exception("Internal error while scoring assessment")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "The assessment could not be scored.",
            },
        )

    return result.to_dict()
