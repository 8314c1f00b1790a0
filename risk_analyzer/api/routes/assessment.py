"""
Assessment Flow API Routes

- GET  /questions → questionnaire catalog
- POST /complete  → score, enrich, sync in one call
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from risk_analyzer.api.dependencies import get_assessment_service
from risk_analyzer.api.routes.analyze_risk import read_json_body
from risk_analyzer.domain.models import AssessmentValidationError
from risk_analyzer.domain.strategy.questionnaire import QUESTIONS, SECTIONS, questions_for_section
from risk_analyzer.services.assessment_service import AssessmentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/questions", summary="Questionnaire catalog")
async def list_questions(section: Optional[str] = None):
    if section is None:
        questions = QUESTIONS
    else:
        try:
            questions = questions_for_section(section)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown section. Use one of: {', '.join(SECTIONS)}",
            )
    return {
        "sections": list(SECTIONS),
        "questions": [q.to_dict() for q in questions],
    }


@router.post(
    "/complete",
    summary="Complete an assessment",
    description="Score answers, request the AI narrative, then sync the contact",
)
async def complete_assessment(
    request: Request,
    service: AssessmentService = Depends(get_assessment_service),
):
    body = await read_json_body(request)
    if not isinstance(body, dict):
        body = {}

    try:
        session = await service.complete(body)
    except AssessmentValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception:
        logger.exception("Internal error while completing assessment")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "The assessment could not be completed.",
            },
        )

    return session.to_dict()
