from typing import AsyncGenerator, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from risk_analyzer.api.dependencies import (
    get_assessment_service,
    get_contact_sync_service,
    get_narrative_service,
    get_scoring_engine,
)
from risk_analyzer.api.routes import analyze_risk, assessment, contact_sync, health, report
from risk_analyzer.config import Settings
from risk_analyzer.domain.models import (
    ContactDetails,
    ContactSyncError,
    ContactSyncResult,
    NarrativeReport,
    NarrativeServiceError,
)
from risk_analyzer.domain.services.risk_scoring_engine import RiskScoringEngine
from risk_analyzer.services.assessment_service import AssessmentService


# Moderate answers: every field mid-scale
BASE_ANSWERS = {
    "timeHorizon": 3,
    "assets": 3,
    "incomeStability": 3,
    "liquidityBuffer": 3,
    "dependents": 3,
    "lossReaction": 3,
    "volatilityPreference": 3,
    "regretSensitivity": 1,
    "drawdownThreshold": 3,
    "ambiguityTolerance": 3,
    "downturnBehavior": 3,
    "selfAssessment": 3,
    "reverseLossGrowth": 2,
    "marketExperience": 3,
    "newsSensitivity": 3,
    "decisionStyle": 2,
}

AI_REPORT = {
    "summary": "You lean toward growth while your finances ask for patience.",
    "alignmentAnalysis": "Your stated comfort outpaces your cushion.",
    "riskDynamics": "Stress is likely to arrive through liquidity, not volatility.",
    "capacityPerspective": "Short horizons narrow the room for recovery.",
    "behavioralInsight": "You act decisively under uncertainty.",
}


def make_answers(**overrides):
    answers = dict(BASE_ANSWERS)
    answers.update(overrides)
    return answers


@pytest.fixture
def answers():
    return make_answers()


@pytest.fixture
def engine():
    return RiskScoringEngine()


@pytest.fixture
def test_settings():
    return Settings(
        MISTRAL_API_KEY="test-mistral-key",
        MISTRAL_BASE_URL="https://llm.test",
        HUBSPOT_ACCESS_TOKEN="test-hubspot-token",
        HUBSPOT_BASE_URL="https://crm.test",
        NARRATIVE_ENABLED=True,
        HUBSPOT_ENABLED=True,
    )


class FakeNarrativeService:
    """Records calls; returns AI_REPORT or raises the configured error"""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls = []

    async def generate(self, scores, diagnostics, profile):
        self.calls.append({"scores": scores, "diagnostics": diagnostics, "profile": profile})
        if self.error:
            raise self.error
        return NarrativeReport(
            summary=AI_REPORT["summary"],
            alignment_analysis=AI_REPORT["alignmentAnalysis"],
            risk_dynamics=AI_REPORT["riskDynamics"],
            capacity_perspective=AI_REPORT["capacityPerspective"],
            behavioral_insight=AI_REPORT["behavioralInsight"],
        )


class FakeContactSyncService:
    """Records contacts; returns the configured mode or raises"""

    def __init__(self, mode: str = "created", error: Optional[Exception] = None):
        self.mode = mode
        self.error = error
        self.contacts: list[ContactDetails] = []

    async def sync_contact(self, contact, taken_on=None):
        if not contact.has_plausible_email:
            raise ValueError("Email required")
        self.contacts.append(contact)
        if self.error:
            raise self.error
        return ContactSyncResult(mode=self.mode)


@pytest.fixture
def fake_narrative():
    return FakeNarrativeService()


@pytest.fixture
def failing_narrative():
    return FakeNarrativeService(error=NarrativeServiceError("AI returned invalid JSON", raw="not json"))


@pytest.fixture
def fake_contact_sync():
    return FakeContactSyncService()


@pytest.fixture
def failing_contact_sync():
    return FakeContactSyncService(error=ContactSyncError("HubSpot sync failed", status_code=502))


@pytest.fixture()
def app(engine, fake_narrative, fake_contact_sync) -> FastAPI:
    app = FastAPI()
    app.include_router(health.router, tags=["Health"])
    app.include_router(analyze_risk.router, prefix="/api", tags=["Scoring"])
    app.include_router(report.router, prefix="/api", tags=["Narrative"])
    app.include_router(contact_sync.router, prefix="/api", tags=["Contact Sync"])
    app.include_router(assessment.router, prefix="/api/v1/assessment", tags=["Assessment"])

    app.dependency_overrides[get_scoring_engine] = lambda: engine
    app.dependency_overrides[get_narrative_service] = lambda: fake_narrative
    app.dependency_overrides[get_contact_sync_service] = lambda: fake_contact_sync
    app.dependency_overrides[get_assessment_service] = lambda: AssessmentService(
        engine=engine,
        narrative_service=fake_narrative,
        contact_sync_service=fake_contact_sync,
    )
    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
