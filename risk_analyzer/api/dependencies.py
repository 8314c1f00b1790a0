"""
Route dependencies.
Overridable through `app.dependency_overrides` in tests.
"""

from functools import lru_cache

from risk_analyzer.domain.services.risk_scoring_engine import RiskScoringEngine
from risk_analyzer.services.assessment_service import AssessmentService
from risk_analyzer.services.contact_sync_service import ContactSyncService
from risk_analyzer.services.narrative_service import NarrativeService


@lru_cache
def get_scoring_engine() -> RiskScoringEngine:
    return RiskScoringEngine()


def get_narrative_service() -> NarrativeService:
    return NarrativeService()


def get_contact_sync_service() -> ContactSyncService:
    return ContactSyncService()


def get_assessment_service() -> AssessmentService:
    return AssessmentService(
        engine=get_scoring_engine(),
        narrative_service=get_narrative_service(),
        contact_sync_service=get_contact_sync_service(),
    )
