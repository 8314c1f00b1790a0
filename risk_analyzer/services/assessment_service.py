"""
ASSESSMENT SERVICE

End-to-end assessment flow: score → enrich narrative → sync contact.

Each stage receives the AssessmentSession built by the previous one.
Scoring errors propagate; collaborator errors are recorded on the
session and never fail the assessment.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from risk_analyzer.domain.models import (
    AssessmentResult,
    ContactDetails,
    ContactSyncError,
    NarrativeReport,
    NarrativeServiceError,
)
from risk_analyzer.domain.services.risk_scoring_engine import RiskScoringEngine
from risk_analyzer.domain.strategy.questionnaire import investable_assets_label
from risk_analyzer.services.contact_sync_service import ContactSyncService
from risk_analyzer.services.narrative_service import NarrativeService

logger = logging.getLogger(__name__)


@dataclass
class AssessmentSession:
    """Request-scoped state handed from stage to stage"""
    answers: Mapping[str, Any]
    contact: Optional[ContactDetails] = None
    result: Optional[AssessmentResult] = None
    report: Optional[NarrativeReport] = None
    report_source: Optional[str] = None
    contact_sync: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        if self.result is None:
            raise RuntimeError("Assessment has not been scored")
        return {
            **self.result.to_dict(),
            "report": self.report.to_dict() if self.report else None,
            "reportSource": self.report_source,
            "contactSync": self.contact_sync,
        }


class AssessmentService:
    def __init__(
        self,
        engine: Optional[RiskScoringEngine] = None,
        narrative_service: Optional[NarrativeService] = None,
        contact_sync_service: Optional[ContactSyncService] = None,
    ):
        self.engine = engine or RiskScoringEngine()
        self.narrative_service = narrative_service or NarrativeService()
        self.contact_sync_service = contact_sync_service or ContactSyncService()

    @staticmethod
    def start_session(submission: Mapping[str, Any]) -> AssessmentSession:
        """
        Split a submission into answers and optional contact details.

        The investable-assets label is derived from the `assets` answer.
        """
        email = submission.get("email")
        contact = None
        if isinstance(email, str) and email.strip():
            contact = ContactDetails(
                email=email.strip(),
                first_name=submission.get("firstName"),
                last_name=submission.get("lastName"),
                investable_assets=investable_assets_label(submission.get("assets")),
            )
        return AssessmentSession(answers=submission, contact=contact)

    def score(self, session: AssessmentSession) -> AssessmentSession:
        session.result = self.engine.score(session.answers)
        return session

    async def enrich(self, session: AssessmentSession) -> AssessmentSession:
        """Attach the AI report, or fall back to the executive summary"""
        result = session.result
        if result is None:
            raise RuntimeError("Cannot enrich an unscored assessment")

        payload = result.to_dict()
        try:
            session.report = await self.narrative_service.generate(
                scores=payload["scores"],
                diagnostics=payload["diagnostics"],
                profile=payload["profile"],
            )
            session.report_source = "ai"
        except NarrativeServiceError as exc:
            logger.warning(f"Narrative enrichment unavailable, using local summary: {exc}")
            session.report = NarrativeReport(summary=result.narrative.executive_summary)
            session.report_source = "fallback"
        return session

    async def sync_contact(self, session: AssessmentSession) -> AssessmentSession:
        """Fire-and-forget CRM upsert; outcome recorded, never raised"""
        contact = session.contact
        if contact is None or not contact.has_plausible_email:
            logger.info("Contact sync skipped: no email on submission")
            session.contact_sync = {"success": False, "skipped": True, "error": "Email required"}
            return session

        try:
            outcome = await self.contact_sync_service.sync_contact(contact)
            session.contact_sync = outcome.to_dict()
        except ContactSyncError as exc:
            logger.warning(f"Contact sync failed: {exc}")
            session.contact_sync = {"success": False, "error": str(exc)}
        return session

    async def complete(self, submission: Mapping[str, Any]) -> AssessmentSession:
        """
        Run the whole flow.

        Contact sync only starts after the narrative call has resolved.

        Raises:
            AssessmentValidationError: An answer is missing or non-numeric
        """
        session = self.start_session(submission)
        session = self.score(session)
        session = await self.enrich(session)
        session = await self.sync_contact(session)
        return session
