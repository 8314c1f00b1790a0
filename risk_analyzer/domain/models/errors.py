"""
Domain Errors

ValidationError   -> AssessmentValidationError (client-facing 400)
DependencyError   -> NarrativeServiceError / ContactSyncError (best-effort collaborators)
"""

from typing import Any, Optional


class AssessmentValidationError(ValueError):
    """A required answer is absent or not a finite number"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing field: {field}")


class DependencyError(RuntimeError):
    """An external collaborator failed, timed out, or returned bad data"""


class NarrativeServiceError(DependencyError):
    """Narrative enrichment could not produce a usable report"""

    def __init__(self, message: str, raw: Optional[str] = None):
        self.raw = raw
        super().__init__(message)


class ContactSyncError(DependencyError):
    """CRM upsert failed"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        self.status_code = status_code
        self.details = details
        super().__init__(message)
