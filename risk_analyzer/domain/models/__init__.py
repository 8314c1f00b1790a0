"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    AlignmentSeverity,
    CalibrationRisk,
    RiskCategory,
    SequenceRiskExposure,
    SustainabilitySeverity,
    TensionLevel,

    # Entities
    Archetype,
    AssessmentInput,
    AssessmentResult,
    ContactDetails,
    ContactSyncResult,
    Diagnostics,
    Narrative,
    NarrativeReport,
    RiskProfile,
    Scores,
)
from .errors import (
    AssessmentValidationError,
    ContactSyncError,
    DependencyError,
    NarrativeServiceError,
)

__all__ = [
    # Enums
    "AlignmentSeverity",
    "CalibrationRisk",
    "RiskCategory",
    "SequenceRiskExposure",
    "SustainabilitySeverity",
    "TensionLevel",

    # Entities
    "Archetype",
    "AssessmentInput",
    "AssessmentResult",
    "ContactDetails",
    "ContactSyncResult",
    "Diagnostics",
    "Narrative",
    "NarrativeReport",
    "RiskProfile",
    "Scores",

    # Errors
    "AssessmentValidationError",
    "ContactSyncError",
    "DependencyError",
    "NarrativeServiceError",
]
