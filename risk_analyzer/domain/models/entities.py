"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies

Every result object is created once per assessment and never mutated.
`to_dict()` methods produce the camelCase wire shape served by the API.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RiskCategory(str, Enum):
    """Capacity-constrained risk recommendation, ordered low to high"""
    CAPITAL_PRESERVATION = "Capital Preservation"
    CONSERVATIVE = "Conservative"
    BALANCED = "Balanced"
    GROWTH = "Growth"
    AGGRESSIVE_GROWTH = "Aggressive Growth"


class SustainabilitySeverity(str, Enum):
    """Severity derived from the fragility flag count"""
    STABLE = "Stable"
    MODERATE_CONSTRAINT = "Moderate Constraint"
    HIGH_CONSTRAINT = "High Constraint"


class TensionLevel(str, Enum):
    """Direction of the behavioral vs capacity gap"""
    ALIGNED = "Aligned"
    OVERREACHING = "Overreaching"
    UNDERUTILIZING = "Underutilizing"


class AlignmentSeverity(str, Enum):
    """Magnitude of the behavioral vs capacity gap"""
    ALIGNED = "Aligned"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class CalibrationRisk(str, Enum):
    """Self-perception accuracy label"""
    OVERCONFIDENCE_BIAS = "Overconfidence Bias"
    LOW_SELF_AWARENESS = "Low Self-Awareness"
    CALIBRATED = "Calibrated"


class SequenceRiskExposure(str, Enum):
    """Exposure to early-withdrawal losses"""
    HIGH = "High"
    ELEVATED = "Elevated"
    MODERATE = "Moderate"


@dataclass(frozen=True)
class AssessmentInput:
    """Sixteen coerced survey answers - Immutable"""
    # Capacity
    time_horizon: float
    assets: float
    income_stability: float
    liquidity_buffer: float
    dependents: float
    # Behavioral
    loss_reaction: float
    volatility_preference: float
    regret_sensitivity: float
    drawdown_threshold: float
    ambiguity_tolerance: float
    downturn_behavior: float
    # Calibration
    self_assessment: float
    reverse_loss_growth: float
    market_experience: float
    news_sensitivity: float
    decision_style: float


@dataclass(frozen=True)
class Archetype:
    """Behavioral persona record"""
    name: str
    description: str
    strengths: tuple[str, ...]
    watchouts: tuple[str, ...]
    color: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "strengths": list(self.strengths),
            "watchouts": list(self.watchouts),
            "color": self.color,
        }


@dataclass(frozen=True)
class Scores:
    """Normalized indices and the capped recommendation score"""
    capacity_score: float
    behavioral_score: float
    calibration_score: float
    weighted_score: float
    alignment_gap: float

    def to_dict(self) -> dict:
        return {
            "capacityScore": self.capacity_score,
            "behavioralScore": self.behavioral_score,
            "calibrationScore": self.calibration_score,
            "weightedScore": self.weighted_score,
            "alignmentGap": self.alignment_gap,
        }


@dataclass(frozen=True)
class Diagnostics:
    """Tension and sustainability diagnostics"""
    risk_tension: float
    tension_level: TensionLevel
    sustainability_severity: SustainabilitySeverity
    fragility_score: int

    def to_dict(self) -> dict:
        return {
            "riskTension": self.risk_tension,
            "tensionLevel": self.tension_level.value,
            "sustainabilitySeverity": self.sustainability_severity.value,
            "fragilityScore": self.fragility_score,
        }


@dataclass(frozen=True)
class RiskProfile:
    """Classification and narrative-facing diagnostics"""
    risk_category: RiskCategory
    archetype: Archetype
    alignment_severity: AlignmentSeverity
    sequence_risk_exposure: SequenceRiskExposure
    calibration_risk: CalibrationRisk
    structural_capacity: float
    risk_perception_gap: float

    def to_dict(self) -> dict:
        return {
            "riskCategory": self.risk_category.value,
            "archetype": self.archetype.to_dict(),
            "alignmentSeverity": self.alignment_severity.value,
            "sequenceRiskExposure": self.sequence_risk_exposure.value,
            "calibrationRisk": self.calibration_risk.value,
            "structuralCapacity": self.structural_capacity,
            "riskPerceptionGap": self.risk_perception_gap,
        }


@dataclass(frozen=True)
class Narrative:
    """Deterministic narrative seed"""
    executive_summary: str
    structural_capacity_explanation: str
    sequence_risk_explanation: str
    allocation_guidance: str
    advisory_note: str

    def to_dict(self) -> dict:
        return {
            "executiveSummary": self.executive_summary,
            "structuralCapacityExplanation": self.structural_capacity_explanation,
            "sequenceRiskExplanation": self.sequence_risk_explanation,
            "allocationGuidance": self.allocation_guidance,
            "advisoryNote": self.advisory_note,
        }


@dataclass(frozen=True)
class AssessmentResult:
    """Complete scoring output - Immutable"""
    scores: Scores
    diagnostics: Diagnostics
    profile: RiskProfile
    narrative: Narrative
    composite_index: float
    structural_ceiling: float

    @property
    def ceiling_applied(self) -> bool:
        """True when the structural ceiling, not the composite, set the score"""
        return self.structural_ceiling < self.composite_index

    def to_dict(self) -> dict:
        return {
            "scores": self.scores.to_dict(),
            "diagnostics": self.diagnostics.to_dict(),
            "profile": self.profile.to_dict(),
            "narrative": self.narrative.to_dict(),
        }


@dataclass(frozen=True)
class NarrativeReport:
    """
    Enriched narrative.

    Only `summary` is guaranteed; the other sections are absent when the
    report is the local fallback.
    """
    summary: str
    alignment_analysis: Optional[str] = None
    risk_dynamics: Optional[str] = None
    capacity_perspective: Optional[str] = None
    behavioral_insight: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "summary": self.summary,
            "alignmentAnalysis": self.alignment_analysis,
            "riskDynamics": self.risk_dynamics,
            "capacityPerspective": self.capacity_perspective,
            "behavioralInsight": self.behavioral_insight,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class ContactDetails:
    """Contact fields forwarded to the CRM"""
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    investable_assets: Optional[str] = None

    @property
    def has_plausible_email(self) -> bool:
        return bool(self.email) and "@" in self.email


@dataclass(frozen=True)
class ContactSyncResult:
    """Outcome of a CRM upsert"""
    mode: str
    contact_id: Optional[str] = None

    def __post_init__(self):
        if self.mode not in ("created", "updated"):
            raise ValueError(f"Unknown contact sync mode: {self.mode}")

    def to_dict(self) -> dict:
        return {"success": True, "mode": self.mode}
