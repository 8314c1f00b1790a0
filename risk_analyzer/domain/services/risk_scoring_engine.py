"""
RISK SCORING ENGINE
Turn sixteen questionnaire answers into a capacity-constrained risk profile

RESPONSIBILITIES:
- Coerce and validate answers (first missing field wins)
- Compute capacity / behavioral / calibration indices
- Apply the structural ceiling
- Classify risk category and archetype
- Derive narrative diagnostics and the narrative seed

RULES:
❌ No I/O, no network, no persistence
❌ No defaulting of missing answers
✅ Pure calculation
✅ Deterministic output
"""

import logging
import math
from numbers import Number
from typing import Any, Mapping

from risk_analyzer.domain.models import (
    AlignmentSeverity,
    Archetype,
    AssessmentInput,
    AssessmentResult,
    AssessmentValidationError,
    CalibrationRisk,
    Diagnostics,
    Narrative,
    RiskCategory,
    RiskProfile,
    Scores,
    SequenceRiskExposure,
    SustainabilitySeverity,
    TensionLevel,
)
from risk_analyzer.domain.strategy.archetypes import archetype_for, risk_category_for
from risk_analyzer.domain.strategy.questionnaire import (
    ANSWER_RANGES,
    FIELD_ATTRIBUTES,
    REQUIRED_FIELDS,
    REVERSE_PIVOT,
)

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Scoring constants
# -------------------------------------------------------------------

BEHAVIORAL_WEIGHT = 0.4
CAPACITY_WEIGHT = 0.5
CALIBRATION_WEIGHT = 0.1

# Raw answers at or below this value raise a fragility flag
FRAGILITY_THRESHOLD = 2

# Tiered ceiling by capacityIndex, evaluated in order; every matching
# tier reassigns the ceiling.
CAPACITY_CEILING_TIERS = (
    (50.0, 65.0),
    (40.0, 55.0),
    (30.0, 45.0),
)
UNCAPPED_CEILING = 100.0
SHORT_HORIZON_CEILING = 50.0       # raw timeHorizon <= 2
VERY_SHORT_HORIZON_CEILING = 40.0  # raw timeHorizon <= 1
HIGH_FRAGILITY_CEILING = 45.0      # fragilityScore >= 2

ALIGNED_GAP = 10.0
SEVERE_GAP = 25.0
OVERCONFIDENCE_CALIBRATION = 75.0
LOW_AWARENESS_CALIBRATION = 40.0

# Behavioral score must exceed the recommendation by this much before the
# summary explains the ceiling
CEILING_NARRATIVE_MARGIN = 15.0

STRUCTURAL_CAPACITY_EXPLANATION = (
    "Financial Risk Capacity reflects how much risk someone can financially "
    "survive — regardless of how they feel."
)
SEQUENCE_RISK_EXPLANATION = (
    "Sequence Risk refers to the danger of experiencing market losses early "
    "in retirement while withdrawals are occurring."
)
ADVISORY_NOTE = (
    "This assessment is educational and should be integrated with "
    "personalized planning."
)


def safe_num(value: Any) -> float:
    """
    Coerce an answer to a float.

    Accepts real numbers and numeric strings. Anything else (None, bools,
    blank strings, NaN, infinities) yields NaN so the caller can reject it.
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, Number):
        try:
            parsed = float(value)
        except (TypeError, ValueError, OverflowError):
            return math.nan
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return math.nan
        try:
            parsed = float(text)
        except ValueError:
            return math.nan
    else:
        return math.nan
    return parsed if math.isfinite(parsed) else math.nan


def normalize(value: float, minimum: float, maximum: float) -> float:
    """
    Rescale value from [minimum, maximum] onto [0, 100].

    Out-of-range values are clamped. Non-finite values and degenerate
    ranges (maximum <= minimum) return 0 rather than raising.
    """
    if not math.isfinite(value):
        return 0.0
    if not (math.isfinite(minimum) and math.isfinite(maximum)) or maximum <= minimum:
        return 0.0
    clamped = min(max(value, minimum), maximum)
    return ((clamped - minimum) / (maximum - minimum)) * 100.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RiskScoringEngine:
    """
    Risk Scoring Engine
    Stateless; one instance can serve every request
    """

    def score(self, answers: Mapping[str, Any]) -> AssessmentResult:
        """
        Validate raw answers and compute the full assessment.

        Args:
            answers: Wire-format answers keyed by camelCase field name

        Returns:
            AssessmentResult

        Raises:
            AssessmentValidationError: First required field that is absent
                or not a finite number, in REQUIRED_FIELDS order
        """
        assessment = self.parse_answers(answers)
        return self.evaluate(assessment)

    @staticmethod
    def parse_answers(answers: Mapping[str, Any]) -> AssessmentInput:
        """Coerce answers to an AssessmentInput, rejecting on first bad field"""
        if not isinstance(answers, Mapping):
            raise AssessmentValidationError(REQUIRED_FIELDS[0])

        values: dict[str, float] = {}
        for field in REQUIRED_FIELDS:
            parsed = safe_num(answers.get(field))
            if math.isnan(parsed):
                logger.error(f"❌ Assessment validation failed: field [{field}] is missing")
                raise AssessmentValidationError(field)
            values[FIELD_ATTRIBUTES[field]] = parsed

        return AssessmentInput(**values)

    def evaluate(self, assessment: AssessmentInput) -> AssessmentResult:
        """
        Run the scoring pipeline on already-validated answers.

        Args:
            assessment: Coerced answers

        Returns:
            AssessmentResult
        """
        capacity_index = self._calculate_capacity_index(assessment)
        behavioral_index = self._calculate_behavioral_index(assessment)
        calibration_index = self._calculate_calibration_index(assessment)

        # Archetype mirrors emotional identity; capacity never feeds it
        archetype = archetype_for(behavioral_index)

        fragility_score = self._calculate_fragility_score(assessment)
        sustainability_severity = self._determine_sustainability_severity(fragility_score)

        composite_index = self._calculate_composite_index(
            behavioral_index=behavioral_index,
            capacity_index=capacity_index,
            calibration_index=calibration_index,
        )
        structural_ceiling = self._calculate_structural_ceiling(
            capacity_index=capacity_index,
            time_horizon=assessment.time_horizon,
            fragility_score=fragility_score,
        )
        final_weighted_score = min(composite_index, structural_ceiling)
        risk_category = risk_category_for(final_weighted_score)

        risk_tension = behavioral_index - capacity_index
        tension_level = self._determine_tension_level(risk_tension)

        narrative = self._compose_narrative(
            archetype=archetype,
            behavioral_index=behavioral_index,
            capacity_index=capacity_index,
            final_weighted_score=final_weighted_score,
            risk_category=risk_category,
        )

        logger.info(
            f"Assessment scored: category={risk_category.value} "
            f"archetype={archetype.name} weighted={final_weighted_score:.1f} "
            f"ceiling={structural_ceiling:.0f}"
        )

        return AssessmentResult(
            scores=Scores(
                capacity_score=capacity_index,
                behavioral_score=behavioral_index,
                calibration_score=calibration_index,
                weighted_score=final_weighted_score,
                alignment_gap=abs(risk_tension),
            ),
            diagnostics=Diagnostics(
                risk_tension=risk_tension,
                tension_level=tension_level,
                sustainability_severity=sustainability_severity,
                fragility_score=fragility_score,
            ),
            profile=RiskProfile(
                risk_category=risk_category,
                archetype=archetype,
                alignment_severity=self._determine_alignment_severity(risk_tension),
                sequence_risk_exposure=self._determine_sequence_risk_exposure(
                    sustainability_severity, tension_level
                ),
                calibration_risk=self._determine_calibration_risk(calibration_index),
                structural_capacity=capacity_index,
                risk_perception_gap=risk_tension,
            ),
            narrative=narrative,
            composite_index=composite_index,
            structural_ceiling=structural_ceiling,
        )

    # -------------------------------------------------------------------
    # Indices
    # -------------------------------------------------------------------

    @staticmethod
    def _normalized(field: str, value: float) -> float:
        minimum, maximum = ANSWER_RANGES[field]
        return normalize(value, minimum, maximum)

    @classmethod
    def _calculate_capacity_index(cls, a: AssessmentInput) -> float:
        """Mean of the five objective capacity answers"""
        return (
            cls._normalized("timeHorizon", a.time_horizon)
            + cls._normalized("assets", a.assets)
            + cls._normalized("incomeStability", a.income_stability)
            + cls._normalized("liquidityBuffer", a.liquidity_buffer)
            + cls._normalized("dependents", a.dependents)
        ) / 5

    @classmethod
    def _calculate_behavioral_index(cls, a: AssessmentInput) -> float:
        """Mean of the six emotional tolerance answers"""
        return (
            cls._normalized("lossReaction", a.loss_reaction)
            + cls._normalized("volatilityPreference", a.volatility_preference)
            + cls._normalized("regretSensitivity", a.regret_sensitivity)
            + cls._normalized("drawdownThreshold", a.drawdown_threshold)
            + cls._normalized("ambiguityTolerance", a.ambiguity_tolerance)
            + cls._normalized("downturnBehavior", a.downturn_behavior)
        ) / 6

    @classmethod
    def _calculate_calibration_index(cls, a: AssessmentInput) -> float:
        """
        Mean of the five self-awareness answers.

        reverseLossGrowth is mirrored first; a raw 1 becomes 5 and clamps
        to the top of its scale.
        """
        reverse_loss_growth = REVERSE_PIVOT - a.reverse_loss_growth
        return (
            cls._normalized("selfAssessment", a.self_assessment)
            + cls._normalized("reverseLossGrowth", reverse_loss_growth)
            + cls._normalized("marketExperience", a.market_experience)
            + cls._normalized("newsSensitivity", a.news_sensitivity)
            + cls._normalized("decisionStyle", a.decision_style)
        ) / 5

    @staticmethod
    def _calculate_composite_index(
        behavioral_index: float,
        capacity_index: float,
        calibration_index: float,
    ) -> float:
        return (
            behavioral_index * BEHAVIORAL_WEIGHT
            + capacity_index * CAPACITY_WEIGHT
            + calibration_index * CALIBRATION_WEIGHT
        )

    # -------------------------------------------------------------------
    # Sustainability & ceiling
    # -------------------------------------------------------------------

    @staticmethod
    def _calculate_fragility_score(a: AssessmentInput) -> int:
        """Count of raw capacity answers at or below FRAGILITY_THRESHOLD"""
        flags = (
            a.time_horizon <= FRAGILITY_THRESHOLD,
            a.liquidity_buffer <= FRAGILITY_THRESHOLD,
            a.income_stability <= FRAGILITY_THRESHOLD,
        )
        return sum(1 for flag in flags if flag)

    @staticmethod
    def _determine_sustainability_severity(fragility_score: int) -> SustainabilitySeverity:
        if fragility_score == 0:
            return SustainabilitySeverity.STABLE
        if fragility_score == 1:
            return SustainabilitySeverity.MODERATE_CONSTRAINT
        return SustainabilitySeverity.HIGH_CONSTRAINT

    @staticmethod
    def _capacity_tier_ceiling(capacity_index: float) -> float:
        """
        Pass 1: tiered assignment by capacityIndex.

        Tiers are listed loosest first and each match overwrites the
        previous value, so the strictest matching tier wins.
        """
        ceiling = UNCAPPED_CEILING
        for threshold, tier_ceiling in CAPACITY_CEILING_TIERS:
            if capacity_index < threshold:
                ceiling = tier_ceiling
        return ceiling

    @staticmethod
    def _apply_ceiling_overrides(
        ceiling: float,
        time_horizon: float,
        fragility_score: int,
    ) -> float:
        """Pass 2: clamp down by horizon and fragility overrides"""
        if time_horizon <= 2:
            ceiling = min(ceiling, SHORT_HORIZON_CEILING)
        if time_horizon <= 1:
            ceiling = min(ceiling, VERY_SHORT_HORIZON_CEILING)
        if fragility_score >= 2:
            ceiling = min(ceiling, HIGH_FRAGILITY_CEILING)
        return ceiling

    @classmethod
    def _calculate_structural_ceiling(
        cls,
        capacity_index: float,
        time_horizon: float,
        fragility_score: int,
    ) -> float:
        """
        Highest recommendable score given capacity and fragility.

        Returns:
            One of 40, 45, 50, 55, 65, 100
        """
        ceiling = cls._capacity_tier_ceiling(capacity_index)
        return cls._apply_ceiling_overrides(ceiling, time_horizon, fragility_score)

    # -------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------

    @staticmethod
    def _determine_tension_level(risk_tension: float) -> TensionLevel:
        if abs(risk_tension) < ALIGNED_GAP:
            return TensionLevel.ALIGNED
        if risk_tension > 0:
            return TensionLevel.OVERREACHING
        return TensionLevel.UNDERUTILIZING

    @staticmethod
    def _determine_alignment_severity(risk_tension: float) -> AlignmentSeverity:
        gap = abs(risk_tension)
        if gap < ALIGNED_GAP:
            return AlignmentSeverity.ALIGNED
        if gap < SEVERE_GAP:
            return AlignmentSeverity.MODERATE
        return AlignmentSeverity.SEVERE

    @staticmethod
    def _determine_calibration_risk(calibration_index: float) -> CalibrationRisk:
        if calibration_index > OVERCONFIDENCE_CALIBRATION:
            return CalibrationRisk.OVERCONFIDENCE_BIAS
        if calibration_index < LOW_AWARENESS_CALIBRATION:
            return CalibrationRisk.LOW_SELF_AWARENESS
        return CalibrationRisk.CALIBRATED

    @staticmethod
    def _determine_sequence_risk_exposure(
        sustainability_severity: SustainabilitySeverity,
        tension_level: TensionLevel,
    ) -> SequenceRiskExposure:
        if (
            sustainability_severity == SustainabilitySeverity.HIGH_CONSTRAINT
            and tension_level == TensionLevel.OVERREACHING
        ):
            return SequenceRiskExposure.HIGH
        if sustainability_severity != SustainabilitySeverity.STABLE:
            return SequenceRiskExposure.ELEVATED
        return SequenceRiskExposure.MODERATE

    # -------------------------------------------------------------------
    # Narrative seed
    # -------------------------------------------------------------------

    @staticmethod
    def _compose_narrative(
        archetype: Archetype,
        behavioral_index: float,
        capacity_index: float,
        final_weighted_score: float,
        risk_category: RiskCategory,
    ) -> Narrative:
        summary = (
            f"Your psychological profile identifies you as a {archetype.name} "
            f"({round_half_up(behavioral_index)}/100). "
        )
        if behavioral_index > final_weighted_score + CEILING_NARRATIVE_MARGIN:
            summary += (
                "However, because your financial capacity and sustainability factors "
                f"are currently constrained ({round_half_up(capacity_index)}/100), "
                "we have applied a safety ceiling. Your recommended strategy is "
                f"adjusted to {risk_category.value} to ensure long-term retirement security."
            )
        else:
            summary += (
                "Your financial capacity supports your behavioral profile, "
                f"resulting in a {risk_category.value} recommendation."
            )

        return Narrative(
            executive_summary=summary,
            structural_capacity_explanation=STRUCTURAL_CAPACITY_EXPLANATION,
            sequence_risk_explanation=SEQUENCE_RISK_EXPLANATION,
            allocation_guidance=(
                "Based on your structural safety ceiling, your allocation should focus "
                f"on {risk_category.value.lower()} principles."
            ),
            advisory_note=ADVISORY_NOTE,
        )
