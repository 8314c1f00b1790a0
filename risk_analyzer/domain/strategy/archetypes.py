"""
ARCHETYPES & CLASSIFICATION BANDS

Ordered threshold tables used by the scoring engine.

Each table is a sequence of (inclusive_upper_bound, label) sorted by
bound; the final entry's bound is +inf so every finite score lands in
exactly one band.

- Archetype bands read behavioralIndex only.
- Risk category bands read the capped finalWeightedScore.
"""

import math
from typing import Sequence, Tuple, TypeVar

from risk_analyzer.domain.models import Archetype, RiskCategory

T = TypeVar("T")

# -------------------------------------------------------------------
# Archetype records
# -------------------------------------------------------------------

STEADY_GUARDIAN = Archetype(
    name="Steady Guardian",
    description=(
        "You prioritize protecting capital and maintaining stability. "
        "You value sleep-at-night capital over aggressive growth."
    ),
    strengths=("Strong downside awareness", "Emotional steadiness"),
    watchouts=("Inflation risk", "Purchasing power erosion"),
    color="#1E3A8A",
)

CONSERVATIVE_PRESERVER = Archetype(
    name="Conservative Preserver",
    description=(
        "You prefer steady progress with controlled volatility. "
        "Preserving capital while allowing measured growth is central."
    ),
    strengths=("Downside sensitivity", "Stability-focused"),
    watchouts=("May miss upside expansions",),
    color="#2563EB",
)

STRATEGIC_NAVIGATOR = Archetype(
    name="Strategic Navigator",
    description=(
        "You maintain a thoughtful balance between growth and stability. "
        "You are comfortable with moderate fluctuations."
    ),
    strengths=("Adaptable across cycles", "Long-term perspective"),
    watchouts=("Sharp drawdowns cause stress",),
    color="#059669",
)

CONFIDENT_BUILDER = Archetype(
    name="Confident Builder",
    description=(
        "You are oriented toward long-term growth and accept volatility "
        "as part of the journey."
    ),
    strengths=("High tolerance for fluctuations", "Strong conviction"),
    watchouts=("Overconfidence during rallies",),
    color="#D97706",
)

DYNAMIC_ACCELERATOR = Archetype(
    name="Dynamic Accelerator",
    description=(
        "You display a strong appetite for growth and accept meaningful "
        "volatility to maximize returns."
    ),
    strengths=("High return orientation", "Decisive mindset"),
    watchouts=("Sequence risk exposure", "Liquidity stress in downturns"),
    color="#DC2626",
)

ARCHETYPES: Tuple[Archetype, ...] = (
    STEADY_GUARDIAN,
    CONSERVATIVE_PRESERVER,
    STRATEGIC_NAVIGATOR,
    CONFIDENT_BUILDER,
    DYNAMIC_ACCELERATOR,
)

# -------------------------------------------------------------------
# Threshold tables
# -------------------------------------------------------------------

ARCHETYPE_BANDS: Tuple[Tuple[float, Archetype], ...] = (
    (25.0, STEADY_GUARDIAN),
    (45.0, CONSERVATIVE_PRESERVER),
    (65.0, STRATEGIC_NAVIGATOR),
    (85.0, CONFIDENT_BUILDER),
    (math.inf, DYNAMIC_ACCELERATOR),
)

RISK_CATEGORY_BANDS: Tuple[Tuple[float, RiskCategory], ...] = (
    (25.0, RiskCategory.CAPITAL_PRESERVATION),
    (45.0, RiskCategory.CONSERVATIVE),
    (60.0, RiskCategory.BALANCED),
    (80.0, RiskCategory.GROWTH),
    (math.inf, RiskCategory.AGGRESSIVE_GROWTH),
)


def select_band(value: float, bands: Sequence[Tuple[float, T]]) -> T:
    """
    Return the label of the first band whose inclusive upper bound
    admits `value`.

    Raises:
        ValueError: If value is NaN or the table is empty
    """
    if math.isnan(value):
        raise ValueError("Cannot classify a NaN score")
    for upper_bound, label in bands:
        if value <= upper_bound:
            return label
    raise ValueError("Band table does not cover value")


def archetype_for(behavioral_index: float) -> Archetype:
    return select_band(behavioral_index, ARCHETYPE_BANDS)


def risk_category_for(final_weighted_score: float) -> RiskCategory:
    return select_band(final_weighted_score, RISK_CATEGORY_BANDS)
