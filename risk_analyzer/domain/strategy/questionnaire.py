"""
RISK QUESTIONNAIRE CATALOG

Static definition of the assessment questions, their answer scales and
the section each one feeds. The scoring engine reads its validation
order and normalization ranges from here.

Sections:
- capacity     -> capacityIndex
- behavioral   -> behavioralIndex (and archetype)
- calibration  -> calibrationIndex
- guardrails   -> collected, never scored
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AnswerOption:
    label: str
    value: int


@dataclass(frozen=True)
class Question:
    field: str
    attribute: str
    section: str
    prompt: str
    options: tuple[AnswerOption, ...]
    scale: tuple[int, int]
    reverse_scored: bool = False

    @property
    def scored(self) -> bool:
        return self.section != "guardrails"

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "section": self.section,
            "prompt": self.prompt,
            "options": [{"label": o.label, "value": o.value} for o in self.options],
            "scale": {"min": self.scale[0], "max": self.scale[1]},
            "reverseScored": self.reverse_scored,
        }


def _options(*pairs: tuple[str, int]) -> tuple[AnswerOption, ...]:
    return tuple(AnswerOption(label=label, value=value) for label, value in pairs)


# -------------------------------------------------------------------
# Question definitions (display order)
# -------------------------------------------------------------------

QUESTIONS: tuple[Question, ...] = (
    # ---- Capacity ----
    Question(
        field="timeHorizon",
        attribute="time_horizon",
        section="capacity",
        prompt="When do you expect to need a significant portion of this money?",
        options=_options(
            ("Less than 3 years", 1),
            ("3–7 years", 2),
            ("7–15 years", 3),
            ("15+ years", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="assets",
        attribute="assets",
        section="capacity",
        prompt="Approximately how much do you have in investable assets?",
        options=_options(
            ("Under $100k", 1),
            ("$100k–$500k", 2),
            ("$500k–$1M", 3),
            ("$1M–$5M", 4),
            ("$5M+", 5),
        ),
        scale=(1, 5),
    ),
    Question(
        field="incomeStability",
        attribute="income_stability",
        section="capacity",
        prompt="Which best describes your primary income?",
        options=_options(
            ("Not currently earning income", 1),
            ("Variable (commission, business income)", 2),
            ("Mostly stable with some variability", 3),
            ("Very stable (salary, pension)", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="liquidityBuffer",
        attribute="liquidity_buffer",
        section="capacity",
        prompt=(
            "If your income stopped today, how long could you cover expenses "
            "without selling investments?"
        ),
        options=_options(
            ("Less than 3 months", 1),
            ("3–6 months", 2),
            ("6–12 months", 3),
            ("More than 12 months", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="dependents",
        attribute="dependents",
        section="capacity",
        prompt="Do others rely on this money for near-term needs?",
        options=_options(
            ("Yes, critically", 1),
            ("Yes, partially", 2),
            ("Not directly", 3),
            ("No dependents", 4),
        ),
        scale=(1, 4),
    ),
    # ---- Behavioral ----
    Question(
        field="lossReaction",
        attribute="loss_reaction",
        section="behavioral",
        prompt=(
            "Imagine your portfolio falls 20% in a short period due to market "
            "conditions. What would you most likely do?"
        ),
        options=_options(
            ("Sell most investments to prevent further loss", 1),
            ("Sell some and wait for stability", 2),
            ("Do nothing and wait it out", 3),
            ("Invest more while prices are lower", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="volatilityPreference",
        attribute="volatility_preference",
        section="behavioral",
        prompt="Which portfolio would you prefer?",
        options=_options(
            ("Small steady returns with minimal ups and downs", 1),
            ("Moderate ups and downs with moderate growth", 2),
            ("Larger swings with higher long-term growth", 3),
            ("Significant swings for chance of high returns", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="regretSensitivity",
        attribute="regret_sensitivity",
        section="behavioral",
        prompt="Which outcome would bother you more?",
        # Two-way choice scored at the ends of the 1-4 scale
        options=_options(
            ("Missing out on gains because you were cautious", 4),
            ("Experiencing losses because you took too much risk", 1),
        ),
        scale=(1, 4),
    ),
    Question(
        field="drawdownThreshold",
        attribute="drawdown_threshold",
        section="behavioral",
        prompt="At what point would investment losses start to feel unacceptable?",
        options=_options(
            ("Around 5%", 1),
            ("Around 10%", 2),
            ("Around 20%", 3),
            ("Losses wouldn’t concern me unless fundamentals changed", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="ambiguityTolerance",
        attribute="ambiguity_tolerance",
        section="behavioral",
        prompt=(
            "How do you feel about investments where outcomes are uncertain "
            "but potentially rewarding?"
        ),
        options=_options(
            ("Very uncomfortable", 1),
            ("Somewhat uncomfortable", 2),
            ("Generally comfortable", 3),
            ("Very comfortable", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="downturnBehavior",
        attribute="downturn_behavior",
        section="behavioral",
        prompt="During market downturns, I believe the best approach is to…",
        options=_options(
            ("Act quickly to avoid further damage", 1),
            ("Reduce risk until conditions improve", 2),
            ("Stick with the plan despite discomfort", 3),
            ("Increase risk if long-term outlook is intact", 4),
        ),
        scale=(1, 4),
    ),
    # ---- Calibration ----
    Question(
        field="selfAssessment",
        attribute="self_assessment",
        section="calibration",
        prompt="How would you describe your overall comfort with investment risk?",
        options=_options(
            ("Very low", 1),
            ("Low", 2),
            ("Moderate", 3),
            ("High", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="reverseLossGrowth",
        attribute="reverse_loss_growth",
        section="calibration",
        prompt="I would rather accept short-term losses than limit long-term growth.",
        options=_options(
            ("Strongly disagree", 1),
            ("Disagree", 2),
            ("Agree", 3),
            ("Strongly agree", 4),
        ),
        scale=(1, 4),
        reverse_scored=True,
    ),
    Question(
        field="marketExperience",
        attribute="market_experience",
        section="calibration",
        prompt="Have you invested through a major market downturn before?",
        options=_options(
            ("No", 1),
            ("Yes, but it was very stressful", 2),
            ("Yes, and I stayed invested", 3),
            ("Yes, and I increased investments", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="newsSensitivity",
        attribute="news_sensitivity",
        section="calibration",
        prompt="How often do market headlines influence your investment decisions?",
        options=_options(
            ("Very often", 1),
            ("Sometimes", 2),
            ("Rarely", 3),
            ("Almost never", 4),
        ),
        scale=(1, 4),
    ),
    Question(
        field="decisionStyle",
        attribute="decision_style",
        section="calibration",
        prompt="When making financial decisions, I tend to rely more on…",
        options=_options(
            ("Gut instinct", 1),
            ("A mix of intuition and analysis", 2),
            ("Data and structured planning", 3),
        ),
        scale=(1, 3),
    ),
    # ---- Guardrails (unscored) ----
    Question(
        field="advisorContactPreference",
        attribute="advisor_contact_preference",
        section="guardrails",
        prompt="During future market declines, would you prefer to…",
        options=_options(
            ("Be contacted before any action is taken", 1),
            ("Receive reassurance and updates", 2),
            ("Take no action unless goals change", 3),
        ),
        scale=(1, 3),
    ),
    Question(
        field="rulePreference",
        attribute="rule_preference",
        section="guardrails",
        prompt="I feel more comfortable investing when…",
        options=_options(
            ("I can adjust strategy frequently", 1),
            ("I have flexibility within limits", 2),
            ("A clear long-term plan is followed", 3),
        ),
        scale=(1, 3),
    ),
    Question(
        field="stressAwareness",
        attribute="stress_awareness",
        section="guardrails",
        prompt="Market volatility makes me anxious, even when I understand it’s normal.",
        options=_options(
            ("Strongly agree", 1),
            ("Agree", 2),
            ("Disagree", 3),
            ("Strongly disagree", 4),
        ),
        scale=(1, 4),
    ),
)

SECTIONS = ("capacity", "behavioral", "calibration", "guardrails")

# Validation order is part of the API contract: only the first offending
# field is reported.
REQUIRED_FIELDS: tuple[str, ...] = tuple(q.field for q in QUESTIONS if q.scored)

FIELD_ATTRIBUTES: dict[str, str] = {q.field: q.attribute for q in QUESTIONS if q.scored}

ANSWER_RANGES: dict[str, tuple[int, int]] = {q.field: q.scale for q in QUESTIONS if q.scored}

# Reverse-scored answers are mirrored as (REVERSE_PIVOT - raw) before
# normalization.
REVERSE_PIVOT = 6

# -------------------------------------------------------------------
# Investable assets -> CRM dropdown labels
# -------------------------------------------------------------------

INVESTABLE_ASSET_LABELS: dict[int, str] = {
    1: "Under $100k",
    2: "$100k-$500k",
    3: "$500k-$1M",
    4: "$1M-$5M",
    5: "$5m+",
}


def questions_for_section(section: str) -> list[Question]:
    if section not in SECTIONS:
        raise ValueError(f"Unknown questionnaire section: {section}")
    return [q for q in QUESTIONS if q.section == section]


def investable_assets_label(code: Any) -> Optional[str]:
    """
    Map an `assets` answer code to the CRM dropdown label.

    Accepts ints or numeric strings ("2", "2.0"). Unknown codes are passed
    through as strings so the CRM still receives what the user chose.
    """
    if code is None or isinstance(code, bool):
        return None
    try:
        numeric = float(str(code).strip())
    except ValueError:
        return str(code)
    if numeric.is_integer() and int(numeric) in INVESTABLE_ASSET_LABELS:
        return INVESTABLE_ASSET_LABELS[int(numeric)]
    return str(code)
