"""
NARRATIVE ENRICHMENT SERVICE

Sends computed diagnostics to a hosted LLM (Mistral chat completions) and
returns a five-section narrative report.

• Best-effort: every failure surfaces as NarrativeServiceError
• Bounded by NARRATIVE_TIMEOUT_SECONDS, never retried
• Never told about (or allowed to assume) an existing portfolio
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from risk_analyzer.config import settings as app_settings
from risk_analyzer.domain.models import NarrativeReport, NarrativeServiceError

logger = logging.getLogger(__name__)


REPORT_FIELDS = (
    ("summary", "summary"),
    ("alignmentAnalysis", "alignment_analysis"),
    ("riskDynamics", "risk_dynamics"),
    ("capacityPerspective", "capacity_perspective"),
    ("behavioralInsight", "behavioral_insight"),
)

# Profile keys forwarded to the model; contact details never leave
PROFILE_FIELDS = (
    "riskCategory",
    "archetype",
    "alignmentSeverity",
    "sequenceRiskExposure",
    "calibrationRisk",
    "structuralCapacity",
    "riskPerceptionGap",
)

SYSTEM_PROMPT = """
You are a behavioral risk analyst.

You are interpreting psychological and structural risk diagnostics derived from 18 behavioral assessment questions.

The individual does NOT necessarily have a financial plan or portfolio in place.
Do NOT assume they have investments, an allocation, or an existing strategy.
Do NOT refer to "your plan," "your portfolio," or "your investments."

Your task is to interpret:
- Behavioral risk tendencies
- Structural financial capacity
- Alignment gaps between perception and reality
- Emotional response patterns to uncertainty

This is a diagnostic interpretation, not investment advice.

Guidelines:
- Be analytical and psychologically insightful.
- Avoid generic financial planning language.
- Do not repeat ideas across sections.
- Each section must provide distinct insight.
- Do not use filler or motivational phrasing.
- Do not give allocation suggestions.
- Do not restate the same caution in multiple ways.
- Avoid phrases like "small adjustments" or "slight shifts."
- Do not mention numeric scores.

Return ONLY valid JSON in this exact format:

{
  "summary": "",
  "alignmentAnalysis": "",
  "riskDynamics": "",
  "capacityPerspective": "",
  "behavioralInsight": ""
}
""".strip()


def build_structured_input(
    scores: Dict[str, Any],
    diagnostics: Dict[str, Any],
    profile: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Assemble the user message payload.

    Scores are forwarded as-is even though the prompt tells the model not
    to mention them.
    """
    return {
        "scores": scores,
        "diagnostics": diagnostics,
        "profile": {key: profile.get(key) for key in PROFILE_FIELDS},
    }


def extract_message_text(payload: Dict[str, Any]) -> str:
    """
    Pull the assistant text out of a chat completion.

    Content is either a string or a list of typed chunks; only text chunks
    are kept. Any other shape yields "".
    """
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    choice = choices[0]
    if not isinstance(choice, dict):
        return ""
    message = choice.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            chunk["text"]
            for chunk in content
            if isinstance(chunk, dict)
            and chunk.get("type") == "text"
            and isinstance(chunk.get("text"), str)
        )
    return ""


def parse_report(content: str) -> NarrativeReport:
    """
    Validate model output as the five-section report.

    Raises:
        NarrativeServiceError: Content is not JSON or a section is missing
            or not a string
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise NarrativeServiceError("AI returned invalid JSON", raw=content) from exc

    if not isinstance(data, dict):
        raise NarrativeServiceError("AI returned invalid JSON", raw=content)

    sections = {}
    for wire_name, attribute in REPORT_FIELDS:
        value = data.get(wire_name)
        if not isinstance(value, str):
            raise NarrativeServiceError(
                f"AI response missing section: {wire_name}", raw=content
            )
        sections[attribute] = value

    return NarrativeReport(**sections)


class NarrativeService:
    """Thin client for the narrative-enrichment model"""

    COMPLETIONS_PATH = "/v1/chat/completions"

    def __init__(self, settings=None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or app_settings
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.narrative_configured

    def _request_body(self, structured_input: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "model": self.settings.MISTRAL_MODEL,
            "temperature": self.settings.NARRATIVE_TEMPERATURE,
            "max_tokens": self.settings.NARRATIVE_MAX_TOKENS,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": json.dumps(structured_input)},
            ],
        }

    async def generate(
        self,
        scores: Dict[str, Any],
        diagnostics: Dict[str, Any],
        profile: Dict[str, Any],
    ) -> NarrativeReport:
        """
        Request an enriched narrative.

        Args:
            scores: `scores` object of the scoring response
            diagnostics: `diagnostics` object of the scoring response
            profile: `profile` object of the scoring response

        Returns:
            NarrativeReport with all five sections

        Raises:
            NarrativeServiceError: Service disabled, unreachable, timed out,
                non-2xx, empty, or malformed
        """
        if not self.enabled:
            raise NarrativeServiceError("Narrative service not configured")

        structured_input = build_structured_input(scores, diagnostics, profile)
        url = f"{self.settings.MISTRAL_BASE_URL.rstrip('/')}{self.COMPLETIONS_PATH}"
        headers = {
            "Authorization": f"Bearer {self.settings.MISTRAL_API_KEY}",
            "Content-Type": "application/json",
        }

        logger.info("Sending structured input to narrative model")
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.NARRATIVE_TIMEOUT_SECONDS,
                transport=self._transport,
            ) as client:
                resp = await client.post(url, headers=headers, json=self._request_body(structured_input))
        except httpx.TimeoutException as exc:
            logger.warning(f"Narrative model timed out: {exc}")
            raise NarrativeServiceError("Narrative model timed out") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Narrative model request failed: {exc}")
            raise NarrativeServiceError(f"Narrative model request failed: {exc}") from exc

        if resp.status_code != 200:
            logger.error(f"Narrative model returned HTTP {resp.status_code}")
            raise NarrativeServiceError(f"Narrative model returned HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise NarrativeServiceError("Narrative model returned a non-JSON body") from exc

        try:
            content = extract_message_text(payload)
        except (AttributeError, KeyError, TypeError) as exc:
            logger.error(f"Unexpected completion shape: {exc}")
            raise NarrativeServiceError("Narrative model returned an unexpected response") from exc
        if not content:
            raise NarrativeServiceError("Empty AI response")

        try:
            return parse_report(content)
        except NarrativeServiceError:
            logger.error(f"Narrative model output rejected: {content[:200]}")
            raise
