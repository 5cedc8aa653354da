"""AI content analysis: prompt, call and tolerant response parsing."""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import OpenAI, OpenAIError

from analyze_content.instructions import build_analysis_prompt
from analyze_content.models import SCORE_FIELDS, EntityMotivation, StructuredAnalysis
from common.errors import ConfigurationError, EmptyResponseError, UpstreamError
from common.utils import is_numeric

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
BIAS_ANALYSIS_MAX_CHARS = 999


class AnalysisEngine:
    def __init__(
        self,
        client: OpenAI | None = None,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        timeout: float = 60.0,
        max_tokens: int = 1000,
    ):
        self._client = client
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.max_tokens = max_tokens

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("OpenAI API key is not configured", stage="analyze")
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def generate_analysis(self, text: str, title: str) -> str:
        """Run the analysis prompt and return the raw model output.

        Raises:
            ConfigurationError: No API key configured.
            UpstreamError: The API call failed or timed out.
            EmptyResponseError: The model answered with no content.
        """
        client = self.client
        prompt = build_analysis_prompt(title, text)

        logger.info("Generating AI analysis for title=%s", title)
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )
        except OpenAIError as exc:
            raise UpstreamError(
                f"Analysis request failed: {exc}",
                status_code=getattr(exc, "status_code", None),
                stage="analyze",
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise EmptyResponseError("Analysis model returned no content", stage="analyze")

        logger.info("Generated AI analysis (%d chars) for title=%s", len(content), title)
        return content


def parse_response(raw: Any) -> StructuredAnalysis:
    """Parse model output into a StructuredAnalysis.

    Takes the text between the first "{" and the last "}", decodes it and
    keeps whatever fields are well-formed. Never raises: unusable input
    yields an empty StructuredAnalysis.
    """
    parsed = _extract_json_object(raw)
    if parsed is None:
        return StructuredAnalysis()

    result = StructuredAnalysis(
        entities=_parse_entities(parsed.get("entities")),
        key_metric=_parse_key_metric(parsed.get("key_metric")),
        analysis=_parse_text(parsed.get("analysis")),
        bias_analysis=_parse_bias_analysis(parsed.get("bias_analysis")),
    )
    for name in SCORE_FIELDS:
        setattr(result, name, _parse_score(parsed.get(name)))

    logger.info(
        "Parsed AI response with %d entities and %d motivations",
        len(result.entities),
        len(result.motivations),
    )
    return result


def validate_response(data: StructuredAnalysis) -> bool:
    """True if at least one entity has a name and a non-empty motivations list."""
    if not data.entities:
        logger.warning("AI response missing or invalid entities array")
        return False

    if not any(entity.name and entity.motivations for entity in data.entities):
        logger.warning("AI response contains no valid entities with name and motivations")
        return False

    return True


def _extract_json_object(raw: Any) -> dict[str, Any] | None:
    if not isinstance(raw, str):
        logger.error("AI response is not text: type=%s", type(raw).__name__)
        return None

    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end < start:
        logger.error("No valid JSON found in AI response")
        return None

    try:
        parsed = json.loads(raw[start : end + 1])
    except (ValueError, RecursionError) as exc:
        logger.error("JSON parsing failed: %s", exc)
        return None

    if not isinstance(parsed, dict):
        logger.error("AI response JSON is not an object")
        return None
    return parsed


def _parse_entities(value: Any) -> list[EntityMotivation]:
    if not isinstance(value, list):
        return []

    entities = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        name = _parse_text(entry.get("name"))
        motivations = entry.get("motivations")
        if name is None or motivations is None:
            continue
        if isinstance(motivations, str):
            motivations = [motivations]
        if not isinstance(motivations, list):
            continue
        cleaned = [m.strip() for m in motivations if isinstance(m, str) and m.strip()]
        entities.append(EntityMotivation(name=name, motivations=cleaned))
    return entities


def _parse_key_metric(value: Any) -> str | None:
    if isinstance(value, list):
        value = next((v for v in value if isinstance(v, str) and v.strip()), None)
    return _parse_text(value)


def _parse_text(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def _parse_bias_analysis(value: Any) -> str | None:
    text = _parse_text(value)
    if text is not None and len(text) > BIAS_ANALYSIS_MAX_CHARS:
        logger.warning("Bias analysis truncated from %d to %d characters", len(text), BIAS_ANALYSIS_MAX_CHARS)
        text = text[: BIAS_ANALYSIS_MAX_CHARS - 3] + "..."
    return text


def _parse_score(value: Any) -> int | None:
    if not is_numeric(value):
        return None
    number = value if isinstance(value, int) else int(float(value))
    return max(0, min(100, number))
