"""Parse textual evaluations produced by an external analysis step.

A fenced ```json block is preferred. Without one, individual fields are
pulled out of the prose with patterns and missing values fall back to
neutral defaults.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from bountyscout.models import Evaluation

logger = logging.getLogger(__name__)

MAX_RED_FLAGS = 5
MIN_RED_FLAG_LENGTH = 10

JSON_BLOCK_PATTERN = re.compile(r"```json\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)

GO_NO_GO_PATTERN = re.compile(
    r"(?:decision|recommendation|status).*?:\s*(go|no-go|caution)", re.IGNORECASE
)
COMPLEXITY_PATTERN = re.compile(r"complexity.*?(\d+)/10", re.IGNORECASE)
PROBABILITY_PATTERN = re.compile(r"(?:success|probability).*?(\d+)%", re.IGNORECASE)
CONFIDENCE_PATTERN = re.compile(r"confidence.*?(\d+)%", re.IGNORECASE)
RISK_PATTERN = re.compile(r"risk.*?level.*?:\s*(low|medium|high)", re.IGNORECASE)
TIMELINE_PATTERN = re.compile(r"(?:timeline|estimate).*?:\s*([^\n]+)", re.IGNORECASE)

RED_FLAG_LINE_PATTERNS = [
    re.compile(r"red flags?.*?:?\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"warnings?.*?:?\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"risks?.*?:?\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"concerns?.*?:?\s*([^\n]+)", re.IGNORECASE),
]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def extract_red_flag_lines(text: str) -> list[str]:
    """Collect up to five red-flag style lines from free text."""
    red_flags: list[str] = []
    for pattern in RED_FLAG_LINE_PATTERNS:
        for match in pattern.finditer(text):
            line = match.group(1).strip()
            if len(line) > MIN_RED_FLAG_LENGTH:
                red_flags.append(line)
    return red_flags[:MAX_RED_FLAGS]


def _red_flag_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(flag) for flag in value]


def _from_json(data: dict[str, Any]) -> Evaluation:
    verdict = str(data.get("go_no_go") or "caution").lower()
    if verdict not in ("go", "no-go", "caution"):
        verdict = "caution"
    return Evaluation(
        go_no_go=verdict,
        complexity_score=int(_clamp(int(data.get("complexity_score") or 5), 1, 10)),
        success_probability=_clamp(float(data.get("success_probability") or 50), 0, 100),
        confidence=_clamp(float(data.get("confidence") or 50), 0, 100),
        risk_level=str(data.get("risk_level") or "medium").lower(),
        red_flags=_red_flag_list(data.get("red_flags")),
        estimated_timeline=str(data.get("estimated_timeline") or "Unknown"),
        notes=str(data.get("decision_rationale") or data.get("notes") or ""),
    )


def parse_evaluation_text(text: str) -> Evaluation:
    """Turn an evaluation write-up into an Evaluation.

    Args:
        text: Markdown or plain text evaluation.

    Returns:
        Parsed Evaluation; fields that cannot be found use defaults
        (caution, complexity 5, 50% probability, medium risk).
    """
    json_match = JSON_BLOCK_PATTERN.search(text)
    if json_match:
        try:
            data = json.loads(json_match.group(1))
            if isinstance(data, dict):
                return _from_json(data)
            logger.warning("JSON evaluation summary is not an object, using text analysis")
        except (json.JSONDecodeError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"Failed to parse JSON evaluation summary, using text analysis: {e}")

    go_no_go = GO_NO_GO_PATTERN.search(text)
    complexity = COMPLEXITY_PATTERN.search(text)
    probability = PROBABILITY_PATTERN.search(text)
    confidence = CONFIDENCE_PATTERN.search(text)
    risk = RISK_PATTERN.search(text)
    timeline = TIMELINE_PATTERN.search(text)

    return Evaluation(
        go_no_go=go_no_go.group(1).lower() if go_no_go else "caution",
        complexity_score=int(_clamp(int(complexity.group(1)), 1, 10)) if complexity else 5,
        success_probability=_clamp(float(probability.group(1)), 0, 100) if probability else 50,
        confidence=_clamp(float(confidence.group(1)), 0, 100) if confidence else 50,
        risk_level=risk.group(1).lower() if risk else "medium",
        red_flags=extract_red_flag_lines(text),
        estimated_timeline=timeline.group(1).strip() if timeline else "Unknown",
        notes="Parsed from evaluation text",
    )
