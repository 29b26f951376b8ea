"""Signal extraction from bounty issue text.

Turns an issue title and body into a SignalBundle of boolean indicators,
a rough word count and text-based red flags. Pure and deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass

from bountyscout.config import SignalsConfig, get_config
from bountyscout.extract.patterns import (
    INSUFFICIENT_DETAIL,
    combine_text,
    find_text_red_flags,
    has_signal,
)


@dataclass(frozen=True)
class SignalBundle:
    """Structured signals derived from one issue."""

    has_code_examples: bool
    has_specific_requirements: bool
    is_well_defined: bool
    mentions_integration: bool
    mentions_architecture: bool
    has_subjective_criteria: bool
    mentions_implementation_work: bool
    estimated_word_count: int
    red_flags: tuple[str, ...] = ()


def extract_signals(
    title: str, body: str, config: SignalsConfig | None = None
) -> SignalBundle:
    """Extract risk and complexity signals from issue text.

    Args:
        title: Issue title.
        body: Issue body. Empty bodies are valid and flag insufficient detail.
        config: Length thresholds. Uses the global config if not provided.

    Returns:
        A new SignalBundle.
    """
    config = config or get_config().signals
    body = body or ""
    text = combine_text(title, body)

    red_flags = find_text_red_flags(text)
    if len(body) < config.min_body_length:
        red_flags.append(INSUFFICIENT_DETAIL.message)

    return SignalBundle(
        has_code_examples=has_signal("code_examples", text),
        has_specific_requirements=has_signal("specific_requirements", text),
        is_well_defined=(
            len(body) > config.well_defined_body_length
            and has_signal("well_defined_structure", text)
        ),
        mentions_integration=has_signal("integration", text),
        mentions_architecture=has_signal("architecture", text),
        has_subjective_criteria=has_signal("subjective_criteria", text),
        mentions_implementation_work=has_signal("implementation_work", text),
        estimated_word_count=len(text.split()),
        red_flags=tuple(red_flags),
    )
