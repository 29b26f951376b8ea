"""Signal and red-flag patterns for issue text.

This module defines the catalog of textual indicators the quick scorer
relies on. Every pattern runs against the lowercased "title body" text.
Red flags are listed in the order they are reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Pattern

FlagCategory = Literal["critical", "high_risk"]

CRITICAL = "critical"
HIGH_RISK = "high_risk"


@dataclass(frozen=True)
class RedFlagPattern:
    """A red flag and the text that triggers it.

    Flags without a pattern are decided by length or reward rules in
    the extractor and quick scorer.
    """

    name: str
    message: str
    pattern: Pattern[str] | None
    category: FlagCategory


@dataclass(frozen=True)
class SignalPattern:
    """A boolean signal detected from issue text."""

    name: str
    pattern: Pattern[str]


# Boolean signals feeding complexity and confidence
SIGNAL_PATTERNS = {
    "code_examples": SignalPattern(
        name="code_examples",
        pattern=re.compile(r"```|`[^`]+`|example|sample"),
    ),
    "specific_requirements": SignalPattern(
        name="specific_requirements",
        pattern=re.compile(r"should|must|require|need to|implement|add|create"),
    ),
    "well_defined_structure": SignalPattern(
        name="well_defined_structure",
        pattern=re.compile(r"step|todo|list|bullet"),
    ),
    "integration": SignalPattern(
        name="integration",
        pattern=re.compile(r"integrat|pipeline|system|phase|workflow|connect"),
    ),
    "architecture": SignalPattern(
        name="architecture",
        pattern=re.compile(r"architect|design|structure|refactor|redesign"),
    ),
    "subjective_criteria": SignalPattern(
        name="subjective_criteria",
        pattern=re.compile(r"aesthetic|clean|optimal|nice|better|improve|enhance"),
    ),
    "implementation_work": SignalPattern(
        name="implementation_work",
        pattern=re.compile(r"implement|create|build|develop"),
    ),
}

VAGUE_REQUIREMENTS = RedFlagPattern(
    name="vague_requirements",
    message="Vague requirements with uncertainty indicators",
    pattern=re.compile(r"somehow|possibly|maybe|probably|might"),
    category=CRITICAL,
)
MULTI_REPOSITORY = RedFlagPattern(
    name="multi_repository",
    message="Multi-repository integration required",
    pattern=re.compile(r"multiple.*repo|across.*repo|several.*repo"),
    category=CRITICAL,
)
DOMAIN_EXPERTISE = RedFlagPattern(
    name="domain_expertise",
    message="Requires domain expertise",
    pattern=re.compile(r"domain.*expert|specialist|advanced.*knowledge|deep.*understanding"),
    category=CRITICAL,
)
MAINTAINER_COORDINATION = RedFlagPattern(
    name="maintainer_coordination",
    message="Requires maintainer coordination",
    pattern=re.compile(r"coordination|collaborate|work.*with.*maintainer"),
    category=HIGH_RISK,
)
AESTHETIC_SUBJECTIVITY = RedFlagPattern(
    name="aesthetic_subjectivity",
    message="Subjective aesthetic criteria",
    pattern=re.compile(r"aesthetic|beautiful|clean.*look|visually"),
    category=HIGH_RISK,
)
ARCHITECTURE_CHANGE = RedFlagPattern(
    name="architecture_change",
    message="System architecture changes required",
    pattern=re.compile(r"phase|pipeline|workflow|system.*design"),
    category=HIGH_RISK,
)
INSUFFICIENT_DETAIL = RedFlagPattern(
    name="insufficient_detail",
    message="Insufficient requirement details",
    pattern=None,
    category=HIGH_RISK,
)
LOW_REWARD_FOR_SCOPE = RedFlagPattern(
    name="low_reward_for_scope",
    message="Low reward for implementation task",
    pattern=None,
    category=HIGH_RISK,
)

# Full catalog in reporting order
RED_FLAG_CATALOG = [
    VAGUE_REQUIREMENTS,
    MULTI_REPOSITORY,
    DOMAIN_EXPERTISE,
    MAINTAINER_COORDINATION,
    AESTHETIC_SUBJECTIVITY,
    ARCHITECTURE_CHANGE,
    INSUFFICIENT_DETAIL,
    LOW_REWARD_FOR_SCOPE,
]

# Flags decided purely by pattern matching
TEXT_RED_FLAGS = [flag for flag in RED_FLAG_CATALOG if flag.pattern is not None]

CRITICAL_FLAG_MESSAGES = frozenset(
    flag.message for flag in RED_FLAG_CATALOG if flag.category == CRITICAL
)


def combine_text(title: str, body: str) -> str:
    """Build the lowercased text every pattern is matched against."""
    return f"{title or ''} {body or ''}".lower()


def has_signal(name: str, text: str) -> bool:
    """Check a named signal against already combined text.

    Args:
        name: Key in SIGNAL_PATTERNS.
        text: Lowercased text from combine_text().

    Returns:
        True if the signal pattern matches.
    """
    return SIGNAL_PATTERNS[name].pattern.search(text) is not None


def find_text_red_flags(text: str) -> list[str]:
    """Find pattern-based red flags in combined text.

    Args:
        text: Lowercased text from combine_text().

    Returns:
        Messages of matching flags, in catalog order.
    """
    return [flag.message for flag in TEXT_RED_FLAGS if flag.pattern.search(text)]


def is_critical(message: str) -> bool:
    """Whether a red-flag message belongs to the critical category."""
    return message in CRITICAL_FLAG_MESSAGES


def flag_by_name(name: str) -> RedFlagPattern:
    """Look up a catalog entry by name.

    Raises:
        KeyError: If no flag has that name.
    """
    for flag in RED_FLAG_CATALOG:
        if flag.name == name:
            return flag
    raise KeyError(name)
