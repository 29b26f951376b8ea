"""Text signal extraction for bounty issues."""

from bountyscout.extract.evaluation_text import parse_evaluation_text
from bountyscout.extract.patterns import (
    RED_FLAG_CATALOG,
    RedFlagPattern,
    find_text_red_flags,
    is_critical,
)
from bountyscout.extract.signals import SignalBundle, extract_signals

__all__ = [
    "RED_FLAG_CATALOG",
    "RedFlagPattern",
    "SignalBundle",
    "extract_signals",
    "find_text_red_flags",
    "is_critical",
    "parse_evaluation_text",
]
