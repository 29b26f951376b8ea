"""Quick scoring for bounty viability."""

from bountyscout.scoring.quick import QuickResult, evaluate_quickly, score_quickly

__all__ = [
    "QuickResult",
    "evaluate_quickly",
    "score_quickly",
]
