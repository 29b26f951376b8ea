"""Implement/skip decisions for evaluated bounties."""

from bountyscout.decision.engine import DecisionEngine, DecisionFactors, DecisionResult

__all__ = [
    "DecisionEngine",
    "DecisionFactors",
    "DecisionResult",
]
