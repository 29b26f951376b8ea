"""Auto-implementation decision engine.

Decides whether an evaluated bounty should be implemented. A record first
has to pass a hard gate (evaluated, rated go, confident enough, not already
done). It is then scored on four factors:

- value: step function over the reward tiers
- complexity: banded bonus or penalty
- organization history: neutral until enough attempts, then nudged by
  the organization's success rate
- evaluation: weighted blend of success probability and confidence

The mean of the four, shifted by the risk tolerance, is compared against a
value-tiered threshold. Every step is appended to the reasoning trace in the
order it was computed so the decision can be audited from its inputs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bountyscout.config import DecisionConfig, get_config
from bountyscout.errors import ConfigurationError
from bountyscout.history import OrganizationHistory, OrganizationHistoryTracker
from bountyscout.models import Bounty, parse_bounty

logger = logging.getLogger(__name__)

RISK_TOLERANCES = ("conservative", "moderate", "aggressive")

DEFAULT_COMPLEXITY = 5
DEFAULT_SUCCESS_PROBABILITY = 50

EVALUATION_PROBABILITY_WEIGHT = 0.7
EVALUATION_CONFIDENCE_WEIGHT = 0.3
HISTORY_BLEND_WEIGHT = 0.3
SCORE_PIVOT = 60
SCORE_ADJUSTMENT_RATE = 0.2


@dataclass(frozen=True)
class DecisionFactors:
    """Component scores behind a decision (each 0-100)."""

    value_score: float = 0.0
    complexity_score: float = 0.0
    organization_history_score: float = 0.0
    evaluation_score: float = 0.0
    overall_score: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "valueScore": self.value_score,
            "complexityScore": self.complexity_score,
            "organizationHistoryScore": self.organization_history_score,
            "evaluationScore": self.evaluation_score,
            "overallScore": self.overall_score,
        }


@dataclass(frozen=True)
class DecisionResult:
    """Implement or skip, with the reasoning that led there."""

    should_implement: bool
    confidence: float
    reasoning: tuple[str, ...]
    threshold_used: float
    risk_level: str
    estimated_success_rate: float
    decision_factors: DecisionFactors = field(default_factory=DecisionFactors)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the field names report consumers expect."""
        return {
            "shouldImplement": self.should_implement,
            "confidence": self.confidence,
            "reasoning": list(self.reasoning),
            "thresholdUsed": self.threshold_used,
            "riskLevel": self.risk_level,
            "estimatedSuccessRate": self.estimated_success_rate,
            "decisionFactors": self.decision_factors.to_dict(),
        }


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _dollars(amount: int) -> str:
    return f"${amount / 100:,.2f}"


class DecisionEngine:
    """History-aware gate deciding which bounties to implement."""

    def __init__(
        self,
        history: OrganizationHistoryTracker | None = None,
        config: DecisionConfig | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            history: Session snapshot of organization history. An empty
                snapshot makes every organization score neutral.
            config: Decision configuration. Uses the global config if not provided.
        """
        self.history = history if history is not None else OrganizationHistoryTracker()
        self.config = config or get_config().decision

    def decide(
        self,
        record: Bounty | Mapping[str, Any],
        risk_tolerance: str | None = None,
    ) -> DecisionResult:
        """Decide whether a record should be implemented.

        Args:
            record: Validated Bounty or a raw record mapping.
            risk_tolerance: conservative, moderate or aggressive. Defaults
                to the configured tolerance.

        Returns:
            DecisionResult. Gate failures return a skip result with zero
            scores rather than raising.

        Raises:
            RecordValidationError: If a raw record is malformed.
            ConfigurationError: If the risk tolerance is unknown.
        """
        tolerance = risk_tolerance or self.config.default_risk_tolerance
        if tolerance not in RISK_TOLERANCES:
            raise ConfigurationError(
                f"Unknown risk tolerance {tolerance!r}; expected one of {', '.join(RISK_TOLERANCES)}"
            )
        bounty = parse_bounty(record)
        reasoning: list[str] = []

        if not self._meets_minimum_requirements(bounty, reasoning):
            logger.debug("Record %s failed the gate: %s", bounty.id, reasoning[-1])
            return DecisionResult(
                should_implement=False,
                confidence=0.0,
                reasoning=tuple(reasoning),
                threshold_used=0.0,
                risk_level="high",
                estimated_success_rate=0.0,
            )

        history = self._sufficient_history(bounty)

        value_score = self._value_score(bounty, reasoning)
        complexity_score = self._complexity_score(bounty, reasoning)
        history_score = self._history_score(bounty, history, reasoning)
        evaluation_score = self._evaluation_score(bounty, reasoning)

        base_score = (value_score + complexity_score + history_score + evaluation_score) / 4
        adjustment = getattr(self.config.risk_tolerance, tolerance)
        overall_score = _clamp(base_score - adjustment)
        if adjustment:
            reasoning.append(
                f"Risk tolerance {tolerance}: {-adjustment:+.1f} adjustment "
                f"(score: {base_score:.1f} -> {overall_score:.1f})"
            )

        threshold = self._threshold(bounty)
        should_implement = overall_score >= threshold

        if should_implement:
            reasoning.append(
                f"Decision: IMPLEMENT (score: {overall_score:.1f} ≥ threshold: {threshold:g})"
            )
        else:
            reasoning.append(
                f"Decision: SKIP (score: {overall_score:.1f} < threshold: {threshold:g})"
            )

        result = DecisionResult(
            should_implement=should_implement,
            confidence=min(100.0, overall_score),
            reasoning=tuple(reasoning),
            threshold_used=threshold,
            risk_level=self._risk_level(bounty, overall_score),
            estimated_success_rate=self._estimate_success_rate(bounty, history, overall_score),
            decision_factors=DecisionFactors(
                value_score=value_score,
                complexity_score=complexity_score,
                organization_history_score=history_score,
                evaluation_score=evaluation_score,
                overall_score=overall_score,
            ),
        )
        logger.info(
            "%s -> %s (score %.1f, threshold %g)",
            bounty.title,
            "IMPLEMENT" if should_implement else "SKIP",
            overall_score,
            threshold,
        )
        return result

    def _meets_minimum_requirements(self, bounty: Bounty, reasoning: list[str]) -> bool:
        reqs = self.config.minimum_requirements
        internal = bounty.internal

        if internal.evaluation_status != reqs.evaluation_status:
            reasoning.append(f"Record not evaluated (status: {internal.evaluation_status})")
            return False

        if internal.go_no_go != reqs.go_no_go_status:
            reasoning.append(f"Not GO-rated (rating: {internal.go_no_go})")
            return False

        confidence = internal.evaluation_confidence or 0
        if confidence < reqs.min_confidence:
            reasoning.append(
                f"Low evaluation confidence ({confidence:g}% < {reqs.min_confidence:g}%)"
            )
            return False

        if internal.implementation_status == "completed":
            reasoning.append("Already implemented")
            return False

        reasoning.append("Meets minimum requirements")
        return True

    def _sufficient_history(self, bounty: Bounty) -> OrganizationHistory | None:
        history = self.history.get(bounty.org_handle)
        if history is None or history.total_attempts < self.config.history.min_attempts:
            return None
        return history

    def _value_score(self, bounty: Bounty, reasoning: list[str]) -> float:
        tiers = self.config.value_tiers
        amount = bounty.reward_amount

        if amount >= tiers.tier3.min_value:
            score, label = 85.0, "High"
        elif amount >= tiers.tier2.min_value:
            score, label = 70.0, "Medium"
        elif amount >= tiers.tier1.min_value:
            score, label = 60.0, "Lower"
        else:
            score, label = 30.0, "Very low"

        reasoning.append(f"{label} value bounty: {_dollars(amount)} (score: {score:g})")
        return score

    def _complexity_score(self, bounty: Bounty, reasoning: list[str]) -> float:
        bands = self.config.complexity
        complexity = bounty.internal.complexity_score or DEFAULT_COMPLEXITY

        if complexity <= bands.low_max_complexity:
            score = 70 + bands.low_bonus_points
            reasoning.append(
                f"Low complexity ({complexity}): +{bands.low_bonus_points:g} bonus (score: {score:g})"
            )
        elif complexity <= bands.medium_max_complexity:
            score = 60 + bands.medium_bonus_points
            reasoning.append(f"Medium complexity ({complexity}): no adjustment (score: {score:g})")
        else:
            score = max(0.0, 50 - bands.high_penalty_points)
            reasoning.append(
                f"High complexity ({complexity}): -{bands.high_penalty_points:g} penalty (score: {score:g})"
            )
        return float(score)

    def _history_score(
        self, bounty: Bounty, history: OrganizationHistory | None, reasoning: list[str]
    ) -> float:
        weighting = self.config.history
        org = bounty.org_handle

        if history is None:
            reasoning.append(f"No significant history for {org} (score: 50)")
            return 50.0

        adjustment = _clamp(
            (history.success_rate - 50) * weighting.success_rate_multiplier,
            -weighting.max_adjustment,
            weighting.max_adjustment,
        )
        score = 50 + adjustment
        reasoning.append(
            f"{org} history: {history.success_rate:.1f}% success rate "
            f"({adjustment:+.1f} adjustment, score: {score:.1f})"
        )
        return score

    def _evaluation_score(self, bounty: Bounty, reasoning: list[str]) -> float:
        probability = bounty.internal.success_probability or 0
        confidence = bounty.internal.evaluation_confidence or 0

        score = probability * EVALUATION_PROBABILITY_WEIGHT + confidence * EVALUATION_CONFIDENCE_WEIGHT
        reasoning.append(
            f"Evaluation: {probability:g}% success probability, {confidence:g}% confidence "
            f"(score: {score:.1f})"
        )
        return score

    def _threshold(self, bounty: Bounty) -> float:
        tiers = self.config.value_tiers
        amount = bounty.reward_amount
        if amount >= tiers.tier3.min_value:
            return tiers.tier3.threshold
        if amount >= tiers.tier2.min_value:
            return tiers.tier2.threshold
        return tiers.tier1.threshold

    def _risk_level(self, bounty: Bounty, overall_score: float) -> str:
        complexity = bounty.internal.complexity_score or DEFAULT_COMPLEXITY
        red_flags = len(bounty.internal.red_flags)

        if overall_score >= 75 and complexity <= 5 and red_flags == 0:
            return "low"
        if overall_score >= 60 and complexity <= 7 and red_flags <= 2:
            return "medium"
        return "high"

    def _estimate_success_rate(
        self, bounty: Bounty, history: OrganizationHistory | None, overall_score: float
    ) -> float:
        success_rate = float(bounty.internal.success_probability or DEFAULT_SUCCESS_PROBABILITY)

        if history is not None:
            success_rate = (
                success_rate * (1 - HISTORY_BLEND_WEIGHT)
                + history.success_rate * HISTORY_BLEND_WEIGHT
            )

        success_rate += (overall_score - SCORE_PIVOT) * SCORE_ADJUSTMENT_RATE
        return _clamp(success_rate)
