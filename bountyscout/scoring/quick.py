"""Quick viability scoring.

Cheap first-pass filter run on every record before any deeper evaluation.
It combines the text signals with the reward amount into a complexity
score, a success probability and a go / caution / no-go verdict.

The go (>= 50) and caution (>= 30) cutoffs are looser than the decision
engine's thresholds. They are kept as configured rather than tightened;
a record still has to clear the decision engine before it is attempted.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field, replace

from bountyscout.config import Config, QuickScoringConfig, SignalsConfig, get_config
from bountyscout.extract.patterns import LOW_REWARD_FOR_SCOPE, is_critical
from bountyscout.extract.signals import SignalBundle, extract_signals
from bountyscout.models import Bounty, Evaluation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuickResult:
    """Outcome of a quick evaluation."""

    go_no_go: str  # go, no-go or caution
    complexity_score: int  # 1-10
    success_probability: int  # 0-100
    risk_level: str  # low, medium or high
    estimated_timeline: str
    confidence: int  # 20-85
    notes: str
    red_flags: list[str] = field(default_factory=list)
    evaluation_duration: float = 0.0  # milliseconds

    def to_evaluation(self) -> Evaluation:
        """Convert to an Evaluation the decision engine can consume."""
        return Evaluation(
            go_no_go=self.go_no_go,
            complexity_score=self.complexity_score,
            success_probability=self.success_probability,
            confidence=self.confidence,
            risk_level=self.risk_level,
            red_flags=list(self.red_flags),
            estimated_timeline=self.estimated_timeline,
            notes=self.notes,
        )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def collect_red_flags(
    bundle: SignalBundle, reward_amount: int, config: SignalsConfig | None = None
) -> list[str]:
    """Text red flags plus the reward-dependent low-reward flag."""
    config = config or get_config().signals
    red_flags = list(bundle.red_flags)
    if reward_amount < config.low_reward_amount and bundle.mentions_implementation_work:
        red_flags.append(LOW_REWARD_FOR_SCOPE.message)
    return red_flags


def calculate_complexity(
    bundle: SignalBundle, red_flags: list[str], config: QuickScoringConfig
) -> int:
    """Additive complexity estimate clamped to 1-10."""
    complexity = config.base_complexity

    if not bundle.has_specific_requirements:
        complexity += 2
    if not bundle.is_well_defined:
        complexity += 2
    if bundle.mentions_integration:
        complexity += 2
    if bundle.mentions_architecture:
        complexity += 3
    if bundle.has_subjective_criteria:
        complexity += 2

    complexity += len(red_flags)

    if bundle.has_code_examples:
        complexity -= 1
    if bundle.estimated_word_count > 300:
        complexity -= 1

    return _clamp(complexity, 1, 10)


def calculate_success_probability(
    complexity: int, red_flags: list[str], reward_amount: int, config: QuickScoringConfig
) -> int:
    """Success probability (0-100) from complexity, red flags and reward."""
    probability = config.base_probability
    probability -= (complexity - config.base_complexity) * config.probability_per_complexity_point

    critical = sum(1 for flag in red_flags if is_critical(flag))
    probability -= critical * config.critical_flag_penalty
    probability -= (len(red_flags) - critical) * config.flag_penalty

    # Higher rewards offset some of the risk
    if reward_amount >= config.medium_reward_amount:
        probability += config.medium_reward_bonus
    if reward_amount >= config.high_reward_amount:
        probability += config.high_reward_bonus

    return _clamp(probability, 0, 100)


def make_decision(success_probability: int, red_flags: list[str], config: QuickScoringConfig) -> str:
    """Go / caution / no-go verdict. Any critical flag is an automatic no-go."""
    if any(is_critical(flag) for flag in red_flags):
        return "no-go"
    if success_probability >= config.go_probability:
        return "go"
    if success_probability >= config.caution_probability:
        return "caution"
    return "no-go"


def calculate_risk_level(red_flags: list[str], complexity: int) -> str:
    if len(red_flags) >= 3 or complexity >= 8:
        return "high"
    if len(red_flags) >= 1 or complexity >= 6:
        return "medium"
    return "low"


def estimate_timeline(bundle: SignalBundle, complexity: int, config: QuickScoringConfig) -> str:
    """Rough effort estimate rendered as hours, days or weeks."""
    hours = float(complexity * config.hours_per_complexity_point)
    if not bundle.is_well_defined:
        hours *= 1.5
    if bundle.mentions_architecture:
        hours *= 1.8
    if bundle.has_code_examples:
        hours *= 0.8

    if hours <= 8:
        return f"{_round_half_up(hours)} hours"
    if hours <= 40:
        return f"{_round_half_up(hours / 8)} days"
    return f"{_round_half_up(hours / 40)} weeks"


def calculate_confidence(
    bundle: SignalBundle, red_flags: list[str], config: QuickScoringConfig
) -> int:
    """How much the quick verdict can be trusted, clamped to 20-85."""
    confidence = 60

    if bundle.is_well_defined:
        confidence += 15
    if bundle.has_code_examples:
        confidence += 10
    if bundle.has_specific_requirements:
        confidence += 10

    if bundle.has_subjective_criteria:
        confidence -= 15
    if bundle.mentions_architecture:
        confidence -= 10

    confidence -= len(red_flags) * 5

    return _clamp(confidence, config.min_confidence, config.max_confidence)


def generate_notes(bundle: SignalBundle, red_flags: list[str]) -> str:
    notes = [
        "Requirements appear well-defined"
        if bundle.is_well_defined
        else "Requirements need clarification"
    ]
    if bundle.has_code_examples:
        notes.append("Code examples provided")
    if red_flags:
        notes.append(f"{len(red_flags)} risk factors identified")
    else:
        notes.append("No major red flags identified")
    notes.append("Quick evaluation - consider deeper analysis for high-value bounties")
    return ". ".join(notes)


def score_quickly(
    bundle: SignalBundle,
    reward_amount: int,
    config: QuickScoringConfig | None = None,
    signals_config: SignalsConfig | None = None,
) -> QuickResult:
    """Score a signal bundle.

    Never raises for well-formed input: short or missing text lowers the
    scores instead of failing.

    Args:
        bundle: Output of extract_signals().
        reward_amount: Reward in minor currency units.
        config: Scoring constants. Uses the global config if not provided.
        signals_config: Thresholds for the low-reward flag.

    Returns:
        QuickResult with the verdict and all component estimates.
    """
    config = config or get_config().quick
    red_flags = collect_red_flags(bundle, reward_amount, signals_config)

    complexity = calculate_complexity(bundle, red_flags, config)
    probability = calculate_success_probability(complexity, red_flags, reward_amount, config)

    return QuickResult(
        go_no_go=make_decision(probability, red_flags, config),
        complexity_score=complexity,
        success_probability=probability,
        risk_level=calculate_risk_level(red_flags, complexity),
        estimated_timeline=estimate_timeline(bundle, complexity, config),
        confidence=calculate_confidence(bundle, red_flags, config),
        notes=generate_notes(bundle, red_flags),
        red_flags=red_flags,
    )


def evaluate_quickly(bounty: Bounty, config: Config | None = None) -> QuickResult:
    """Extract signals from a record and score them.

    Args:
        bounty: Validated record.
        config: Configuration for the signal and quick sections. Uses the
            global config if not provided.
    """
    start = time.perf_counter()
    config = config or get_config()

    bundle = extract_signals(bounty.title, bounty.body, config.signals)
    result = score_quickly(bundle, bounty.reward_amount, config.quick, config.signals)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "Quick evaluation: %s ($%.2f) -> %s (complexity %d, %d%% success)",
        bounty.title,
        bounty.reward_amount / 100,
        result.go_no_go,
        result.complexity_score,
        result.success_probability,
    )
    return replace(result, evaluation_duration=duration_ms)
