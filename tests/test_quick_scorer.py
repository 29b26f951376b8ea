"""Tests for the quick viability scorer."""

import pytest

from bountyscout.config import Config, QuickScoringConfig
from bountyscout.extract.patterns import TEXT_RED_FLAGS
from bountyscout.extract.signals import SignalBundle, extract_signals
from bountyscout.models import parse_bounty
from bountyscout.scoring.quick import (
    calculate_complexity,
    estimate_timeline,
    evaluate_quickly,
    make_decision,
    score_quickly,
)


def bundle(**overrides) -> SignalBundle:
    """Neutral bundle with selected fields overridden."""
    fields = {
        "has_code_examples": False,
        "has_specific_requirements": True,
        "is_well_defined": True,
        "mentions_integration": False,
        "mentions_architecture": False,
        "has_subjective_criteria": False,
        "mentions_implementation_work": False,
        "estimated_word_count": 150,
        "red_flags": (),
    }
    fields.update(overrides)
    return SignalBundle(**fields)


@pytest.fixture
def config():
    return QuickScoringConfig()


class TestScoreQuickly:
    """Tests for score_quickly on realistic issues."""

    def test_well_defined_issue(self, well_defined_issue) -> None:
        """A small, clear issue is a confident go."""
        title, body = well_defined_issue
        result = score_quickly(extract_signals(title, body), 15000)

        assert result.complexity_score == 2
        assert result.success_probability == 93
        assert result.go_no_go == "go"
        assert result.risk_level == "low"
        assert result.estimated_timeline == "6 hours"
        assert result.confidence == 85
        assert result.red_flags == []
        assert result.notes.startswith(
            "Requirements appear well-defined. Code examples provided. "
            "No major red flags identified"
        )

    def test_empty_body(self) -> None:
        """Missing detail raises complexity and lowers confidence."""
        result = score_quickly(extract_signals("Fix bug", ""), 10000)

        assert result.red_flags == ["Insufficient requirement details"]
        assert result.complexity_score >= 5
        assert result.complexity_score == 8
        assert result.confidence == 55
        assert result.success_probability == 35
        assert result.go_no_go == "caution"
        assert result.risk_level == "high"
        assert result.estimated_timeline == "1 weeks"
        assert "Requirements need clarification" in result.notes
        assert "1 risk factors identified" in result.notes

    def test_low_reward_implementation_task(self) -> None:
        """Implementation work with a tiny reward gets the low-reward flag."""
        result = score_quickly(extract_signals("Implement caching layer", ""), 500)

        assert result.red_flags == [
            "Insufficient requirement details",
            "Low reward for implementation task",
        ]
        assert result.complexity_score == 7
        assert result.success_probability == 18
        assert result.go_no_go == "no-go"
        assert result.risk_level == "medium"

    def test_low_reward_needs_implementation_work(self) -> None:
        result = score_quickly(extract_signals("Fix typo", ""), 500)
        assert "Low reward for implementation task" not in result.red_flags

    @pytest.mark.parametrize("amount", [0, 5000, 10_000_000])
    def test_critical_flag_is_no_go(self, well_defined_issue, amount: int) -> None:
        """A critical flag means no-go regardless of reward."""
        title, body = well_defined_issue
        signals = extract_signals(title, body + "\nThis spans multiple repos.")
        result = score_quickly(signals, amount)

        assert "Multi-repository integration required" in result.red_flags
        assert result.go_no_go == "no-go"

    def test_reward_bonus(self) -> None:
        """Higher rewards raise the success probability."""
        signals = bundle()
        low = score_quickly(signals, 0).success_probability
        medium = score_quickly(signals, 5000).success_probability
        high = score_quickly(signals, 10000).success_probability

        assert medium - low == 10
        assert high - medium == 5


class TestClamping:
    """Scores stay inside their documented ranges."""

    def test_worst_case(self) -> None:
        worst = bundle(
            has_specific_requirements=False,
            is_well_defined=False,
            mentions_integration=True,
            mentions_architecture=True,
            has_subjective_criteria=True,
            mentions_implementation_work=True,
            estimated_word_count=5,
            red_flags=tuple(flag.message for flag in TEXT_RED_FLAGS) + (
                "Insufficient requirement details",
            ),
        )
        result = score_quickly(worst, 0)

        assert result.complexity_score == 10
        assert result.success_probability == 0
        assert result.confidence == 20
        assert result.go_no_go == "no-go"
        assert result.risk_level == "high"
        assert len(result.red_flags) == 8

    def test_best_case(self) -> None:
        best = bundle(has_code_examples=True, estimated_word_count=500)
        result = score_quickly(best, 10000)

        assert result.complexity_score == 1
        assert result.success_probability == 100
        assert result.confidence == 85

    @pytest.mark.parametrize("amount", [0, 999, 1000, 5000, 10000, 10_000_000])
    def test_ranges_hold_for_any_reward(self, amount: int) -> None:
        result = score_quickly(extract_signals("Maybe improve the system design", ""), amount)

        assert 1 <= result.complexity_score <= 10
        assert 0 <= result.success_probability <= 100
        assert 20 <= result.confidence <= 85


class TestComponents:
    """Tests for the individual scoring steps."""

    def test_each_flag_adds_complexity(self, config) -> None:
        signals = bundle()
        assert calculate_complexity(signals, ["a", "b"], config) == (
            calculate_complexity(signals, [], config) + 2
        )

    def test_decision_cutoffs(self, config) -> None:
        assert make_decision(50, [], config) == "go"
        assert make_decision(49, [], config) == "caution"
        assert make_decision(30, [], config) == "caution"
        assert make_decision(29, [], config) == "no-go"
        assert make_decision(100, ["Requires domain expertise"], config) == "no-go"
        assert make_decision(100, ["Requires maintainer coordination"], config) == "go"

    @pytest.mark.parametrize(
        ("overrides", "complexity", "expected"),
        [
            ({}, 2, "8 hours"),
            ({"has_code_examples": True}, 2, "6 hours"),
            ({}, 5, "3 days"),  # 2.5 rounds up
            ({"is_well_defined": False}, 5, "4 days"),
            ({"mentions_architecture": True}, 10, "2 weeks"),
        ],
    )
    def test_timeline(self, config, overrides, complexity: int, expected: str) -> None:
        assert estimate_timeline(bundle(**overrides), complexity, config) == expected


class TestEvaluateQuickly:
    """Tests for evaluate_quickly on validated records."""

    def test_records_duration(self, record_factory) -> None:
        result = evaluate_quickly(parse_bounty(record_factory(amount=15000)))

        assert result.go_no_go == "go"
        assert result.evaluation_duration >= 0

    def test_explicit_config(self, record_factory) -> None:
        config = Config(quick=QuickScoringConfig(go_probability=101, caution_probability=101))
        result = evaluate_quickly(parse_bounty(record_factory(amount=15000)), config)

        assert result.success_probability == 93
        assert result.go_no_go == "no-go"

    def test_to_evaluation(self, record_factory) -> None:
        """Quick results convert into evaluations for the decision engine."""
        result = evaluate_quickly(parse_bounty(record_factory(body="")))
        evaluation = result.to_evaluation()

        assert evaluation.go_no_go == result.go_no_go
        assert evaluation.complexity_score == result.complexity_score
        assert evaluation.success_probability == result.success_probability
        assert evaluation.confidence == result.confidence
        assert evaluation.red_flags == result.red_flags
