"""Session analytics for the screening pipeline.

PipelineAnalytics collects decisions, implementation outcomes and quality
gate results for one session. Tracking calls only append; every figure is
computed by generate_metrics(), which is a pure aggregation over what has
been tracked so far.

Cost and ROI figures are rough estimates: a flat cost per implementation
attempt scaled by how long attempts take relative to a baseline. They are
rounded to cents and should be read as orders of magnitude.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from bountyscout.analytics.report import print_summary, save_metrics
from bountyscout.config import AnalyticsConfig, ValueTiersConfig, get_config
from bountyscout.decision.engine import DecisionResult
from bountyscout.models import Bounty

logger = logging.getLogger(__name__)

CAUTION_CONFIDENCE = 30


@dataclass(frozen=True)
class QualityGateResult:
    """Outcome of post-implementation quality checks."""

    passed: bool
    score: float  # 0-100
    blockers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ImplementationOutcome:
    """A finished implementation attempt."""

    tracking_id: str
    bounty: Bounty
    duration_ms: float
    success: bool
    finished_at: float


@dataclass
class DecisionMetrics:
    total_evaluated: int
    go_decisions: int
    caution_decisions: int
    no_go_decisions: int
    average_confidence: float
    average_threshold_used: float


@dataclass
class ImplementationMetrics:
    attempted: int
    successful: int
    failed: int
    success_rate: float
    average_duration: float  # milliseconds
    total_cost_estimate: float


@dataclass
class QualityGateMetrics:
    enabled: bool
    total_checked: int
    passed: int
    failed: int
    average_score: float
    common_blockers: list[str]


@dataclass
class PerformanceMetrics:
    evaluations_per_minute: float
    implementations_per_hour: float
    parallel_efficiency: float  # heuristic, 0-85
    bottlenecks: list[str]


@dataclass
class ValueDistribution:
    low: int
    medium: int
    high: int


@dataclass
class ValueAnalysis:
    total_bounty_value: int
    successfully_implemented_value: int
    roi_estimate: float
    average_bounty_value: float
    value_distribution: ValueDistribution


@dataclass
class SessionMetrics:
    """Snapshot of everything tracked in a session."""

    timestamp: str
    session_id: str
    total_runtime: float  # milliseconds
    bounties_processed: int
    decisions: DecisionMetrics
    implementations: ImplementationMetrics
    quality_gates: QualityGateMetrics
    performance: PerformanceMetrics
    value_analysis: ValueAnalysis

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def generate_session_id(now: datetime) -> str:
    """Date-prefixed random session id, e.g. 2025-01-31-1a2b3c4d."""
    return f"{now.date().isoformat()}-{uuid.uuid4().hex[:8]}"


def estimate_cost(attempts: int, average_duration_ms: float, config: AnalyticsConfig) -> float:
    """Rough spend estimate for a number of implementation attempts."""
    base = attempts * config.cost_per_attempt
    multiplier = max(1.0, average_duration_ms / config.baseline_duration_ms)
    return round(base * multiplier, 2)


def parallel_efficiency(timings: int) -> float:
    """Heuristic parallelism figure; needs at least two timed attempts."""
    if timings < 2:
        return 0.0
    return float(min(85, 50 + timings * 5))


class PipelineAnalytics:
    """Collects one session's decisions and outcomes.

    All tracking calls and snapshots hold the same lock, so a single
    instance can be shared by concurrent implementation workers.
    """

    def __init__(
        self,
        config: AnalyticsConfig | None = None,
        value_tiers: ValueTiersConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Start a session.

        Args:
            config: Analytics configuration. Uses the global config if not provided.
            value_tiers: Tier boundaries for the value distribution.
            clock: Seconds since the epoch; injectable for tests.
        """
        self.config = config or get_config().analytics
        self.value_tiers = value_tiers or get_config().decision.value_tiers
        self._clock = clock
        self._lock = threading.Lock()

        self.session_start = clock()
        self.session_id = generate_session_id(datetime.fromtimestamp(self.session_start))
        self._last_event = self.session_start

        self._decisions: list[tuple[Bounty, DecisionResult]] = []
        self._active: dict[str, tuple[str, float]] = {}
        self._outcomes: list[ImplementationOutcome] = []
        self._quality_results: list[QualityGateResult] = []

        logger.info("Analytics enabled - session %s", self.session_id)

    def _touch(self) -> float:
        now = self._clock()
        self._last_event = max(self._last_event, now)
        return now

    def track_decision(self, bounty: Bounty, decision: DecisionResult) -> None:
        """Record a decision made for a bounty."""
        with self._lock:
            self._touch()
            self._decisions.append((bounty, decision))

        if self.config.enable_realtime_logging:
            logger.info(
                "Decision tracked: %s -> %s (%.1f%%)",
                bounty.title,
                "IMPLEMENT" if decision.should_implement else "SKIP",
                decision.confidence,
            )

    def track_implementation_start(self, bounty: Bounty) -> str:
        """Record the start of an implementation attempt.

        Returns:
            Tracking id to pass to track_implementation_complete().
        """
        tracking_id = f"impl_{uuid.uuid4().hex[:12]}"
        with self._lock:
            started = self._touch()
            self._active[tracking_id] = (bounty.id, started)

        if self.config.enable_realtime_logging:
            logger.info("Implementation started: %s [%s]", bounty.title, tracking_id)
        return tracking_id

    def track_implementation_complete(
        self,
        tracking_id: str,
        bounty: Bounty,
        duration_ms: float | None = None,
        success: bool = False,
    ) -> None:
        """Record the end of an implementation attempt.

        Args:
            tracking_id: Id returned by track_implementation_start().
            bounty: The implemented record.
            duration_ms: Attempt duration. Measured from the tracked start
                when omitted.
            success: Whether the implementation is ready for submission.
        """
        with self._lock:
            now = self._touch()
            started = self._active.pop(tracking_id, None)
            if duration_ms is None:
                duration_ms = (now - started[1]) * 1000 if started else 0.0
            if started is None:
                logger.warning("Implementation %s finished without a tracked start", tracking_id)
            self._outcomes.append(
                ImplementationOutcome(
                    tracking_id=tracking_id,
                    bounty=bounty,
                    duration_ms=float(duration_ms),
                    success=success,
                    finished_at=now,
                )
            )

        if self.config.enable_realtime_logging:
            logger.info(
                "Implementation complete: %s -> %s (%ds) [%s]",
                bounty.title,
                "SUCCESS" if success else "FAILED",
                round(duration_ms / 1000),
                tracking_id,
            )

    def track_quality_gates(self, bounty: Bounty, result: QualityGateResult) -> None:
        """Record quality gate results. Ignored when quality tracking is off."""
        if not self.config.track_quality_metrics:
            return

        with self._lock:
            self._touch()
            self._quality_results.append(result)

        if self.config.enable_realtime_logging:
            logger.info(
                "Quality gates: %s -> %s (%g/100)",
                bounty.title,
                "PASS" if result.passed else "FAIL",
                result.score,
            )

    def generate_metrics(self) -> SessionMetrics:
        """Aggregate everything tracked so far.

        Runtime is measured up to the last tracked event, so calling this
        twice without tracking in between returns identical snapshots.
        """
        with self._lock:
            decisions = list(self._decisions)
            outcomes = list(self._outcomes)
            quality = list(self._quality_results)
            runtime_ms = (self._last_event - self.session_start) * 1000
            last_event = self._last_event

        runtime_minutes = runtime_ms / 60000

        # Decisions
        go = sum(1 for _, d in decisions if d.should_implement)
        caution = sum(
            1 for _, d in decisions if not d.should_implement and d.confidence >= CAUTION_CONFIDENCE
        )
        decision_metrics = DecisionMetrics(
            total_evaluated=len(decisions),
            go_decisions=go,
            caution_decisions=caution,
            no_go_decisions=len(decisions) - go - caution,
            average_confidence=_mean([d.confidence for _, d in decisions]),
            average_threshold_used=_mean([d.threshold_used for _, d in decisions]),
        )

        # Implementations
        successful = [o for o in outcomes if o.success]
        attempted = len(outcomes)
        success_rate = len(successful) / attempted * 100 if attempted else 0.0
        average_duration = _mean([o.duration_ms for o in outcomes])
        cost = estimate_cost(attempted, average_duration, self.config)
        implementation_metrics = ImplementationMetrics(
            attempted=attempted,
            successful=len(successful),
            failed=attempted - len(successful),
            success_rate=success_rate,
            average_duration=average_duration,
            total_cost_estimate=cost,
        )

        # Quality gates
        blocker_counts = Counter(blocker for q in quality for blocker in q.blockers)
        quality_passed = sum(1 for q in quality if q.passed)
        quality_metrics = QualityGateMetrics(
            enabled=self.config.track_quality_metrics,
            total_checked=len(quality),
            passed=quality_passed,
            failed=len(quality) - quality_passed,
            average_score=_mean([q.score for q in quality]),
            common_blockers=[
                blocker
                for blocker, _ in blocker_counts.most_common(self.config.common_blocker_limit)
            ],
        )

        # Value
        bounties = [b for b, _ in decisions]
        total_value = sum(b.reward_amount for b in bounties)
        successful_value = sum(o.bounty.reward_amount for o in successful)
        low_max = self.value_tiers.tier1.min_value
        high_min = self.value_tiers.tier3.min_value
        value_analysis = ValueAnalysis(
            total_bounty_value=total_value,
            successfully_implemented_value=successful_value,
            roi_estimate=round(successful_value / 100 / cost, 2) if cost > 0 else 0.0,
            average_bounty_value=total_value / len(bounties) if bounties else 0.0,
            value_distribution=ValueDistribution(
                low=sum(1 for b in bounties if b.reward_amount < low_max),
                medium=sum(1 for b in bounties if low_max <= b.reward_amount < high_min),
                high=sum(1 for b in bounties if b.reward_amount >= high_min),
            ),
        )

        performance = PerformanceMetrics(
            evaluations_per_minute=(
                round(len(decisions) / runtime_minutes, 2) if runtime_minutes > 0 else 0.0
            ),
            implementations_per_hour=(
                round(attempted / runtime_minutes * 60, 2) if runtime_minutes > 0 else 0.0
            ),
            parallel_efficiency=parallel_efficiency(len(outcomes)),
            bottlenecks=self._identify_bottlenecks(
                average_duration, attempted, success_rate, quality
            ),
        )

        return SessionMetrics(
            timestamp=datetime.fromtimestamp(last_event).isoformat(),
            session_id=self.session_id,
            total_runtime=runtime_ms,
            bounties_processed=len(decisions),
            decisions=decision_metrics,
            implementations=implementation_metrics,
            quality_gates=quality_metrics,
            performance=performance,
            value_analysis=value_analysis,
        )

    def _identify_bottlenecks(
        self,
        average_duration: float,
        attempted: int,
        success_rate: float,
        quality: list[QualityGateResult],
    ) -> list[str]:
        bottlenecks: list[str] = []

        if average_duration > self.config.max_average_duration_ms:
            minutes = self.config.max_average_duration_ms / 60000
            bottlenecks.append(f"Implementation duration exceeds {minutes:g} minutes on average")

        if attempted and success_rate < self.config.min_success_rate:
            bottlenecks.append(
                f"Implementation success rate below {self.config.min_success_rate:g}%"
            )

        if quality:
            failure_rate = sum(1 for q in quality if not q.passed) / len(quality) * 100
            if failure_rate > self.config.max_quality_failure_rate:
                bottlenecks.append(
                    f"Quality gate failure rate above {self.config.max_quality_failure_rate:g}%"
                )

        return bottlenecks

    def feedback_records(self) -> list[Bounty]:
        """Records updated with this session's implementation outcomes.

        Feed these into the next session's OrganizationHistoryTracker.build().
        The latest outcome wins when a record was attempted more than once.
        """
        with self._lock:
            outcomes = list(self._outcomes)

        latest: dict[str, ImplementationOutcome] = {}
        for outcome in outcomes:
            latest[outcome.bounty.id] = outcome

        return [
            o.bounty.with_implementation_outcome(
                o.success, completed_at=datetime.fromtimestamp(o.finished_at)
            )
            for o in latest.values()
        ]

    def save_metrics(self, metrics: SessionMetrics | None = None) -> Path | None:
        """Write metrics JSON to the configured output path if saving is enabled."""
        if not self.config.save_metrics_to_file:
            return None
        try:
            return save_metrics(metrics or self.generate_metrics(), self.config.metrics_output_path)
        except OSError as e:
            logger.error(f"Failed to save metrics: {e}")
            return None

    def print_summary(self, metrics: SessionMetrics | None = None) -> None:
        """Render a console summary of the session."""
        print_summary(metrics or self.generate_metrics())
