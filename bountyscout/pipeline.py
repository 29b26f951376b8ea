"""Batch screening of bounty records.

Ties the pieces together for one session: history is built once from the
corpus, each record is optionally pre-filtered by the quick scorer, then
decided by the decision engine and tracked by analytics. A malformed
record is reported and skipped without affecting the rest of the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from bountyscout.analytics.aggregator import PipelineAnalytics
from bountyscout.config import Config, get_config
from bountyscout.decision.engine import DecisionEngine, DecisionResult
from bountyscout.errors import RecordValidationError
from bountyscout.history import OrganizationHistoryTracker
from bountyscout.models import Bounty, parse_bounty
from bountyscout.scoring.quick import QuickResult, evaluate_quickly

logger = logging.getLogger(__name__)

RawRecord = Bounty | Mapping[str, Any]


@dataclass
class ScreenedRecord:
    """One record's path through the pipeline."""

    bounty: Bounty
    decision: DecisionResult
    quick_result: QuickResult | None = None


@dataclass
class BatchResult:
    """Everything produced by screen()."""

    screened: list[ScreenedRecord] = field(default_factory=list)
    failures: list[RecordValidationError] = field(default_factory=list)

    @property
    def selected(self) -> list[ScreenedRecord]:
        """Records the engine decided to implement."""
        return [s for s in self.screened if s.decision.should_implement]


class ScreeningPipeline:
    """Screen batches of records for one session."""

    def __init__(
        self,
        corpus: Iterable[RawRecord] = (),
        config: Config | None = None,
        analytics: PipelineAnalytics | None = None,
    ) -> None:
        """Build the session's history snapshot and collaborators.

        Args:
            corpus: Historical records used to build organization history.
                Malformed records are skipped with a warning.
            config: Configuration. Uses the global config if not provided.
            analytics: Session analytics. A new session is started if not provided.
        """
        self.config = config or get_config()

        valid: list[Bounty] = []
        for item in corpus:
            try:
                valid.append(parse_bounty(item))
            except RecordValidationError as e:
                logger.warning(f"Skipping invalid history record: {e}")

        self.history = OrganizationHistoryTracker.build(valid)
        self.engine = DecisionEngine(self.history, self.config.decision)
        self.analytics = analytics or PipelineAnalytics(
            self.config.analytics, self.config.decision.value_tiers
        )

    def screen_record(
        self,
        record: RawRecord,
        risk_tolerance: str | None = None,
        quick_evaluate: bool = False,
    ) -> ScreenedRecord:
        """Screen a single record.

        Args:
            record: Raw or validated record.
            risk_tolerance: Passed to the decision engine.
            quick_evaluate: Run the quick scorer first and use its result as
                the evaluation when the record has not been evaluated yet.

        Raises:
            RecordValidationError: If the record is malformed.
        """
        bounty = parse_bounty(record)
        quick_result = None

        if quick_evaluate and bounty.internal.evaluation_status != "evaluated":
            quick_result = evaluate_quickly(bounty, self.config)
            bounty = bounty.with_evaluation(quick_result.to_evaluation())

        decision = self.engine.decide(bounty, risk_tolerance)
        self.analytics.track_decision(bounty, decision)
        return ScreenedRecord(bounty=bounty, decision=decision, quick_result=quick_result)

    def screen(
        self,
        records: Iterable[RawRecord],
        risk_tolerance: str | None = None,
        quick_evaluate: bool = False,
    ) -> BatchResult:
        """Screen a batch, isolating per-record validation failures."""
        result = BatchResult()
        for record in records:
            try:
                result.screened.append(
                    self.screen_record(record, risk_tolerance, quick_evaluate)
                )
            except RecordValidationError as e:
                logger.warning(f"Skipping invalid record: {e}")
                result.failures.append(e)

        logger.info(
            "Screened %d records: %d selected, %d invalid",
            len(result.screened),
            len(result.selected),
            len(result.failures),
        )
        return result
