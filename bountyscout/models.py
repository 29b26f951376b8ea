"""Pydantic models for bounty records and evaluations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from bountyscout.errors import RecordValidationError

logger = logging.getLogger(__name__)

EvaluationStatus = Literal["not_evaluated", "in_progress", "evaluated", "evaluation_failed"]
GoNoGo = Literal["go", "no-go", "caution", "pending"]
Verdict = Literal["go", "no-go", "caution"]
RiskLevel = Literal["low", "medium", "high"]
ImplementationStatus = Literal["not_started", "in_progress", "completed", "failed"]
RiskTolerance = Literal["conservative", "moderate", "aggressive"]


class Reward(BaseModel):
    """Monetary reward in minor currency units (cents)."""

    amount: int = Field(..., ge=0)
    currency: str = "USD"
    formatted: str | None = None

    model_config = ConfigDict(frozen=True)


class Organization(BaseModel):
    """Organization that owns a bounty."""

    handle: str = Field(..., min_length=1)
    name: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def display_name(self) -> str:
        return self.name or self.handle


class Task(BaseModel):
    """The issue behind a bounty."""

    title: str
    body: str = ""
    url: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class ImplementationResult(BaseModel):
    """Outcome flags recorded after an implementation attempt."""

    tests_passing: bool = False
    requirements_met: bool = False
    code_quality_validated: bool = False
    ready_for_submission: bool = False

    model_config = ConfigDict(frozen=True)


class InternalTracking(BaseModel):
    """Pipeline tracking block attached to every record."""

    evaluation_status: EvaluationStatus = "not_evaluated"
    go_no_go: GoNoGo = "pending"
    complexity_score: int | None = Field(default=None, ge=1, le=10)
    success_probability: float | None = Field(default=None, ge=0, le=100)
    evaluation_confidence: float | None = Field(default=None, ge=0, le=100)
    risk_level: RiskLevel | None = None
    red_flags: list[str] = Field(default_factory=list)
    estimated_timeline: str | None = None
    notes: str | None = None
    last_evaluated: datetime | None = None

    implementation_status: ImplementationStatus | None = None
    implementation_result: ImplementationResult | None = None
    implementation_completed_at: datetime | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @model_validator(mode="after")
    def _check_readiness(self) -> InternalTracking:
        ready = bool(self.implementation_result and self.implementation_result.ready_for_submission)
        if ready and self.implementation_status != "completed":
            raise ValueError(
                "ready_for_submission is set but implementation_status is "
                f"'{self.implementation_status}'"
            )
        return self

    @property
    def is_successful_implementation(self) -> bool:
        """Completed and flagged ready for submission."""
        return bool(
            self.implementation_status == "completed"
            and self.implementation_result
            and self.implementation_result.ready_for_submission
        )


class Evaluation(BaseModel):
    """An evaluation produced upstream of the decision engine."""

    go_no_go: Verdict = "caution"
    complexity_score: int = Field(default=5, ge=1, le=10)
    success_probability: float = Field(default=50, ge=0, le=100)
    confidence: float = Field(default=50, ge=0, le=100)
    risk_level: RiskLevel = "medium"
    red_flags: list[str] = Field(default_factory=list)
    estimated_timeline: str = "Unknown"
    notes: str = ""

    model_config = ConfigDict(frozen=True)


class Bounty(BaseModel):
    """A bounty record as handed over by the fetch layer."""

    id: str = Field(..., min_length=1)
    status: str = "open"
    reward: Reward
    org: Organization
    task: Task
    internal: InternalTracking = Field(default_factory=InternalTracking)

    model_config = ConfigDict(frozen=True, extra="allow")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Upstream APIs hand out numeric ids for some sources
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def title(self) -> str:
        return self.task.title

    @property
    def body(self) -> str:
        return self.task.body

    @property
    def reward_amount(self) -> int:
        return self.reward.amount

    @property
    def org_handle(self) -> str:
        return self.org.handle

    def with_tracking(self, **changes: Any) -> Bounty:
        """Return a copy with the tracking block updated and re-validated."""
        data = self.internal.model_dump()
        data.update(changes)
        try:
            internal = InternalTracking.model_validate(data)
        except ValidationError as e:
            raise RecordValidationError(self.id, _format_errors(e)) from e
        return self.model_copy(update={"internal": internal})

    def with_evaluation(self, evaluation: Evaluation, evaluated_at: datetime | None = None) -> Bounty:
        """Apply an upstream evaluation to the tracking block."""
        return self.with_tracking(
            evaluation_status="evaluated",
            go_no_go=evaluation.go_no_go,
            complexity_score=evaluation.complexity_score,
            success_probability=evaluation.success_probability,
            evaluation_confidence=evaluation.confidence,
            risk_level=evaluation.risk_level,
            red_flags=list(evaluation.red_flags),
            estimated_timeline=evaluation.estimated_timeline,
            notes=evaluation.notes,
            last_evaluated=evaluated_at or datetime.now(),
        )

    def with_implementation_outcome(
        self, success: bool, completed_at: datetime | None = None
    ) -> Bounty:
        """Record an implementation outcome with consistent status and readiness."""
        if success:
            return self.with_tracking(
                implementation_status="completed",
                implementation_result=ImplementationResult(
                    tests_passing=True,
                    requirements_met=True,
                    code_quality_validated=True,
                    ready_for_submission=True,
                ),
                implementation_completed_at=completed_at or datetime.now(),
            )
        return self.with_tracking(
            implementation_status="failed",
            implementation_result=ImplementationResult(),
        )


def _format_errors(error: ValidationError) -> list[str]:
    messages: list[str] = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "record"
        messages.append(f"{location}: {item['msg']}")
    return messages


def parse_bounty(data: Mapping[str, Any] | Bounty) -> Bounty:
    """Validate a raw record into a Bounty.

    Args:
        data: Parsed JSON record, or an already validated Bounty.

    Returns:
        The validated record.

    Raises:
        RecordValidationError: If required fields are missing or an
            invariant of the tracking block is broken.
    """
    if isinstance(data, Bounty):
        return data
    if not isinstance(data, Mapping):
        raise RecordValidationError(None, [f"record must be a mapping, got {type(data).__name__}"])

    record_id = data.get("id")
    try:
        bounty = Bounty.model_validate(dict(data))
    except ValidationError as e:
        raise RecordValidationError(
            str(record_id) if record_id is not None else None, _format_errors(e)
        ) from e

    internal = bounty.internal
    if internal.go_no_go == "go" and internal.evaluation_status != "evaluated":
        logger.warning(
            "Record %s is rated go but evaluation_status is %r; "
            "it will not pass the decision gate",
            bounty.id,
            internal.evaluation_status,
        )
    if internal.implementation_status == "completed" and not internal.is_successful_implementation:
        logger.debug(
            "Record %s is completed but not ready for submission; not counted as a success",
            bounty.id,
        )
    return bounty
