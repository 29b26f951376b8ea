"""Per-organization implementation history.

Built once per session from the full record corpus and read-only after
that. Rebuild it to pick up new outcomes; there are no incremental updates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bountyscout.models import Bounty, parse_bounty

logger = logging.getLogger(__name__)

DEFAULT_AVERAGE_COMPLEXITY = 5.0


@dataclass(frozen=True)
class OrganizationHistory:
    """Past performance for one organization."""

    name: str
    total_attempts: int = 0
    successful_implementations: int = 0
    success_rate: float = 0.0  # 0-100
    average_complexity: float = DEFAULT_AVERAGE_COMPLEXITY
    total_value: int = 0
    last_success_date: datetime | None = None


@dataclass
class _Accumulator:
    attempts: int = 0
    successes: int = 0
    complexity_sum: int = 0
    complexity_count: int = 0
    total_value: int = 0
    last_success_date: datetime | None = None

    def add(self, bounty: Bounty) -> None:
        internal = bounty.internal
        self.total_value += bounty.reward_amount

        if internal.implementation_status is not None:
            self.attempts += 1
            if internal.is_successful_implementation:
                self.successes += 1
                completed_at = internal.implementation_completed_at
                if completed_at and (
                    self.last_success_date is None or completed_at > self.last_success_date
                ):
                    self.last_success_date = completed_at

        if internal.complexity_score:
            self.complexity_sum += internal.complexity_score
            self.complexity_count += 1

    def finish(self, name: str) -> OrganizationHistory:
        success_rate = self.successes / self.attempts * 100 if self.attempts else 0.0
        average_complexity = (
            self.complexity_sum / self.complexity_count
            if self.complexity_count
            else DEFAULT_AVERAGE_COMPLEXITY
        )
        return OrganizationHistory(
            name=name,
            total_attempts=self.attempts,
            successful_implementations=self.successes,
            success_rate=success_rate,
            average_complexity=average_complexity,
            total_value=self.total_value,
            last_success_date=self.last_success_date,
        )


class OrganizationHistoryTracker(Mapping[str, OrganizationHistory]):
    """Read-only snapshot of organization history keyed by org handle."""

    def __init__(self, histories: Mapping[str, OrganizationHistory] | None = None) -> None:
        self._histories: dict[str, OrganizationHistory] = dict(histories or {})

    @classmethod
    def build(cls, corpus: Iterable[Bounty | Mapping[str, Any]]) -> OrganizationHistoryTracker:
        """Aggregate history from every record in a single pass.

        Args:
            corpus: Records, validated or raw mappings.

        Returns:
            A new tracker.

        Raises:
            RecordValidationError: If a raw record fails validation.
        """
        accumulators: dict[str, _Accumulator] = {}
        for item in corpus:
            bounty = parse_bounty(item)
            accumulators.setdefault(bounty.org_handle, _Accumulator()).add(bounty)

        tracker = cls({name: acc.finish(name) for name, acc in accumulators.items()})
        for history in tracker.values():
            logger.debug(
                "%s: %d attempts, %.1f%% success",
                history.name,
                history.total_attempts,
                history.success_rate,
            )
        logger.info("Organization history built for %d organizations", len(tracker))
        return tracker

    @classmethod
    def build_from_index(cls, index: Mapping[str, Any]) -> OrganizationHistoryTracker:
        """Build from a bounty index with an ``organizations[].bounties`` layout."""
        records: list[Any] = []
        for org in index.get("organizations", []):
            records.extend(org.get("bounties", []))
        return cls.build(records)

    def __getitem__(self, name: str) -> OrganizationHistory:
        return self._histories[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._histories)

    def __len__(self) -> int:
        return len(self._histories)

    def history_for(self, name: str) -> OrganizationHistory:
        """History for an organization, empty if it was never seen."""
        return self._histories.get(name) or OrganizationHistory(name=name)
