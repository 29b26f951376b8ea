"""Error types raised by bountyscout.

Gate failures in the decision engine are not errors; they come back as
skip results with reasoning.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class BountyScoutError(Exception):
    """Base class for bountyscout errors."""


@dataclass
class RecordValidationError(BountyScoutError):
    """A record is missing required fields or breaks a tracking invariant."""

    record_id: str | None
    errors: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        label = self.record_id or "<unknown>"
        return f"Invalid record {label}: " + "; ".join(self.errors)


class ConfigurationError(BountyScoutError):
    """Invalid settings or call options."""
