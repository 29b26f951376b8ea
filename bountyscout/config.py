"""Configuration management for bountyscout.

Loads configuration from:
1. bountyscout.yaml in current directory
2. ~/.config/bountyscout/bountyscout.yaml
3. Environment variables (BOUNTYSCOUT_* prefix)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SignalsConfig(BaseModel):
    """Text signal extraction thresholds."""

    # Body shorter than this triggers the insufficient-detail flag
    min_body_length: int = 100
    # Body must be longer than this to count as well-defined
    well_defined_body_length: int = 200
    # Rewards below this (minor units) on implementation work are flagged
    low_reward_amount: int = 1000


class QuickScoringConfig(BaseModel):
    """Quick scorer constants."""

    base_complexity: int = 3
    base_probability: int = 70
    probability_per_complexity_point: int = 8
    critical_flag_penalty: int = 25
    flag_penalty: int = 10

    # Reward bonuses (minor currency units)
    medium_reward_amount: int = 5000
    high_reward_amount: int = 10000
    medium_reward_bonus: int = 10
    high_reward_bonus: int = 5

    # Looser than the decision engine thresholds
    go_probability: int = 50
    caution_probability: int = 30

    hours_per_complexity_point: int = 4
    min_confidence: int = 20
    max_confidence: int = 85


class ValueTier(BaseModel):
    """A reward bracket and its decision threshold."""

    min_value: int
    threshold: float


class ValueTiersConfig(BaseModel):
    """Value tiers, ordered by increasing minimum reward."""

    tier1: ValueTier = Field(default_factory=lambda: ValueTier(min_value=50000, threshold=60))
    tier2: ValueTier = Field(default_factory=lambda: ValueTier(min_value=100000, threshold=55))
    tier3: ValueTier = Field(default_factory=lambda: ValueTier(min_value=150000, threshold=50))


class ComplexityAdjustmentsConfig(BaseModel):
    """Complexity bands for the decision engine."""

    low_max_complexity: int = 4
    low_bonus_points: float = 5
    medium_max_complexity: int = 7
    medium_bonus_points: float = 0
    high_penalty_points: float = 10


class HistoryWeightingConfig(BaseModel):
    """How much organization history moves the score."""

    min_attempts: int = 3
    success_rate_multiplier: float = 0.2
    max_adjustment: float = 10


class RiskToleranceConfig(BaseModel):
    """Extra score each tolerance level demands before implementing."""

    conservative: float = 15
    moderate: float = 0
    aggressive: float = -10


class MinimumRequirementsConfig(BaseModel):
    """Hard gate every record must pass before scoring."""

    evaluation_status: str = "evaluated"
    go_no_go_status: str = "go"
    min_confidence: float = 50


class DecisionConfig(BaseModel):
    """Decision engine configuration."""

    value_tiers: ValueTiersConfig = Field(default_factory=ValueTiersConfig)
    complexity: ComplexityAdjustmentsConfig = Field(default_factory=ComplexityAdjustmentsConfig)
    history: HistoryWeightingConfig = Field(default_factory=HistoryWeightingConfig)
    risk_tolerance: RiskToleranceConfig = Field(default_factory=RiskToleranceConfig)
    minimum_requirements: MinimumRequirementsConfig = Field(
        default_factory=MinimumRequirementsConfig
    )
    default_risk_tolerance: str = "moderate"


class AnalyticsConfig(BaseModel):
    """Session analytics configuration."""

    track_quality_metrics: bool = True
    enable_realtime_logging: bool = True
    save_metrics_to_file: bool = True
    metrics_output_path: Path = Field(default=Path("./output/analytics"))

    # Bottleneck rules
    max_average_duration_ms: int = 600_000
    min_success_rate: float = 50.0
    max_quality_failure_rate: float = 30.0

    # Rough cost model
    cost_per_attempt: float = 0.50
    baseline_duration_ms: int = 300_000

    common_blocker_limit: int = 5


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Path | None = None


class Config(BaseSettings):
    """Main configuration for bountyscout."""

    model_config = SettingsConfigDict(
        env_prefix="BOUNTYSCOUT_",
        env_nested_delimiter="__",
    )

    signals: SignalsConfig = Field(default_factory=SignalsConfig)
    quick: QuickScoringConfig = Field(default_factory=QuickScoringConfig)
    decision: DecisionConfig = Field(default_factory=DecisionConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Path | None:
    """Find the configuration file.

    Searches in order:
    1. ./bountyscout.yaml
    2. ~/.config/bountyscout/bountyscout.yaml
    """
    locations = [
        Path.cwd() / "bountyscout.yaml",
        Path.home() / ".config" / "bountyscout" / "bountyscout.yaml",
    ]

    for path in locations:
        if path.exists():
            return path

    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        path: Explicit config file. Falls back to the search locations.

    Returns:
        Config: The loaded configuration.
    """
    config_data: dict[str, Any] = {}

    config_file = path or find_config_file()
    if config_file:
        with open(config_file) as f:
            config_data = yaml.safe_load(f) or {}

    # Environment overrides for common settings
    env_overrides = {
        "BOUNTYSCOUT_RISK_TOLERANCE": ("decision", "default_risk_tolerance"),
        "BOUNTYSCOUT_METRICS_PATH": ("analytics", "metrics_output_path"),
        "BOUNTYSCOUT_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, (section, key) in env_overrides.items():
        value = os.environ.get(env_var)
        if value:
            config_data.setdefault(section, {})[key] = value

    return Config(**config_data)


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The configuration instance.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
