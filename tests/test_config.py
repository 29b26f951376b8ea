"""Tests for configuration loading."""

import logging

import pytest
import yaml

from bountyscout.config import Config, get_config, load_config, reset_config
from bountyscout.console import setup_logging


class TestDefaults:
    """Tests for built-in defaults."""

    def test_decision_defaults(self) -> None:
        config = get_config()

        assert config.decision.default_risk_tolerance == "moderate"
        assert config.decision.value_tiers.tier1.min_value == 50000
        assert config.decision.value_tiers.tier3.min_value == 150000
        assert config.decision.value_tiers.tier3.threshold == 50
        assert config.decision.minimum_requirements.min_confidence == 50
        assert config.decision.history.min_attempts == 3

    def test_quick_defaults(self) -> None:
        config = get_config()

        assert config.quick.go_probability == 50
        assert config.quick.caution_probability == 30
        assert config.signals.min_body_length == 100

    def test_global_instance_cached(self) -> None:
        assert get_config() is get_config()

    def test_reset(self) -> None:
        first = get_config()
        reset_config()
        assert get_config() is not first


class TestLoadConfig:
    """Tests for YAML and environment loading."""

    def test_yaml_in_cwd(self, tmp_path) -> None:
        (tmp_path / "bountyscout.yaml").write_text(
            yaml.safe_dump(
                {
                    "decision": {"default_risk_tolerance": "conservative"},
                    "quick": {"go_probability": 60},
                }
            )
        )
        config = get_config()

        assert config.decision.default_risk_tolerance == "conservative"
        assert config.quick.go_probability == 60
        # Unset values keep their defaults
        assert config.quick.caution_probability == 30

    def test_yaml_in_home(self, tmp_path, monkeypatch) -> None:
        home = tmp_path / "home"
        config_dir = home / ".config" / "bountyscout"
        config_dir.mkdir(parents=True)
        (config_dir / "bountyscout.yaml").write_text("signals:\n  min_body_length: 40\n")
        monkeypatch.setenv("HOME", str(home))

        assert load_config().signals.min_body_length == 40

    def test_explicit_path(self, temp_dir) -> None:
        path = temp_dir / "custom.yaml"
        path.write_text("analytics:\n  cost_per_attempt: 1.25\n")

        assert load_config(path).analytics.cost_per_attempt == 1.25

    def test_empty_yaml(self, tmp_path) -> None:
        (tmp_path / "bountyscout.yaml").write_text("")
        assert load_config().decision.default_risk_tolerance == "moderate"

    def test_env_overrides(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("BOUNTYSCOUT_RISK_TOLERANCE", "aggressive")
        monkeypatch.setenv("BOUNTYSCOUT_METRICS_PATH", str(tmp_path / "metrics"))
        monkeypatch.setenv("BOUNTYSCOUT_LOG_LEVEL", "DEBUG")
        config = load_config()

        assert config.decision.default_risk_tolerance == "aggressive"
        assert config.analytics.metrics_output_path == tmp_path / "metrics"
        assert config.logging.level == "DEBUG"

    def test_nested_env(self, monkeypatch) -> None:
        monkeypatch.setenv("BOUNTYSCOUT_SIGNALS__LOW_REWARD_AMOUNT", "2500")
        assert Config().signals.low_reward_amount == 2500


class TestSetupLogging:
    """Tests for logging setup."""

    @pytest.fixture
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield root
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_verbose(self, restore_root_logger) -> None:
        setup_logging(verbose=True)
        assert restore_root_logger.level == logging.DEBUG

    def test_level_from_config(self, monkeypatch, restore_root_logger) -> None:
        monkeypatch.setenv("BOUNTYSCOUT_LOG_LEVEL", "warning")
        setup_logging()
        assert restore_root_logger.level == logging.WARNING

    def test_log_file(self, tmp_path, restore_root_logger) -> None:
        log_file = tmp_path / "bountyscout.log"
        (tmp_path / "bountyscout.yaml").write_text(f"logging:\n  file: {log_file}\n")
        setup_logging()
        logging.getLogger("bountyscout.test").warning("written to file")

        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()
