"""Tests for environment-based settings."""

import pytest

from range_balancer.config import BalancerSettings, load_settings
from range_balancer.exceptions import ConfigurationError
from range_balancer.types import SplitStrategy, Weights


class TestBalancerSettings:
    """Tests for BalancerSettings."""

    def test_defaults(self, monkeypatch):
        """Defaults match the reference weights."""
        for name in ("CPU_WEIGHT", "SPLIT_STRATEGY", "IMBALANCE_THRESHOLD"):
            monkeypatch.delenv(f"RANGE_BALANCER_{name}", raising=False)

        settings = BalancerSettings()

        assert settings.weights() == Weights(0.5, 0.5, 0.3, 0.1, 1.0)
        assert settings.imbalance_threshold == 0.1
        assert settings.split_strategy is SplitStrategy.FIRST_CHARACTER

    def test_environment_overrides(self, monkeypatch):
        """RANGE_BALANCER_ variables override defaults."""
        monkeypatch.setenv("RANGE_BALANCER_CPU_WEIGHT", "2.0")
        monkeypatch.setenv("RANGE_BALANCER_IMBALANCE_THRESHOLD", "0.25")
        monkeypatch.setenv("RANGE_BALANCER_SPLIT_STRATEGY", "lexicographic")

        settings = BalancerSettings()

        assert settings.weights().cpu_weight == 2.0
        assert settings.imbalance_threshold == 0.25
        assert settings.split_strategy is SplitStrategy.LEXICOGRAPHIC


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_returns_settings(self, monkeypatch):
        monkeypatch.setenv("RANGE_BALANCER_MEMORY_WEIGHT", "0.75")
        assert load_settings().memory_weight == 0.75

    def test_invalid_values_raise_configuration_error(self, monkeypatch):
        """Every bad variable is reported under its environment name."""
        monkeypatch.setenv("RANGE_BALANCER_CPU_WEIGHT", "-1")
        monkeypatch.setenv("RANGE_BALANCER_SPLIT_STRATEGY", "random")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        assert len(exc_info.value.errors) == 2
        assert any(e.startswith("RANGE_BALANCER_CPU_WEIGHT: ") for e in exc_info.value.errors)
        assert str(exc_info.value).startswith("Invalid settings: ")
