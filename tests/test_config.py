"""
Tests for scheduler configuration loading and validation.
"""

import pytest

from memocurve.config import ConfigError, SchedulerConfig, load_config


class TestLoadConfig:
    def test_defaults(self):
        config = load_config()
        assert config.max_daily_review == 100
        assert config.session_size == 10
        assert config.target_retention == 0.9
        assert config.difficulty_bias == 1.0
        assert config.practice_size == 15

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("MEMOCURVE_TARGET_RETENTION", "0.85")
        monkeypatch.setenv("MEMOCURVE_SESSION_SIZE", "20")
        config = load_config()
        assert config.target_retention == 0.85
        assert config.session_size == 20

    def test_blank_variable_uses_default(self, monkeypatch):
        monkeypatch.setenv("MEMOCURVE_SESSION_SIZE", "  ")
        assert load_config().session_size == 10

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("MEMOCURVE_PRACTICE_SIZE", "30")
        assert load_config(practice_size=5).practice_size == 5

    def test_unparseable_value(self, monkeypatch):
        monkeypatch.setenv("MEMOCURVE_MAX_DAILY_REVIEW", "lots")
        with pytest.raises(ConfigError):
            load_config()

    @pytest.mark.parametrize("overrides", [
        {"target_retention": 1.0},
        {"target_retention": 0.0},
        {"session_size": 0},
        {"difficulty_bias": -1.0},
        {"practice_size": 0},
        {"session_size": 50, "max_daily_review": 20},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ConfigError):
            load_config(**overrides)


class TestSchedulerConfig:
    def test_frozen(self):
        config = SchedulerConfig()
        with pytest.raises(Exception):
            config.session_size = 3

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
