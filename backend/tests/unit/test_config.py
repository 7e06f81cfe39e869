"""
Unit Tests for Configuration Management

Tests the Settings class and YAML configuration loading.
These tests verify:
- Environment variable loading
- Default value handling
- Property computation (reporting_tz)
- YAML configuration parsing
"""

import os
from unittest.mock import patch
from zoneinfo import ZoneInfo

from app.config import Settings, get_settings, load_yaml_config
from app.enums.analytics import ErrorCategory


class TestSettings:
    """Test suite for the Settings Pydantic model."""

    def test_default_values(self) -> None:
        """Settings should have sensible defaults when env vars are not set."""
        with patch.dict(os.environ, {}, clear=True):
            test_settings = Settings(_env_file=None)

            assert test_settings.APP_NAME == "Study Analytics"
            assert test_settings.DEBUG is False
            assert test_settings.ANALYTICS_TIMEZONE == "UTC"
            assert test_settings.DEFAULT_TOPIC == "General"
            assert test_settings.ACCURACY_WARNING_THRESHOLD == 60.0
            assert test_settings.ACCURACY_CRITICAL_THRESHOLD == 40.0
            assert test_settings.EXAM_WRONG_ANSWER_PENALTY == 0.25
            assert test_settings.STREAK_MILESTONES == [3, 7, 14, 30, 60, 100]

    def test_reporting_tz(self) -> None:
        """reporting_tz should resolve the configured IANA timezone."""
        test_settings = Settings(ANALYTICS_TIMEZONE="Europe/Istanbul")
        assert test_settings.reporting_tz == ZoneInfo("Europe/Istanbul")

    def test_env_variable_override(self) -> None:
        """Environment variables should override default values."""
        env_overrides = {
            "APP_NAME": "Custom App",
            "DEBUG": "true",
            "ANALYTICS_TIMEZONE": "America/New_York",
            "INACTIVITY_DAYS": "5",
            "STREAK_MILESTONES": "[5, 10]",
        }

        with patch.dict(os.environ, env_overrides, clear=True):
            test_settings = Settings(_env_file=None)

            assert test_settings.APP_NAME == "Custom App"
            assert test_settings.DEBUG is True
            assert test_settings.ANALYTICS_TIMEZONE == "America/New_York"
            assert test_settings.INACTIVITY_DAYS == 5
            assert test_settings.STREAK_MILESTONES == [5, 10]


class TestYamlConfigLoading:
    """Test suite for YAML configuration loading."""

    def test_load_yaml_config_returns_dict(self) -> None:
        """load_yaml_config should return a dictionary."""
        # Clear the cache to get fresh config
        load_yaml_config.cache_clear()
        config = load_yaml_config()

        assert isinstance(config, dict)

    def test_error_category_labels(self) -> None:
        """Every error category should have a display label."""
        load_yaml_config.cache_clear()
        config = load_yaml_config()

        if config:
            labels = config["error_categories"]
            for category in ErrorCategory:
                assert labels.get(category.value), f"Missing label: {category.value}"


class TestSettingsCaching:
    """Test suite for settings caching behavior."""

    def test_get_settings_returns_same_instance(self) -> None:
        """get_settings should return cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2
