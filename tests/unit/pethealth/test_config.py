"""
Tests for configuration management in `pethealth/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level and format coercion
- Scoring weight overrides and validation
- Notification window parsing
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from pethealth.config import (
    AppConfig,
    LoggingConfig,
    NotificationConfig,
    ScoringConfig,
    get_config,
    load_config_from_env,
)
from pethealth.logging import configure_logging

_ENV_KEYS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "WEIGHT_VACCINATION",
    "WEIGHT_PROFILE_COMPLETENESS",
    "SUGGESTED_STATUS_THRESHOLD",
    "VACCINE_REMINDER_DAYS",
    "MAX_CONCURRENT_ASSESSMENTS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from built-in defaults with an empty config cache."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "dev")

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.scoring == ScoringConfig()
    assert config.notifications == NotificationConfig()
    assert config.assessment.max_concurrent_assessments == 10


def test_production_defaults_to_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")

    config = load_config_from_env()

    assert config.debug is False
    assert config.logging.format == "json"


def test_log_format_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("LOG_FORMAT", "Console")

    assert load_config_from_env().logging.format == "console"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    assert load_config_from_env().logging.level == "INFO"

    # Known level should pass through
    monkeypatch.setenv("LOG_LEVEL", "error")
    assert load_config_from_env().logging.level == "ERROR"


def test_scoring_overrides_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEIGHT_VACCINATION", "0.25")
    monkeypatch.setenv("WEIGHT_PROFILE_COMPLETENESS", "0.15")
    monkeypatch.setenv("SUGGESTED_STATUS_THRESHOLD", "60")

    scoring = load_config_from_env().scoring

    assert scoring.vaccination_weight == 0.25
    assert scoring.profile_completeness_weight == 0.15
    assert scoring.suggested_status_threshold == 60


def test_weights_that_do_not_sum_to_one_fail_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEIGHT_VACCINATION", "0.50")

    with pytest.raises(ValueError, match="must sum to 1.0"):
        load_config_from_env()


def test_scoring_weights_mapping() -> None:
    weights = ScoringConfig().weights()

    assert set(weights) == {
        "vaccination",
        "body_condition",
        "veterinary_visit",
        "medication_adherence",
        "age_factor",
        "profile_completeness",
    }
    assert sum(weights.values()) == pytest.approx(1.0)


def test_vaccine_reminder_days_parsing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VACCINE_REMINDER_DAYS", "1, 14,1,0,")

    config = load_config_from_env()

    assert config.notifications.vaccine_reminder_days == [14, 1, 0]


def test_negative_reminder_days_are_rejected() -> None:
    with pytest.raises(ValueError, match="cannot be negative"):
        NotificationConfig(vaccine_reminder_days=[7, -1])


def test_max_concurrent_assessments_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_CONCURRENT_ASSESSMENTS", "0")

    with pytest.raises(ValueError):
        load_config_from_env()


def test_get_config_cache() -> None:
    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(environment="production", debug=True)


@pytest.mark.parametrize("log_format", ["json", "console"])
def test_configure_logging_accepts_both_formats(log_format: str) -> None:
    configure_logging(LoggingConfig(level="DEBUG", format=log_format))  # type: ignore[arg-type]
