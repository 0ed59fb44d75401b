"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Scoring functions default to the built-in values, never the environment,
  so a score is reproducible from its inputs alone
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

_WEIGHT_TOLERANCE = 1e-6


class ScoringConfig(BaseModel):
    """Component weights and thresholds for the health score."""

    vaccination_weight: float = Field(default=0.30, ge=0.0, le=1.0)
    body_condition_weight: float = Field(default=0.20, ge=0.0, le=1.0)
    veterinary_visit_weight: float = Field(default=0.15, ge=0.0, le=1.0)
    medication_weight: float = Field(default=0.15, ge=0.0, le=1.0)
    age_factor_weight: float = Field(default=0.10, ge=0.0, le=1.0)
    profile_completeness_weight: float = Field(default=0.10, ge=0.0, le=1.0)

    suggested_status_threshold: int = Field(
        default=50, ge=0, le=100, description="Scores below this suggest a check-up"
    )

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> "ScoringConfig":
        total = sum(self.weights().values())
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise ValueError(f"component weights must sum to 1.0, got {total:.4f}")
        return self

    def weights(self) -> dict[str, float]:
        return {
            "vaccination": self.vaccination_weight,
            "body_condition": self.body_condition_weight,
            "veterinary_visit": self.veterinary_visit_weight,
            "medication_adherence": self.medication_weight,
            "age_factor": self.age_factor_weight,
            "profile_completeness": self.profile_completeness_weight,
        }


class NotificationConfig(BaseModel):
    """Time windows for reminder-style notifications."""

    vaccine_reminder_days: list[int] = Field(
        default_factory=lambda: [7, 1, 0], description="Days before due date to remind"
    )
    medication_refill_days: int = Field(default=3, ge=0)
    appointment_window_hours: float = Field(
        default=24.0, gt=1.0, description="Remind when an appointment starts in this window"
    )
    score_drop_threshold: int = Field(default=10, gt=0, le=100)
    weight_nudge_days: int = Field(default=30, gt=0)

    @field_validator("vaccine_reminder_days")
    def validate_reminder_days(cls, v: list[int]) -> list[int]:
        if any(day < 0 for day in v):
            raise ValueError("vaccine reminder days cannot be negative")
        return sorted(set(v), reverse=True)


class AssessmentConfig(BaseModel):
    """Batch assessment tuning."""

    max_concurrent_assessments: int = Field(
        default=10, gt=0, description="Maximum number of pets assessed at once"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    assessment: AssessmentConfig = Field(default_factory=AssessmentConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _int_list(val: str) -> list[int]:
        return [int(part) for part in val.split(",") if part.strip()]

    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    scoring_config = ScoringConfig(
        vaccination_weight=float(os.getenv("WEIGHT_VACCINATION", "0.30")),
        body_condition_weight=float(os.getenv("WEIGHT_BODY_CONDITION", "0.20")),
        veterinary_visit_weight=float(os.getenv("WEIGHT_VETERINARY_VISIT", "0.15")),
        medication_weight=float(os.getenv("WEIGHT_MEDICATION", "0.15")),
        age_factor_weight=float(os.getenv("WEIGHT_AGE_FACTOR", "0.10")),
        profile_completeness_weight=float(os.getenv("WEIGHT_PROFILE_COMPLETENESS", "0.10")),
        suggested_status_threshold=int(os.getenv("SUGGESTED_STATUS_THRESHOLD", "50")),
    )

    notification_config = NotificationConfig(
        vaccine_reminder_days=_int_list(os.getenv("VACCINE_REMINDER_DAYS", "7,1,0")),
        medication_refill_days=int(os.getenv("MEDICATION_REFILL_DAYS", "3")),
        appointment_window_hours=float(os.getenv("APPOINTMENT_WINDOW_HOURS", "24")),
        score_drop_threshold=int(os.getenv("SCORE_DROP_THRESHOLD", "10")),
        weight_nudge_days=int(os.getenv("WEIGHT_NUDGE_DAYS", "30")),
    )

    assessment_config = AssessmentConfig(
        max_concurrent_assessments=int(os.getenv("MAX_CONCURRENT_ASSESSMENTS", "10")),
    )

    log_format = os.getenv("LOG_FORMAT", "console" if debug else "json").strip().lower()
    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if log_format == "console" else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        scoring=scoring_config,
        notifications=notification_config,
        assessment=assessment_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()
