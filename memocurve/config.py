"""
Scheduler configuration.

SchedulerConfig is validated once at load time so the scheduling math
never sees an out-of-range target retention or an inconsistent batch size.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


# Load environment
load_dotenv()

# Defaults
DEFAULT_MAX_DAILY_REVIEW = 100
DEFAULT_SESSION_SIZE = 10
DEFAULT_TARGET_RETENTION = 0.9
DEFAULT_DIFFICULTY_BIAS = 1.0
DEFAULT_PRACTICE_SIZE = 15


class ConfigError(ValueError):
    """Raised when the scheduler configuration is invalid."""


class SchedulerConfig(BaseModel):
    """Process-wide scheduling configuration (read-only to the engine)."""
    model_config = ConfigDict(frozen=True)

    max_daily_review: int = Field(default=DEFAULT_MAX_DAILY_REVIEW, gt=0, description="Daily review ceiling")
    session_size: int = Field(default=DEFAULT_SESSION_SIZE, gt=0, description="Minimum review batch size")
    target_retention: float = Field(default=DEFAULT_TARGET_RETENTION, gt=0.0, lt=1.0, description="Desired recall probability at the due date")
    difficulty_bias: float = Field(default=DEFAULT_DIFFICULTY_BIAS, gt=0.0, description="Scale of the practice-mode difficulty nudge")
    practice_size: int = Field(default=DEFAULT_PRACTICE_SIZE, gt=0, description="Items sampled for a practice session")

    @model_validator(mode="after")
    def _check_daily_ceiling(self) -> "SchedulerConfig":
        if self.max_daily_review < self.session_size:
            raise ValueError(
                f"max_daily_review ({self.max_daily_review}) must be >= session_size ({self.session_size})"
            )
        return self


_ENV_FIELDS = {
    "max_daily_review": ("MEMOCURVE_MAX_DAILY_REVIEW", int),
    "session_size": ("MEMOCURVE_SESSION_SIZE", int),
    "target_retention": ("MEMOCURVE_TARGET_RETENTION", float),
    "difficulty_bias": ("MEMOCURVE_DIFFICULTY_BIAS", float),
    "practice_size": ("MEMOCURVE_PRACTICE_SIZE", int),
}


def load_config(**overrides) -> SchedulerConfig:
    """
    Load the scheduler configuration from environment variables.

    Unset variables fall back to the defaults. Keyword overrides win
    over the environment.

    Raises:
        ConfigError: If a value cannot be parsed or fails validation
    """
    values = {}
    for name, (env_var, cast) in _ENV_FIELDS.items():
        raw = os.getenv(env_var)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[name] = cast(raw)
        except ValueError:
            raise ConfigError(f"{env_var} must be a {cast.__name__}, got {raw!r}") from None
    values.update(overrides)

    try:
        return SchedulerConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid scheduler configuration: {exc}") from exc
