"""Pipeline configuration."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "REPORT_VERDICT_"

# Defaults
DEFAULT_TOLERANCE_PERCENTAGE = 5.0
DEFAULT_MAX_ERRORS = 100

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class PipelineConfig(BaseModel):
    """Options recognised by every pipeline component."""

    model_config = ConfigDict(frozen=True)

    generate_placeholders: bool = True
    treat_setup_failures_as_failed: bool = True
    treat_teardown_failures_as_failed: bool = True
    tolerance_percentage: float = Field(default=DEFAULT_TOLERANCE_PERCENTAGE, ge=0, le=100)
    max_errors: int = Field(default=DEFAULT_MAX_ERRORS, ge=1)

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "PipelineConfig":
        """Build a config from REPORT_VERDICT_* environment variables.

        A .env file is loaded first (without overriding variables already
        set). Unset variables keep their defaults.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        load_dotenv(dotenv_path)
        values: dict[str, object] = {}
        for name, field in cls.model_fields.items():
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            raw = raw.strip()
            if field.annotation is bool:
                values[name] = raw.lower() in _TRUE_VALUES
            else:
                values[name] = raw
        return cls(**values)
