"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class MatchingConfig(BaseModel):
    """Scoring and inclusion settings for the matching engine."""

    inclusion_threshold: int = Field(
        55, ge=0, le=1000, description="Minimum score a candidate needs to be stored"
    )
    score_cap: Optional[int] = Field(
        None, ge=1, description="Clamp stored scores to this value (unset = uncapped)"
    )
    interest_categories: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Interest category -> fields of study; merged over the built-in taxonomy",
    )

    @field_validator("interest_categories")
    @classmethod
    def normalize_categories(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        """Strip keys and fields, dropping blank fields and categories left empty."""
        normalized: Dict[str, List[str]] = {}
        for key, fields in v.items():
            stripped_key = key.strip().lower()
            if not stripped_key:
                raise ValueError("Interest category names cannot be empty")
            cleaned = [f.strip() for f in fields if f and f.strip()]
            if cleaned:
                normalized[stripped_key] = cleaned
        return normalized

    @model_validator(mode="after")
    def validate_cap_against_threshold(self):
        """A cap below the threshold would make every stored score fall under it."""
        if self.score_cap is not None and self.score_cap < self.inclusion_threshold:
            raise ValueError(
                f"score_cap ({self.score_cap}) cannot be lower than "
                f"inclusion_threshold ({self.inclusion_threshold})"
            )
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the Scholarship Matcher."""

    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Matching engine settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
