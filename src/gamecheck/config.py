"""Configuration management for gamecheck using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gamecheck.models import Grade
from gamecheck.rules.constants import (
    DEFAULT_MAX_ARTIFACT_BYTES,
    GRADE_THRESHOLDS,
    REFERENCE_TOTAL,
    REPORT_PASS_THRESHOLD,
)

CONFIG_FILE_NAME = ".gamecheck.json"


class ReportFormat(str, Enum):
    """Report output formats."""
    TEXT = "text"
    JSON = "json"
    TABLE = "table"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class GradeThreshold(BaseModel):
    """Minimum score (on the 130-point reference) for a grade."""
    grade: Grade
    min_score: int = Field(alias="minScore")

    model_config = ConfigDict(populate_by_name=True)


class ScoringConfig(BaseModel):
    """Scoring configuration section."""
    pass_threshold: int = Field(alias="passThreshold", default=REPORT_PASS_THRESHOLD)
    grade_thresholds: list[GradeThreshold] = Field(
        alias="gradeThresholds",
        default_factory=lambda: [
            GradeThreshold(grade=Grade(grade), min_score=score) for grade, score in GRADE_THRESHOLDS
        ],
    )

    @field_validator("pass_threshold")
    @classmethod
    def validate_pass_threshold(cls, v):
        if not (0 <= v <= REFERENCE_TOTAL):
            raise ValueError(f"pass_threshold must be between 0-{REFERENCE_TOTAL}, got: {v}")
        return v

    @field_validator("grade_thresholds")
    @classmethod
    def validate_grade_thresholds(cls, v):
        """Thresholds must be strictly descending so grading stays monotonic."""
        scores = [item.min_score for item in v]
        if any(later >= earlier for earlier, later in zip(scores, scores[1:])):
            raise ValueError(f"grade_thresholds must be strictly descending, got: {scores}")
        if any(grade.grade == Grade.F for grade in v):
            raise ValueError("grade F is the fallback and cannot have a threshold")
        return v

    def threshold_table(self) -> list[tuple[str, int]]:
        return [(item.grade.value, item.min_score) for item in self.grade_thresholds]

    model_config = ConfigDict(populate_by_name=True)


class LimitsConfig(BaseModel):
    """Input limits section."""
    max_artifact_bytes: int = Field(alias="maxArtifactBytes", default=DEFAULT_MAX_ARTIFACT_BYTES)

    @field_validator("max_artifact_bytes")
    @classmethod
    def validate_max_artifact_bytes(cls, v):
        if v < 1:
            raise ValueError("max_artifact_bytes must be >= 1")
        return v

    model_config = ConfigDict(populate_by_name=True)


class ReportConfig(BaseModel):
    """Report configuration section."""
    format: ReportFormat = ReportFormat.TEXT
    show_categories: bool = Field(alias="showCategories", default=True)

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class GamecheckConfig(BaseModel):
    """Complete gamecheck configuration model."""
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> GamecheckConfig:
    """Load scoring, limits, report and logging settings.

    An explicit path that does not exist is not an error: validation runs
    with the built-in rule table defaults, the same as having no config file.

    Args:
        config_path: Config file to read. If None, the nearest .gamecheck.json
                    from the working directory upwards is used

    Returns:
        GamecheckConfig: Validated configuration

    Raises:
        ValueError: If the file is not JSON or a setting is out of range
    """
    if config_path is None:
        # Search for .gamecheck.json in current directory and parents
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if not config_path or not config_path.exists():
        # Zero-config: thresholds and weights come from the rule tables
        return create_default_config()

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e

    try:
        return GamecheckConfig.model_validate(config_data)
    except ValidationError as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest .gamecheck.json at or above start_dir.

    A game directory can carry its own thresholds while sharing a config
    at the repository root with its siblings.
    """
    current = Path(start_dir or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        config_file = directory / CONFIG_FILE_NAME
        if config_file.is_file():
            return config_file

    return None


def create_default_config() -> GamecheckConfig:
    return GamecheckConfig()
