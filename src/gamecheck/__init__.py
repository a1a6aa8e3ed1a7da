"""gamecheck - validation and scoring engine for generated sensor games.

gamecheck scores a generated game artifact (HTML with inline script) for
structural completeness, SessionSDK integration, script defects and genre fit,
and renders a stable findings report.

Basic usage:
    from gamecheck import validate_artifact

    result = validate_artifact(markup, genre="physics")
    print(result.score, result.grade.value, result.is_valid)
"""

__version__ = "0.1.0"
__author__ = "gamecheck contributors"
__description__ = "Validation and scoring engine for generated sensor games"

from gamecheck.config import GamecheckConfig, load_config
from gamecheck.engine import ArtifactValidator, validate_artifact
from gamecheck.models import Category, Grade, ValidationRequest, ValidationResult
from gamecheck.report import render_report
from gamecheck.rules import PIPELINE_PASS_THRESHOLD, REPORT_PASS_THRESHOLD

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "ArtifactValidator",
    "Category",
    "GamecheckConfig",
    "Grade",
    "PIPELINE_PASS_THRESHOLD",
    "REPORT_PASS_THRESHOLD",
    "ValidationRequest",
    "ValidationResult",
    "load_config",
    "render_report",
    "validate_artifact",
]
