"""Rule registry for artifact validation.

The registry is built once per process from the literal tables in
`constants` and shared read-only by every validation.
"""

from .constants import (
    CATEGORY_ORDER,
    CATEGORY_WEIGHTS,
    PIPELINE_PASS_THRESHOLD,
    REFERENCE_TOTAL,
    REPORT_PASS_THRESHOLD,
)
from .registry import (
    ElementRule,
    FeatureRule,
    GenreBundle,
    PatternRule,
    ResourceRule,
    RuleRegistry,
    RuleRegistryError,
    build_registry,
    get_registry,
)

__all__ = [
    "CATEGORY_ORDER",
    "CATEGORY_WEIGHTS",
    "PIPELINE_PASS_THRESHOLD",
    "REFERENCE_TOTAL",
    "REPORT_PASS_THRESHOLD",
    "ElementRule",
    "FeatureRule",
    "GenreBundle",
    "PatternRule",
    "ResourceRule",
    "RuleRegistry",
    "RuleRegistryError",
    "build_registry",
    "get_registry",
]
