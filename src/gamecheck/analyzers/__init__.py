"""Category analyzers for generated game artifacts."""

from .genre import MISSING_CAPABILITY, RECOMMENDED_FEATURE, GenreRuleEngine
from .patterns import PatternAnalyzer, strip_literals
from .structure import StructuralAnalyzer

__all__ = [
    "GenreRuleEngine",
    "PatternAnalyzer",
    "StructuralAnalyzer",
    "MISSING_CAPABILITY",
    "RECOMMENDED_FEATURE",
    "strip_literals",
]
