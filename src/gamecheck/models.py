"""Data models for artifact validation requests and results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Grade(str, Enum):
    """Letter grade derived from the composite score."""
    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    F = "F"


@dataclass(frozen=True)
class ValidationRequest:
    """A single artifact to validate."""
    markup: str
    genre: str | None = None
    title: str | None = None


@dataclass
class Category:
    """One independently scored dimension of quality."""
    name: str
    score: int
    max_score: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "score": self.score, "maxScore": self.max_score}


@dataclass
class ScoreCard:
    """Accumulates points and findings for one category during evaluation.

    Points may go negative or exceed the maximum while rules are applied;
    the aggregator clamps them when the card is turned into a Category.
    """
    name: str
    max_score: int
    points: float = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def award(self, points: float) -> None:
        self.points += points

    def deduct(self, points: float) -> None:
        self.points -= points

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def suggest(self, message: str) -> None:
        self.suggestions.append(message)

    def fail(self, message: str) -> None:
        """Discard everything collected so far and record a diagnostic error."""
        self.points = 0
        self.errors = [message]
        self.warnings = []
        self.suggestions = []


@dataclass
class Recommendation:
    """Unsatisfied genre checks grouped by kind."""
    category: str
    items: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "items": list(self.items)}


@dataclass
class GenreCompliance:
    """Outcome of the genre rule engine for a matched bundle."""
    bundle: str
    pattern_score: int
    pattern_max: int
    feature_score: int
    feature_max: int
    recommendations: list[Recommendation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bundle": self.bundle,
            "patternScore": self.pattern_score,
            "patternMax": self.pattern_max,
            "featureScore": self.feature_score,
            "featureMax": self.feature_max,
            "recommendations": [item.to_dict() for item in self.recommendations],
        }


@dataclass
class ValidationResult:
    """Complete result of validating one artifact."""
    categories: list[Category]
    score: int
    max_score: int
    grade: Grade
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    genre: str | None = None
    genre_compliance: GenreCompliance | None = None
    title: str | None = None
    pass_threshold: int = 0

    def category(self, name: str) -> Category | None:
        return next((item for item in self.categories if item.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        data: dict[str, Any] = {
            "score": self.score,
            "maxScore": self.max_score,
            "grade": self.grade.value,
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "categories": [item.to_dict() for item in self.categories],
            "passThreshold": self.pass_threshold,
        }
        if self.title:
            data["title"] = self.title
        if self.genre:
            data["genre"] = self.genre
        if self.genre_compliance is not None:
            data["genreCompliance"] = self.genre_compliance.to_dict()
        return data
