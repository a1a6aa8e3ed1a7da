"""Validation engine for generated game artifacts.

Runs every category in fixed enumeration order against one parsed artifact,
isolating failures at each category boundary, and aggregates the result.
`validate` never raises: any fault ends up as a zero score with a diagnostic
error in the returned result.
"""

import logging
from typing import Callable, Iterable

from .analyzers import GenreRuleEngine, PatternAnalyzer, StructuralAnalyzer
from .config import GamecheckConfig, create_default_config
from .markup import ParsedArtifact, parse_artifact
from .models import GenreCompliance, Grade, ScoreCard, ValidationRequest, ValidationResult
from .rules import GenreBundle, RuleRegistry, get_registry
from .rules import constants as c
from .scoring import aggregate, grade_for, is_passing, to_category

logger = logging.getLogger(__name__)

Evaluator = Callable[[ParsedArtifact, ScoreCard], None]


class ArtifactValidator:
    """Scores artifacts against the shared rule registry."""

    def __init__(
        self,
        config: GamecheckConfig | None = None,
        registry: RuleRegistry | None = None,
        pass_threshold: int | None = None,
    ):
        self.config = config or create_default_config()
        self.registry = registry or get_registry(self.config.limits.max_artifact_bytes)
        self.pass_threshold = (
            pass_threshold if pass_threshold is not None else self.config.scoring.pass_threshold
        )
        self.structure = StructuralAnalyzer(self.registry)
        self.patterns = PatternAnalyzer(self.registry)
        self.genres = GenreRuleEngine(self.registry)

    def validate(self, request: ValidationRequest) -> ValidationResult:
        """Validate one artifact.

        Args:
            request: Markup plus optional genre label and title

        Returns:
            Freshly allocated ValidationResult
        """
        try:
            return self._validate(request)
        except Exception as e:
            logger.exception(f"Validation aborted: {e}")
            return self._aborted_result(request, e)

    def validate_many(self, requests: Iterable[ValidationRequest]) -> list[ValidationResult]:
        return [self.validate(request) for request in requests]

    def _validate(self, request: ValidationRequest) -> ValidationResult:
        artifact = parse_artifact(request.markup)
        bundle = self.genres.lookup(request.genre)
        if request.genre and bundle is None:
            logger.info(f"Unknown genre '{request.genre}', genre scoring skipped")

        compliance: list[GenreCompliance] = []

        def evaluate_integration(parsed: ParsedArtifact, card: ScoreCard) -> None:
            self.structure.check_resources(parsed, card)
            self.patterns.evaluate_integration(parsed, card)

        def evaluate_genre(parsed: ParsedArtifact, card: ScoreCard) -> None:
            compliance.append(self.genres.evaluate(bundle, parsed, card))

        evaluators: dict[str, Evaluator] = {
            c.FILES: self.structure.evaluate_files,
            c.STRUCTURE: self.structure.evaluate_structure,
            c.SCRIPT_LOGIC: self.patterns.evaluate_script_logic,
            c.INTEGRATION: evaluate_integration,
            c.GENRE_COMPLIANCE: evaluate_genre,
            c.PERFORMANCE: self.patterns.evaluate_performance,
        }

        cards = []
        for name in c.CATEGORY_ORDER:
            if name == c.GENRE_COMPLIANCE and bundle is None:
                continue
            cards.append(self._run_category(name, evaluators[name], artifact))

        return self._build_result(
            request, bundle, cards, compliance[0] if compliance else None, artifact.title
        )

    def _run_category(self, name: str, evaluator: Evaluator, artifact: ParsedArtifact) -> ScoreCard:
        card = ScoreCard(name=name, max_score=self.registry.max_score(name))
        logger.debug(f"Evaluating category: {name}")
        try:
            evaluator(artifact, card)
        except Exception as e:
            logger.exception(f"Category {name} failed with error: {e}")
            card.fail(f"Internal error while evaluating {name}: {e}")
        return card

    def _build_result(
        self,
        request: ValidationRequest,
        bundle: GenreBundle | None,
        cards: list[ScoreCard],
        compliance: GenreCompliance | None,
        document_title: str | None = None,
    ) -> ValidationResult:
        categories = [to_category(card) for card in cards]
        score, max_score = aggregate(categories)
        errors = [message for card in cards for message in card.errors]
        warnings = [message for card in cards for message in card.warnings]
        suggestions = [message for card in cards for message in card.suggestions]

        result = ValidationResult(
            categories=categories,
            score=score,
            max_score=max_score,
            grade=grade_for(score, max_score, self.config.scoring.threshold_table(), self.registry.total),
            is_valid=is_passing(score, max_score, errors, self.pass_threshold, self.registry.total),
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            genre=request.genre if bundle is not None else None,
            genre_compliance=compliance,
            title=request.title or document_title,
            pass_threshold=self.pass_threshold,
        )
        logger.info(
            f"Validation completed: {result.score}/{result.max_score} ({result.grade.value}), "
            f"valid={result.is_valid}, {len(errors)} errors, {len(warnings)} warnings"
        )
        return result

    def _aborted_result(self, request: ValidationRequest, error: Exception) -> ValidationResult:
        categories = [
            to_category(ScoreCard(name=name, max_score=self.registry.max_score(name)))
            for name in c.CATEGORY_ORDER
            if name != c.GENRE_COMPLIANCE
        ]
        _, max_score = aggregate(categories)
        return ValidationResult(
            categories=categories,
            score=0,
            max_score=max_score,
            grade=Grade.F,
            is_valid=False,
            errors=[f"Internal error while validating artifact: {error}"],
            title=request.title,
            pass_threshold=self.pass_threshold,
        )


def validate_artifact(
    markup: str,
    genre: str | None = None,
    title: str | None = None,
    pass_threshold: int = c.REPORT_PASS_THRESHOLD,
) -> ValidationResult:
    """Convenience function to validate artifact markup directly."""
    validator = ArtifactValidator(pass_threshold=pass_threshold)
    return validator.validate(ValidationRequest(markup=markup, genre=genre, title=title))
