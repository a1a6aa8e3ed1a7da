"""Genre-specific rule evaluation.

Genre compliance is advisory: unsatisfied checks become grouped
recommendations and suggestions, never errors.
"""

import logging

from ..markup import ParsedArtifact
from ..models import GenreCompliance, Recommendation, ScoreCard
from ..rules import GenreBundle, RuleRegistry
from ..scoring import ratio_points

logger = logging.getLogger(__name__)

MISSING_CAPABILITY = "missing required capability"
RECOMMENDED_FEATURE = "recommended feature"


class GenreRuleEngine:
    """Evaluates a genre bundle against an artifact."""

    def __init__(self, registry: RuleRegistry):
        self.registry = registry

    def lookup(self, genre: str | None) -> GenreBundle | None:
        return self.registry.find_genre(genre)

    def evaluate(self, bundle: GenreBundle, artifact: ParsedArtifact, card: ScoreCard) -> GenreCompliance:
        script = artifact.script
        missing_patterns = [rule.label for rule in bundle.patterns if not rule.search(script)]
        pattern_found = len(bundle.patterns) - len(missing_patterns)
        pattern_score = ratio_points(pattern_found, len(bundle.patterns), bundle.pattern_weight)

        text = artifact.markup.lower()
        missing_features = [feature.name for feature in bundle.features if not feature.matches(text)]
        feature_found = len(bundle.features) - len(missing_features)
        feature_score = ratio_points(feature_found, len(bundle.features), bundle.feature_weight)

        card.award(pattern_score + feature_score)

        recommendations = []
        if missing_patterns:
            recommendations.append(Recommendation(MISSING_CAPABILITY, missing_patterns))
        if missing_features:
            recommendations.append(Recommendation(RECOMMENDED_FEATURE, missing_features))

        for recommendation in recommendations:
            for item in recommendation.items:
                card.suggest(f"[{bundle.key}] {recommendation.category}: {item}")

        logger.debug(
            f"Genre '{bundle.key}': patterns {pattern_found}/{len(bundle.patterns)}, "
            f"features {feature_found}/{len(bundle.features)}"
        )
        return GenreCompliance(
            bundle=bundle.key,
            pattern_score=pattern_score,
            pattern_max=bundle.pattern_weight,
            feature_score=feature_score,
            feature_max=bundle.feature_weight,
            recommendations=recommendations,
        )
