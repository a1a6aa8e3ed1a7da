"""Immutable rule registry.

Compiles the literal tables in `constants` into tagged rule objects once per
process. The registry is never mutated after construction and is safe to
share across threads.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

import soupsieve
from soupsieve import SoupSieve

from . import constants as c

logger = logging.getLogger(__name__)


class RuleRegistryError(ValueError):
    """Raised when the rule tables are inconsistent."""


@dataclass(frozen=True)
class PatternRule:
    """Required or forbidden textual pattern evaluated against script text.

    `companions` must also be present anywhere in the text for the rule to
    match; the returned match is always the one for `expression`.
    """
    key: str
    label: str
    expression: re.Pattern
    required: bool = False
    weight: int = 0
    forbidden: bool = False
    companions: tuple[re.Pattern, ...] = ()

    def search(self, text: str) -> re.Match | None:
        match = self.expression.search(text)
        if match is None or not all(companion.search(text) for companion in self.companions):
            return None
        return match

    def count(self, text: str) -> int:
        return sum(1 for _ in self.expression.finditer(text))


@dataclass(frozen=True)
class ElementRule:
    """At least one of several selector alternatives must match."""
    key: str
    label: str
    selectors: tuple[SoupSieve, ...]
    required: bool = True

    @property
    def selector_texts(self) -> tuple[str, ...]:
        return tuple(selector.pattern for selector in self.selectors)


@dataclass(frozen=True)
class ResourceRule:
    """External script reference matched by exact src path."""
    key: str
    label: str
    path: str


@dataclass(frozen=True)
class FeatureRule:
    """Genre capability detected by any of its alias keywords."""
    name: str
    aliases: frozenset[str]

    def matches(self, lowered_text: str) -> bool:
        return any(alias in lowered_text for alias in self.aliases)


@dataclass(frozen=True)
class GenreBundle:
    """Pattern and feature rules for one genre."""
    key: str
    label: str
    aliases: tuple[str, ...]
    patterns: tuple[PatternRule, ...]
    features: tuple[FeatureRule, ...]
    pattern_weight: int
    feature_weight: int

    def matches_exactly(self, normalized: str) -> bool:
        return normalized == self.key or normalized in self.aliases

    def matches_partially(self, normalized: str) -> bool:
        return self.key in normalized or any(alias in normalized for alias in self.aliases)


@dataclass(frozen=True)
class RuleRegistry:
    """Process-wide table of validation rules."""
    category_weights: Mapping[str, int]
    total: int
    file_points: Mapping[str, int]
    max_artifact_bytes: int
    elements: tuple[ElementRule, ...]
    element_weight: int
    outline_points: Mapping[str, int]
    resources: tuple[ResourceRule, ...]
    resource_weight: int
    integration_patterns: tuple[PatternRule, ...]
    readiness: PatternRule
    start: PatternRule
    script_patterns: tuple[PatternRule, ...]
    script_pattern_weight: int
    advanced_patterns: tuple[PatternRule, ...]
    syntax_penalty: int
    delimiter_pairs: tuple[tuple[str, str, str], ...]
    misspellings: tuple[tuple[re.Pattern, str, str], ...]
    anti_patterns: tuple[PatternRule, ...]
    performance_patterns: tuple[PatternRule, ...]
    interval_loop: PatternRule
    sensor_types: tuple[PatternRule, ...]
    sensor_smoothing: PatternRule
    stylesheet: SoupSieve
    responsive: PatternRule
    buttons: SoupSieve
    genres: Mapping[str, GenreBundle]

    def max_score(self, category: str) -> int:
        return self.category_weights[category]

    def find_genre(self, label: str | None) -> GenreBundle | None:
        """Look up the bundle for a genre label.

        Exact key/alias matches win over substring matches; substring matches
        are tried in registry order. Returns None for absent or unknown labels.
        """
        if not label:
            return None
        normalized = label.strip().lower()
        if not normalized:
            return None

        for bundle in self.genres.values():
            if bundle.matches_exactly(normalized):
                return bundle
        for bundle in self.genres.values():
            if bundle.matches_partially(normalized):
                return bundle

        logger.debug(f"No genre bundle for label '{label}'")
        return None


def _compile(key: str, expression: str, flags: int = 0) -> re.Pattern:
    try:
        return re.compile(expression, flags)
    except re.error as e:
        raise RuleRegistryError(f"Invalid pattern for rule '{key}': {e}") from e


def _pattern_rule(key: str, label: str, expression: str | tuple[str, ...], **fields) -> PatternRule:
    parts = (expression,) if isinstance(expression, str) else expression
    compiled = tuple(_compile(key, part) for part in parts)
    return PatternRule(key=key, label=label, expression=compiled[0], companions=compiled[1:], **fields)


def _compile_selector(key: str, selector: str) -> SoupSieve:
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        raise RuleRegistryError(f"Invalid selector '{selector}' for rule '{key}': {e}") from e


def _check_sum(category: str, parts: int, weights: Mapping[str, int]) -> None:
    if parts != weights[category]:
        raise RuleRegistryError(
            f"Sub-weights of '{category}' sum to {parts}, expected {weights[category]}"
        )


def _validate_weights(registry: RuleRegistry) -> None:
    weights = registry.category_weights

    missing = [name for name in c.CATEGORY_ORDER if name not in weights]
    if missing:
        raise RuleRegistryError(f"Missing category weights: {', '.join(missing)}")

    declared = sum(weights.values())
    if declared != registry.total:
        raise RuleRegistryError(f"Category weights sum to {declared}, expected {registry.total}")

    _check_sum(c.FILES, sum(registry.file_points.values()), weights)
    _check_sum(c.STRUCTURE, registry.element_weight + sum(registry.outline_points.values()), weights)
    _check_sum(
        c.SCRIPT_LOGIC,
        registry.script_pattern_weight + sum(rule.weight for rule in registry.advanced_patterns),
        weights,
    )
    _check_sum(
        c.INTEGRATION,
        registry.resource_weight + sum(rule.weight for rule in registry.integration_patterns),
        weights,
    )
    _check_sum(c.PERFORMANCE, sum(rule.weight for rule in registry.performance_patterns), weights)

    for bundle in registry.genres.values():
        _check_sum(c.GENRE_COMPLIANCE, bundle.pattern_weight + bundle.feature_weight, weights)
        if not bundle.patterns or not bundle.features:
            raise RuleRegistryError(f"Genre bundle '{bundle.key}' needs patterns and features")


def _build_genre(key: str, table: dict) -> GenreBundle:
    patterns = tuple(
        PatternRule(
            key=pattern_key,
            label=label,
            expression=_compile(f"{key}:{pattern_key}", expression, re.IGNORECASE),
            required=True,
        )
        for pattern_key, label, expression in table["patterns"]
    )
    features = tuple(
        FeatureRule(name=name, aliases=frozenset(alias.lower() for alias in aliases))
        for name, aliases in table["features"]
    )
    return GenreBundle(
        key=key,
        label=table["label"],
        aliases=tuple(alias.lower() for alias in table["aliases"]),
        patterns=patterns,
        features=features,
        pattern_weight=table.get("pattern_weight", c.GENRE_PATTERN_WEIGHT),
        feature_weight=table.get("feature_weight", c.GENRE_FEATURE_WEIGHT),
    )


def build_registry(
    category_weights: Mapping[str, int] | None = None,
    total: int = c.REFERENCE_TOTAL,
    max_artifact_bytes: int = c.DEFAULT_MAX_ARTIFACT_BYTES,
) -> RuleRegistry:
    """Compile the rule tables and validate weight consistency.

    Args:
        category_weights: Override for the per-category maxima (tests only)
        total: Declared total the weights must sum to
        max_artifact_bytes: Size budget for the files category

    Returns:
        Immutable RuleRegistry

    Raises:
        RuleRegistryError: If weights drift or a pattern/selector is invalid
    """
    integration = tuple(
        _pattern_rule(key, label, expression, required=required, weight=weight)
        for key, label, expression, required, weight in c.INTEGRATION_PATTERNS
    )
    readiness = next((rule for rule in integration if rule.key == c.READINESS_PATTERN), None)
    if readiness is None:
        raise RuleRegistryError(f"Readiness pattern '{c.READINESS_PATTERN}' is not an integration pattern")
    start_key, start_label, start_expression = c.START_PATTERN

    registry = RuleRegistry(
        category_weights=MappingProxyType(dict(category_weights or c.CATEGORY_WEIGHTS)),
        total=total,
        file_points=MappingProxyType(dict(c.FILE_POINTS)),
        max_artifact_bytes=max_artifact_bytes,
        elements=tuple(
            ElementRule(
                key=key,
                label=label,
                selectors=tuple(_compile_selector(key, selector) for selector in selectors),
                required=required,
            )
            for key, label, selectors, required in c.ELEMENT_RULES
        ),
        element_weight=c.ELEMENT_WEIGHT,
        outline_points=MappingProxyType(dict(c.OUTLINE_POINTS)),
        resources=tuple(ResourceRule(key=key, label=label, path=path) for key, label, path in c.RESOURCE_RULES),
        resource_weight=c.RESOURCE_WEIGHT,
        integration_patterns=integration,
        readiness=readiness,
        start=PatternRule(key=start_key, label=start_label, expression=_compile(start_key, start_expression)),
        script_patterns=tuple(
            PatternRule(key=key, label=label, expression=_compile(key, expression), required=True)
            for key, label, expression in c.SCRIPT_PATTERNS
        ),
        script_pattern_weight=c.SCRIPT_PATTERN_WEIGHT,
        advanced_patterns=tuple(
            _pattern_rule(key, label, expression, weight=weight)
            for key, label, expression, weight in c.ADVANCED_PATTERNS
        ),
        syntax_penalty=c.SYNTAX_ERROR_PENALTY,
        delimiter_pairs=c.DELIMITER_PAIRS,
        misspellings=tuple(
            (_compile(wrong, rf"\b{re.escape(wrong)}\b"), wrong, right)
            for wrong, right in c.KNOWN_MISSPELLINGS.items()
        ),
        anti_patterns=tuple(
            PatternRule(key=key, label=message, expression=_compile(key, expression), forbidden=True)
            for key, expression, message in c.ANTI_PATTERNS
        ),
        performance_patterns=tuple(
            PatternRule(
                key=key, label=label, expression=_compile(key, expression), weight=weight, forbidden=forbidden
            )
            for key, label, expression, weight, forbidden in c.PERFORMANCE_PATTERNS
        ),
        interval_loop=PatternRule(
            key="interval-loop", label="setInterval game loop", expression=_compile("interval-loop", c.INTERVAL_LOOP_PATTERN)
        ),
        sensor_types=tuple(
            PatternRule(key=sensor, label=sensor, expression=_compile(sensor, re.escape(sensor)))
            for sensor in c.SENSOR_TYPES
        ),
        sensor_smoothing=PatternRule(
            key="sensor-smoothing",
            label="sensor smoothing",
            expression=_compile("sensor-smoothing", c.SENSOR_SMOOTHING_PATTERN, re.IGNORECASE),
        ),
        stylesheet=_compile_selector("stylesheet", c.STYLESHEET_SELECTOR),
        responsive=PatternRule(
            key="responsive", label="@media query", expression=_compile("responsive", c.RESPONSIVE_PATTERN)
        ),
        buttons=_compile_selector("buttons", c.BUTTON_SELECTOR),
        genres=MappingProxyType({key: _build_genre(key, table) for key, table in c.GENRE_BUNDLES.items()}),
    )

    _validate_weights(registry)
    logger.debug(
        f"Built rule registry: {len(registry.elements)} element rules, "
        f"{len(registry.script_patterns)} script patterns, {len(registry.genres)} genre bundles"
    )
    return registry


@lru_cache(maxsize=None)
def get_registry(max_artifact_bytes: int = c.DEFAULT_MAX_ARTIFACT_BYTES) -> RuleRegistry:
    """Shared registry, built once per size budget."""
    return build_registry(max_artifact_bytes=max_artifact_bytes)
