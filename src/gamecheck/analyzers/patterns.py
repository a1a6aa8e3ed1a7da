"""Pattern analysis of inline script text.

Only inline script blocks are scanned; blocks loaded through `src` have no
inline content. All checks are textual: presence, first-match offsets and
delimiter counts. Nothing is executed.
"""

import logging
import re

from ..markup import ParsedArtifact
from ..models import ScoreCard
from ..rules import PatternRule, RuleRegistry
from ..scoring import ratio_points

logger = logging.getLogger(__name__)

# Regex literals, comments and string/template literals, removed before
# delimiter counting. A regex literal can only start where an operand is
# expected, so `a / b / c` stays division. Unterminated block comments and
# template literals run to the end of the script.
_LITERALS = re.compile(
    r"""
      (?:(?<=[(,=:\[!&|?{};\n])|(?<=\breturn)|\A)[ \t]*
      /(?![/*])(?:\\.|\[(?:\\.|[^\]\\\n])*\]|[^/\\\n\[])+/[A-Za-z]*
    | //[^\n]*
    | /\*[\s\S]*?(?:\*/|\Z)
    | '(?:\\.|[^'\\\n])*'
    | "(?:\\.|[^"\\\n])*"
    | `(?:\\.|[^`\\])*(?:`|\Z)
    """,
    re.VERBOSE,
)


def strip_literals(script: str) -> str:
    return _LITERALS.sub(" ", script)


def first_offset(rule: PatternRule, text: str) -> int | None:
    match = rule.search(text)
    return match.start() if match else None


class PatternAnalyzer:
    """Scores the script-logic, integration and performance categories."""

    def __init__(self, registry: RuleRegistry):
        self.registry = registry

    def evaluate_script_logic(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        script = artifact.script

        self._check_required(script, card)
        self._check_syntax(script, card)
        self._check_misspellings(script, card)
        self._check_anti_patterns(script, card)
        self._check_sensor_handling(script, card)

        for rule in self.registry.advanced_patterns:
            if rule.search(script):
                card.award(rule.weight)
            else:
                card.suggest(f"Consider adding {rule.label}")

    def _check_required(self, script: str, card: ScoreCard) -> None:
        found = 0
        for rule in self.registry.script_patterns:
            occurrences = rule.count(script)
            if occurrences:
                found += 1
            else:
                card.error(f"Missing required game logic: {rule.label}")
            logger.debug(f"Script pattern '{rule.key}': {occurrences} occurrence(s)")

        total = len(self.registry.script_patterns)
        card.award(ratio_points(found, total, self.registry.script_pattern_weight))

    def _check_syntax(self, script: str, card: ScoreCard) -> None:
        code = strip_literals(script)
        for name, opening, closing in self.registry.delimiter_pairs:
            opened = code.count(opening)
            closed = code.count(closing)
            if opened != closed:
                card.error(f"Unbalanced {name} in script: {opened} '{opening}' vs {closed} '{closing}'")
                card.deduct(self.registry.syntax_penalty)

    def _check_misspellings(self, script: str, card: ScoreCard) -> None:
        for expression, wrong, right in self.registry.misspellings:
            if expression.search(script):
                card.warn(f"Possible misspelling '{wrong}' (did you mean '{right}'?)")

    def _check_anti_patterns(self, script: str, card: ScoreCard) -> None:
        for rule in self.registry.anti_patterns:
            if rule.search(script):
                card.warn(rule.label)

    def _check_sensor_handling(self, script: str, card: ScoreCard) -> None:
        """Advisory checks on how sensor data is consumed; no points."""
        handler = next(rule for rule in self.registry.script_patterns if rule.key == "sensor-data-handler")
        if not handler.search(script):
            return

        sensors = [rule.label for rule in self.registry.sensor_types if rule.search(script)]
        logger.debug(f"Sensor types read: {sensors}")
        if not sensors:
            names = ", ".join(rule.label for rule in self.registry.sensor_types)
            card.warn(f"Sensor data handler reads no sensor values ({names})")

        if not self.registry.sensor_smoothing.search(script):
            card.warn("Sensor input is not smoothed; consider a smoothing filter or threshold")

    def evaluate_integration(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        """Award the SDK wiring share of the integration category.

        Resource references are scored separately by the structural analyzer.
        """
        script = artifact.script

        for rule in self.registry.integration_patterns:
            if rule.search(script):
                card.award(rule.weight)
            elif rule.required:
                card.error(f"Missing required integration code: {rule.label}")
            else:
                card.warn(f"Integration pattern not found: {rule.label}")

        self._check_ordering(script, card)

    def _check_ordering(self, script: str, card: ScoreCard) -> None:
        readiness = first_offset(self.registry.readiness, script)
        start = first_offset(self.registry.start, script)
        if readiness is None or start is None:
            return
        if start < readiness:
            card.error(
                f"Ordering violation: {self.registry.start.label} appears before the "
                f"{self.registry.readiness.label} is registered; create the session inside the handler"
            )

    def evaluate_performance(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        script = artifact.script

        for rule in self.registry.performance_patterns:
            present = rule.search(script) is not None
            if rule.forbidden:
                if present:
                    card.warn(f"Avoid {rule.label}; it blocks rendering")
                else:
                    card.award(rule.weight)
            elif present:
                card.award(rule.weight)
            else:
                card.suggest(f"Consider adding {rule.label}")

        loop = next(rule for rule in self.registry.performance_patterns if rule.key == "raf-loop")
        if not loop.search(script) and self.registry.interval_loop.search(script):
            card.warn("setInterval drives the game loop; use requestAnimationFrame instead")
