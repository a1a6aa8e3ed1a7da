"""Structural analysis of artifact markup.

Checks required elements through ordered selector alternatives, the document
outline (doctype, sectioning, metadata), file-level completeness and the
external script references the runtime contract requires.
"""

import logging

from bs4 import BeautifulSoup

from ..markup import ParsedArtifact
from ..models import ScoreCard
from ..rules import ElementRule, RuleRegistry
from ..scoring import ratio_points

logger = logging.getLogger(__name__)


class StructuralAnalyzer:
    """Scores the files and structure categories and resource references."""

    def __init__(self, registry: RuleRegistry):
        self.registry = registry

    def match_element(self, rule: ElementRule, document: BeautifulSoup) -> str | None:
        """Return the first selector alternative that matches, if any."""
        for selector in rule.selectors:
            if selector.select_one(document) is not None:
                return selector.pattern
        return None

    def evaluate_files(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        points = self.registry.file_points

        if artifact.is_empty:
            card.error("Artifact is empty")
            return
        card.award(points["non_empty"])

        for message in artifact.parse_errors:
            card.error(message)

        budget = self.registry.max_artifact_bytes
        if artifact.size_bytes <= budget:
            card.award(points["size_budget"])
        else:
            card.warn(f"Artifact is {artifact.size_bytes} bytes, exceeding the {budget} byte budget")

        if artifact.inline_script_count:
            card.award(points["inline_script"])
        else:
            card.error("No inline script block found")

    def evaluate_structure(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        document = artifact.document
        found = 0
        total = 0

        for rule in self.registry.elements:
            matched = self.match_element(rule, document)
            if rule.required:
                total += 1
                if matched:
                    found += 1
                else:
                    card.error(
                        f"Missing required element: {rule.label} "
                        f"(tried {', '.join(rule.selector_texts)})"
                    )
            elif not matched:
                card.warn(f"Recommended element not found: {rule.label}")
            if matched:
                logger.debug(f"Element rule '{rule.key}' satisfied by '{matched}'")

        card.award(ratio_points(found, total, self.registry.element_weight))
        self._check_outline(artifact, card)
        self._check_presentation(artifact, card)

    def _check_outline(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        points = self.registry.outline_points
        document = artifact.document

        if artifact.has_doctype:
            card.award(points["doctype"])
        else:
            card.error("HTML5 DOCTYPE declaration is missing")

        if document.find("html") is not None:
            card.award(points["html"])
        else:
            card.error("<html> root element is missing")

        if document.find("head") is not None:
            card.award(points["head"])
        else:
            card.warn("<head> section is missing")

        if document.find("body") is not None:
            card.award(points["body"])
        else:
            card.warn("<body> section is missing")

        if document.find("meta", attrs={"charset": True}) is not None:
            card.award(points["charset"])
        else:
            card.suggest("Declare the character set with <meta charset=\"UTF-8\">")

        if document.find("meta", attrs={"name": "viewport"}) is not None:
            card.award(points["viewport"])
        else:
            card.suggest("Add a viewport <meta> tag for mobile screens")

        if artifact.title:
            card.award(points["title"])
        else:
            card.suggest("Give the document a non-empty <title>")

    def _check_presentation(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        """Advisory styling and control checks; no points."""
        document = artifact.document

        if self.registry.stylesheet.select_one(document) is None:
            card.warn("No CSS styling found (<style> block or stylesheet link)")

        styles = "\n".join(tag.get_text() for tag in document.find_all("style"))
        has_viewport = document.find("meta", attrs={"name": "viewport"}) is not None
        if not has_viewport and not self.registry.responsive.search(styles):
            card.warn("No responsive layout found (@media query or viewport <meta> tag)")

        if self.registry.buttons.select_one(document) is None:
            card.suggest("Add on-screen button controls, e.g. a restart button")

    def check_resources(self, artifact: ParsedArtifact, card: ScoreCard) -> None:
        """Award the resource share of the integration category."""
        sources = set(artifact.script_sources)
        found = 0

        for rule in self.registry.resources:
            if rule.path in sources:
                found += 1
            else:
                card.error(f"Missing required script reference: <script src=\"{rule.path}\"> ({rule.label})")

        card.award(ratio_points(found, len(self.registry.resources), self.registry.resource_weight))
