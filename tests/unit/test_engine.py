"""Tests for the validation engine end to end."""

from concurrent.futures import ThreadPoolExecutor

import pytest

import gamecheck.engine
from gamecheck import validate_artifact
from gamecheck.config import GamecheckConfig
from gamecheck.engine import ArtifactValidator
from gamecheck.models import Grade, ValidationRequest
from gamecheck.rules import PIPELINE_PASS_THRESHOLD
from gamecheck.rules import constants as c

SDK_WIRING = """
    const sdk = new SessionSDK({ gameId: 'demo', gameType: 'solo' });
    sdk.on('connected', () => { sdk.createSession(); });
    sdk.on('session-created', (event) => { const session = event.detail || event; });
"""

ADVERSARIAL_INPUTS = [
    "",
    "   \n\t",
    "<<<>>>",
    "<script>",
    "<script>/* never closed",
    "<!-- unterminated comment",
    "\x00\x01\x02",
    "<html><body><canvas id='gameCanvas'></canvas></body>",
    "<script>" + "{" * 2000 + "</script>",
    "<script>" + "'" * 501 + "</script>",
    "<div>" * 500,
]


def category_scores(result):
    return {category.name: category.score for category in result.categories}


class TestFullArtifact:
    """A complete artifact scores full marks."""

    def test_no_genre_scores_100(self, validate, game_markup):
        """Test the complete fixture scores 100 of 100 without a genre."""
        result = validate(game_markup)

        assert result.score == 100
        assert result.max_score == 100
        assert result.grade == Grade.A_PLUS
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.suggestions == []
        assert [category.name for category in result.categories] == [
            c.FILES, c.STRUCTURE, c.SCRIPT_LOGIC, c.INTEGRATION, c.PERFORMANCE,
        ]

    def test_physics_scores_130(self, validate, physics_markup):
        """Test the physics fixture scores 130 of 130 with its genre."""
        result = validate(physics_markup, genre="physics")

        assert result.score == 130
        assert result.max_score == 130
        assert result.grade == Grade.A_PLUS
        assert result.genre == "physics"
        assert result.category(c.GENRE_COMPLIANCE).score == 30

    def test_categories_follow_enumeration_order(self, validate, physics_markup):
        """Test categories are reported in enumeration order."""
        result = validate(physics_markup, genre="physics")

        assert [category.name for category in result.categories] == list(c.CATEGORY_ORDER)


class TestScenarios:
    """Worked examples of partial artifacts."""

    def test_bare_fragment(self, validate):
        """Test a plain fragment misses the required elements."""
        result = validate("<div><p>Hello world</p></div>")

        assert result.category(c.STRUCTURE).score == 0
        assert result.category(c.INTEGRATION).score == 0
        missing = [error for error in result.errors if error.startswith("Missing required element")]
        assert len(missing) >= 2
        assert result.is_valid is False

    def test_minimal_wiring(self, validate):
        """Test minimal SDK wiring earns the whole integration category."""
        markup = (
            "<canvas></canvas>"
            '<script src="/socket.io/socket.io.js"></script>'
            '<script src="/js/SessionSDK.js"></script>'
            f"<script>{SDK_WIRING}</script>"
        )
        result = validate(markup)

        assert result.category(c.INTEGRATION).score == 20
        assert not any(error.startswith("Ordering violation") for error in result.errors)

    def test_physics_without_trigonometry(self, validate, build_game, physics_script):
        """Test a missing genre pattern costs its share without an error."""
        result = validate(build_game(physics_script), genre="physics")

        compliance = result.genre_compliance
        assert compliance.pattern_score == 11
        assert compliance.feature_score == 15
        assert result.category(c.GENRE_COMPLIANCE).score == 26
        assert compliance.recommendations[0].items == ["trigonometric motion (Math.sin/cos/atan2)"]
        assert result.errors == []

    def test_unbalanced_brace(self, validate, build_game, game_markup):
        """Test a syntax error only affects the script-logic category."""
        baseline = category_scores(validate(game_markup))
        result = validate(build_game("if (score > 100) {"))

        syntax = [error for error in result.errors if error.startswith("Unbalanced")]
        assert len(syntax) == 1
        assert result.category(c.SCRIPT_LOGIC).score == 30
        scores = category_scores(result)
        assert {k: v for k, v in scores.items() if k != c.SCRIPT_LOGIC} == {
            k: v for k, v in baseline.items() if k != c.SCRIPT_LOGIC
        }
        assert result.is_valid is False

    def test_missing_qr_container(self, validate, build_game):
        """Test a missing required element invalidates an otherwise high score."""
        result = validate(build_game(remove=('<div id="qr-code"></div>',)))

        assert result.category(c.STRUCTURE).score == 20
        assert len(result.errors) == 1
        assert result.score == 95
        assert result.is_valid is False


class TestGenreSelection:
    """Genre labels select a bundle or omit the category."""

    def test_unknown_genre_omits_category(self, validate, game_markup):
        """Test an unknown genre drops the genre category from the maximum."""
        result = validate(game_markup, genre="rhythm")

        assert result.max_score == 100
        assert result.genre is None
        assert result.genre_compliance is None
        assert result.category(c.GENRE_COMPLIANCE) is None

    def test_localized_alias(self, validate, physics_markup):
        """Test a Korean label selects its bundle and is echoed back."""
        result = validate(physics_markup, genre="물리")

        assert result.genre == "물리"
        assert result.genre_compliance.bundle == "physics"
        assert result.max_score == 130

    def test_partial_label(self, validate, game_markup):
        """Test a label containing an alias selects its bundle."""
        result = validate(game_markup, genre="casual puzzle game")

        assert result.genre_compliance.bundle == "puzzle"

    def test_genre_misses_never_error(self, validate, game_markup):
        """Test genre misses lower the score without errors."""
        result = validate(game_markup, genre="cooking")

        assert result.errors == []
        assert result.category(c.GENRE_COMPLIANCE).score < 30


class TestInvariants:
    """Properties that hold for any input."""

    @pytest.mark.parametrize("markup", ADVERSARIAL_INPUTS)
    def test_scores_within_bounds(self, validate, markup):
        """Test scores stay in range and totals add up for hostile input."""
        result = validate(markup, genre="action")

        for category in result.categories:
            assert 0 <= category.score <= category.max_score
        assert result.score == sum(category.score for category in result.categories)
        assert result.max_score == sum(category.max_score for category in result.categories)
        assert 0 <= result.score <= result.max_score

    @pytest.mark.parametrize("markup", ADVERSARIAL_INPUTS)
    def test_errors_imply_invalid(self, validate, markup):
        """Test any error makes the result invalid."""
        result = validate(markup)

        if result.errors:
            assert result.is_valid is False

    def test_idempotent(self, validate, physics_markup):
        """Test validating twice gives equal but independent results."""
        first = validate(physics_markup, genre="physics", title="Tilt Ball")
        second = validate(physics_markup, genre="physics", title="Tilt Ball")

        assert first.to_dict() == second.to_dict()
        assert first.errors is not second.errors

    def test_concurrent_validation_is_deterministic(self, validator, build_game, physics_script):
        """Test a shared validator gives the same results across threads."""
        markups = [build_game(physics_script), build_game("if (x) {"), "<div></div>"] * 10
        requests = [ValidationRequest(markup=markup, genre="physics") for markup in markups]
        expected = [validator.validate(request).to_dict() for request in requests]

        with ThreadPoolExecutor(max_workers=8) as pool:
            actual = [result.to_dict() for result in pool.map(validator.validate, requests)]

        assert actual == expected


class TestPassThreshold:
    """Pass threshold selection."""

    def test_warning_only_artifact(self, build_game):
        """Test warnings only fail when the threshold is out of reach."""
        markup = build_game("document.write('<p>loading</p>');")

        report = ArtifactValidator().validate(ValidationRequest(markup=markup))
        pipeline = ArtifactValidator(pass_threshold=PIPELINE_PASS_THRESHOLD).validate(ValidationRequest(markup=markup))
        strict = ArtifactValidator(pass_threshold=130).validate(ValidationRequest(markup=markup))

        assert report.score == 98
        assert report.errors == []
        assert report.is_valid is True
        assert pipeline.is_valid is True
        assert strict.is_valid is False
        assert strict.pass_threshold == 130

    def test_threshold_from_config(self, game_markup):
        """Test the pass threshold is read from config."""
        config = GamecheckConfig.model_validate({"scoring": {"passThreshold": 95}})
        result = ArtifactValidator(config).validate(ValidationRequest(markup=game_markup))

        assert result.pass_threshold == 95

    def test_grade_table_from_config(self, game_markup):
        """Test the grade table is read from config."""
        config = GamecheckConfig.model_validate(
            {"scoring": {"gradeThresholds": [{"grade": "A", "minScore": 120}]}}
        )
        result = ArtifactValidator(config).validate(ValidationRequest(markup=game_markup))

        assert result.grade == Grade.A

    def test_artifact_budget_from_config(self, game_markup):
        """Test the artifact size budget is read from config."""
        config = GamecheckConfig.model_validate({"limits": {"maxArtifactBytes": 100}})
        result = ArtifactValidator(config).validate(ValidationRequest(markup=game_markup))

        assert result.category(c.FILES).score == 7
        assert any("byte budget" in warning for warning in result.warnings)


class TestFaultIsolation:
    """Internal faults never escape validate()."""

    def test_failing_category_is_isolated(self, validator, validate, game_markup, monkeypatch):
        """Test a crashing category scores zero and the rest still run."""
        def boom(artifact, card):
            card.award(10)
            raise RuntimeError("boom")

        monkeypatch.setattr(validator.patterns, "evaluate_performance", boom)
        result = validate(game_markup)

        assert result.category(c.PERFORMANCE).score == 0
        assert result.errors == ["Internal error while evaluating performance: boom"]
        assert result.score == 90
        assert result.is_valid is False

    def test_parse_failure_aborts_with_zero_score(self, validate, game_markup, monkeypatch):
        """Test a parse crash yields a zero-score invalid result."""
        def boom(markup):
            raise RuntimeError("boom")

        monkeypatch.setattr(gamecheck.engine, "parse_artifact", boom)
        result = validate(game_markup, genre="physics", title="Tilt Ball")

        assert result.score == 0
        assert result.max_score == 100
        assert result.grade == Grade.F
        assert result.is_valid is False
        assert result.errors == ["Internal error while validating artifact: boom"]
        assert result.title == "Tilt Ball"


class TestSerialization:
    """Result dictionaries for JSON output."""

    def test_camel_case_keys(self, validate, game_markup):
        """Test result dictionaries use camelCase keys."""
        data = validate(game_markup, title="Tilt Ball").to_dict()

        assert data["maxScore"] == 100
        assert data["isValid"] is True
        assert data["grade"] == "A+"
        assert data["title"] == "Tilt Ball"
        assert data["categories"][0] == {"name": "files", "score": 10, "maxScore": 10}
        assert "genreCompliance" not in data

    def test_title_falls_back_to_document_title(self, validate, game_markup):
        """Test the request title wins over the document title."""
        assert validate(game_markup).title == "Tilt Ball"
        assert validate(game_markup, title="Marble Maze").title == "Marble Maze"
        assert validate("<div></div>").title is None

    def test_genre_compliance_included(self, validate, physics_markup):
        """Test genre compliance is serialized when a bundle matched."""
        data = validate(physics_markup, genre="physics").to_dict()

        assert data["genre"] == "physics"
        assert data["genreCompliance"]["patternScore"] == 15
        assert data["genreCompliance"]["recommendations"] == []


class TestConvenienceApi:
    """Module-level helpers."""

    def test_validate_artifact(self, game_markup):
        """Test the module-level helper uses the report threshold."""
        result = validate_artifact(game_markup, title="Tilt Ball")

        assert result.score == 100
        assert result.pass_threshold == 80

    def test_validate_many(self, validator, game_markup):
        """Test batch validation keeps request order."""
        results = validator.validate_many([
            ValidationRequest(markup=game_markup),
            ValidationRequest(markup=""),
        ])

        assert [result.is_valid for result in results] == [True, False]
