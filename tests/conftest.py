"""Shared fixtures: a complete sensor game artifact and helpers to break it."""

import pytest

from gamecheck.engine import ArtifactValidator
from gamecheck.models import ValidationRequest
from gamecheck.rules import build_registry

EXTRA_SCRIPT = "/* EXTRA */"

GAME_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Tilt Ball</title>
    <style>
        body { margin: 0; background: #111; }
    </style>
</head>
<body>
    <canvas id="gameCanvas"></canvas>
    <div id="session-code">----</div>
    <div id="qr-code"></div>
    <div id="sensor-status">waiting</div>
    <div id="score">0</div>
    <button id="reset-btn">Reset</button>

    <script src="/socket.io/socket.io.js"></script>
    <script src="/js/SessionSDK.js"></script>
    <script>
        const canvas = document.getElementById('gameCanvas');
        const ctx = canvas.getContext('2d');
        let score = 0;
        let gameStarted = false;
        let gameOver = false;
        let lastTime = performance.now();
        let smoothedTilt = 0;
        const ball = { x: 100, y: 100, radius: 10 };

        const sdk = new SessionSDK({
            gameId: 'tilt-ball',
            gameType: 'solo'
        });

        sdk.on('connected', () => {
            sdk.createSession();
        });

        sdk.on('session-created', (event) => {
            const session = event.detail || event;
            document.getElementById('session-code').textContent = session.sessionCode;
        });

        sdk.on('sensor-data', (event) => {
            const data = event.detail || event;
            const tilt = data.data.orientation.gamma / 90;
            smoothedTilt += (tilt - smoothedTilt) * 0.2;
            ball.x = Math.max(0, Math.min(canvas.width, ball.x + smoothedTilt * 5));
        });

        function resetGame() {
            score = 0;
            gameOver = false;
        }

        function update(deltaTime) {
            if (!gameStarted || gameOver) return;
            score += 1;
        }

        function render() {
            try {
                ctx.clearRect(0, 0, canvas.width, canvas.height);
            } catch (error) {
                console.error(error);
            }
        }

        function loop(now) {
            const deltaTime = now - lastTime;
            lastTime = now;
            update(deltaTime);
            render();
            requestAnimationFrame(loop);
        }

        window.addEventListener('resize', () => {
            canvas.width = window.innerWidth;
        });

        /* EXTRA */

        requestAnimationFrame(loop);
    </script>
</body>
</html>
"""

PHYSICS_SCRIPT = """
        const gravity = 0.5;
        const friction = 0.98;
        const bounce = 0.7;
        let velocity = { x: 0, y: 0 };
        const obstacles = [];
        function checkCollision(a, b) {
            return Math.hypot(a.x - b.x, a.y - b.y) < a.radius;
        }
"""

TRIG_SCRIPT = """
        const wobble = Math.sin(lastTime / 1000);
"""


def _build_game(extra_script: str = "", remove: tuple[str, ...] = ()) -> str:
    """Complete game markup with optional extra script and removed snippets."""
    markup = GAME_TEMPLATE.replace(EXTRA_SCRIPT, extra_script)
    for snippet in remove:
        assert snippet in markup, f"snippet not in template: {snippet}"
        markup = markup.replace(snippet, "")
    return markup


@pytest.fixture
def build_game():
    """Factory for game markup with extra script or removed snippets."""
    return _build_game


@pytest.fixture
def game_markup():
    """Complete game markup that earns full marks without a genre."""
    return _build_game()


@pytest.fixture
def physics_script():
    """Physics keywords and features without any trigonometric call."""
    return PHYSICS_SCRIPT


@pytest.fixture
def physics_markup():
    """Complete game markup with every physics pattern and feature."""
    return _build_game(PHYSICS_SCRIPT + TRIG_SCRIPT)


@pytest.fixture
def registry():
    """Freshly built default rule registry."""
    return build_registry()


@pytest.fixture
def validator(registry):
    """Validator bound to the default registry."""
    return ArtifactValidator(registry=registry)


@pytest.fixture
def validate(validator):
    """Validate markup with an optional genre."""
    def _validate(markup, genre=None, title=None):
        return validator.validate(ValidationRequest(markup=markup, genre=genre, title=title))
    return _validate
