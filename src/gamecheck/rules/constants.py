"""Rule tables for generated game artifacts.

All selectors, script patterns, weights and genre bundles centralized for
easy maintenance. The tables are plain literals; `registry.build_registry`
compiles them into immutable rule objects once per process.
"""

# Reference scale the grade and pass thresholds are expressed against
REFERENCE_TOTAL = 130

FILES = "files"
STRUCTURE = "structure"
SCRIPT_LOGIC = "script-logic"
INTEGRATION = "integration"
GENRE_COMPLIANCE = "genre-compliance"
PERFORMANCE = "performance"

# Enumeration order drives report ordering
CATEGORY_ORDER: tuple[str, ...] = (
    FILES,
    STRUCTURE,
    SCRIPT_LOGIC,
    INTEGRATION,
    GENRE_COMPLIANCE,
    PERFORMANCE,
)

CATEGORY_WEIGHTS: dict[str, int] = {
    FILES: 10,
    STRUCTURE: 25,
    SCRIPT_LOGIC: 35,
    INTEGRATION: 20,
    GENRE_COMPLIANCE: 30,
    PERFORMANCE: 10,
}

# Manual review / report path vs. auto-acceptance in the generation pipeline
REPORT_PASS_THRESHOLD = 80
PIPELINE_PASS_THRESHOLD = 95

GRADE_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("A+", 90),
    ("A", 80),
    ("B+", 70),
    ("B", 60),
    ("C", 50),
)
FAILING_GRADE = "F"

# --- files ------------------------------------------------------------------

FILE_POINTS: dict[str, int] = {
    "non_empty": 4,
    "size_budget": 3,
    "inline_script": 3,
}

DEFAULT_MAX_ARTIFACT_BYTES = 512_000

# --- structure --------------------------------------------------------------

ELEMENT_WEIGHT = 15

# (key, label, selector alternatives in order, required)
ELEMENT_RULES: tuple[tuple[str, str, tuple[str, ...], bool], ...] = (
    ("canvas", "game canvas", ("canvas#gameCanvas", "canvas", "[data-game-surface]"), True),
    ("session-code", "session code display", ("#session-code", "#sessionCode", ".session-code"), True),
    ("qr-code", "QR code container", ("#qr-code", "#qrcode", ".qr-code"), True),
    ("sensor-status", "sensor status indicator", ("#sensor-status", ".sensor-status"), False),
    ("score-display", "score display", ("#score", ".score", "[data-score]"), False),
)

OUTLINE_POINTS: dict[str, int] = {
    "doctype": 3,
    "html": 1,
    "head": 1,
    "body": 1,
    "charset": 1,
    "viewport": 1,
    "title": 2,
}

# --- integration ------------------------------------------------------------

RESOURCE_WEIGHT = 6

# (key, label, exact src path)
RESOURCE_RULES: tuple[tuple[str, str, str], ...] = (
    ("socket-io", "Socket.IO client", "/socket.io/socket.io.js"),
    ("session-sdk", "SessionSDK", "/js/SessionSDK.js"),
)

# (key, label, expression, required, weight); a tuple of expressions means
# every part must be present, in any order
INTEGRATION_PATTERNS: tuple[tuple[str, str, str | tuple[str, ...], bool, int], ...] = (
    ("sdk-init", "SessionSDK initialization (new SessionSDK)", r"\bnew\s+SessionSDK\s*\(", True, 4),
    (
        "sdk-config",
        "gameId and gameType in the SDK options",
        (r"\bgameId\s*:", r"\bgameType\s*:"),
        False,
        2,
    ),
    ("connected-handler", "'connected' event handler", r"\.on\(\s*['\"]connected['\"]", False, 3),
    ("session-created-handler", "'session-created' event handler", r"['\"]session-created['\"]", False, 2),
    ("event-unwrapping", "CustomEvent unwrapping (event.detail || event)", r"\b(\w+)\.detail\s*\|\|\s*\1\b", False, 3),
)

READINESS_PATTERN = "connected-handler"
START_PATTERN = ("session-start", "createSession() call", r"\.createSession\s*\(")

# --- script logic -----------------------------------------------------------

SCRIPT_PATTERN_WEIGHT = 20

# (key, label, expression)
SCRIPT_PATTERNS: tuple[tuple[str, str, str], ...] = (
    ("context-2d", "canvas 2D rendering context", r"\.getContext\(\s*['\"]2d['\"]"),
    ("sensor-data-handler", "'sensor-data' event handler", r"\.on\(\s*['\"]sensor-data['\"]"),
    ("score-update", "score update logic", r"\bscore\s*(?:\+\+|\+=)"),
    ("game-state", "game state flags", r"\b(?:gameStarted|gameOver|isPaused|isPlaying|gameState)\b"),
    ("reset-function", "game reset/restart function", r"\b(?:resetGame|restartGame)\b"),
)

# (key, label, expression, weight)
ADVANCED_PATTERNS: tuple[tuple[str, str, str | tuple[str, ...], int], ...] = (
    ("error-handling", "try/catch error handling", (r"\btry\s*\{", r"\}\s*catch\b"), 5),
    ("render-loop", "requestAnimationFrame render loop", r"\brequestAnimationFrame\s*\(", 5),
    (
        "clamp-idiom",
        "clamped numeric range (Math.max/Math.min)",
        r"Math\.(?:max|min)\(\s*[^,()]+,\s*Math\.(?:min|max)\(|Math\.(?:min|max)\(\s*Math\.(?:max|min)\(",
        5,
    ),
)

SYNTAX_ERROR_PENALTY = 5

DELIMITER_PAIRS: tuple[tuple[str, str, str], ...] = (
    ("parentheses", "(", ")"),
    ("brackets", "[", "]"),
    ("braces", "{", "}"),
)

KNOWN_MISSPELLINGS: dict[str, str] = {
    "addEventListner": "addEventListener",
    "addEventListenter": "addEventListener",
    "removeEventListner": "removeEventListener",
    "requestAnimationFrme": "requestAnimationFrame",
    "requestAnimatonFrame": "requestAnimationFrame",
    "getContex": "getContext",
    "getElementByID": "getElementById",
    "lenght": "length",
    "heigth": "height",
    "widht": "width",
    "sesionCode": "sessionCode",
    "sessoinCode": "sessionCode",
    "cosnole": "console",
    "documnet": "document",
    "fucntion": "function",
    "retrun": "return",
}

# (key, expression, warning message)
ANTI_PATTERNS: tuple[tuple[str, str, str], ...] = (
    (
        "qr-code-url",
        r"\.qrCodeUrl\b",
        "session.qrCodeUrl does not exist; build the sensor URL from session.sessionCode",
    ),
    (
        "session-code-property",
        r"\bsession\.code\b",
        "session.code is not part of the session payload; use session.sessionCode",
    ),
)

# --- advisory checks (no points) --------------------------------------------

# Applied only when the script handles 'sensor-data'
SENSOR_TYPES: tuple[str, ...] = ("orientation", "acceleration", "rotationRate")
SENSOR_SMOOTHING_PATTERN = r"smooth|filter|threshold"

STYLESHEET_SELECTOR = "style, link[rel~=stylesheet]"
RESPONSIVE_PATTERN = r"@media\b"
BUTTON_SELECTOR = "button, [onclick], input[type=button]"

# --- performance ------------------------------------------------------------

# (key, label, expression, weight, forbidden)
PERFORMANCE_PATTERNS: tuple[tuple[str, str, str, int, bool], ...] = (
    ("raf-loop", "requestAnimationFrame game loop", r"\brequestAnimationFrame\s*\(", 4, False),
    ("document-write", "document.write()", r"\bdocument\.write(?:ln)?\s*\(", 2, True),
    (
        "resize-handling",
        "viewport resize handling",
        r"addEventListener\(\s*['\"]resize['\"]|\bonresize\b|\bResizeObserver\b",
        2,
        False,
    ),
    ("frame-delta", "frame delta timing", r"\b(?:deltaTime|delta|dt)\b|\bperformance\.now\s*\(", 2, False),
)

INTERVAL_LOOP_PATTERN = r"\bsetInterval\s*\("

# --- genres -----------------------------------------------------------------

GENRE_PATTERN_WEIGHT = 15
GENRE_FEATURE_WEIGHT = 15

# key -> label, aliases, patterns [(key, label, expression)], features [(name, aliases)]
GENRE_BUNDLES: dict[str, dict] = {
    "physics": {
        "label": "Physics",
        "aliases": ("물리", "physics game"),
        "patterns": (
            ("gravity", "gravity simulation", r"\bgravity\b"),
            ("velocity", "velocity integration", r"\b(?:velocity|vx|vy)\b"),
            ("collision", "collision detection", r"collision|collide|\bintersects?\b"),
            ("trigonometry", "trigonometric motion (Math.sin/cos/atan2)", r"\bMath\.(?:sin|cos|tan|atan2?)\s*\("),
        ),
        "features": (
            ("friction", ("friction", "마찰")),
            ("bounce", ("bounce", "restitution", "elastic", "탄성")),
            ("tilt control", ("tilt", "orientation.beta", "orientation.gamma", "기울기")),
            ("obstacles", ("obstacle", "wall", "장애물")),
        ),
    },
    "cooking": {
        "label": "Cooking",
        "aliases": ("요리", "cooking simulation"),
        "patterns": (
            ("shake-gesture", "shake/stir gesture detection", r"\b(?:shake|stir|flip)\w*"),
            ("recipe", "recipe steps", r"\brecipes?\b|\bingredients?\b"),
            ("cook-timer", "cooking timer", r"\bcook(?:ing)?Time\b|\btimer\b|\belapsed\b"),
            ("quality-check", "result quality evaluation", r"\bquality\b|\bperfect\b|\bburnt\b"),
        ),
        "features": (
            ("step guide", ("step", "guide", "단계")),
            ("visual feedback", ("smoke", "steam", "sizzle", "연기")),
            ("success/failure verdict", ("success", "fail", "성공", "실패")),
            ("order queue", ("order", "customer", "주문")),
        ),
    },
    "action": {
        "label": "Action",
        "aliases": ("액션", "action game"),
        "patterns": (
            ("combo", "combo system", r"\bcombo\w*"),
            ("difficulty", "difficulty progression", r"\bdifficulty\b|\blevel\b"),
            ("speed-ramp", "speed ramp-up", r"\bspeed\w*\s*(?:\*=|\+=)"),
            ("spawning", "enemy/object spawning", r"\bspawn\w*|\benem(?:y|ies)\b"),
        ),
        "features": (
            ("hit feedback", ("flash", "particle", "explosion", "effect")),
            ("high score", ("highscore", "bestscore", "localstorage", "최고")),
            ("lives", ("lives", "health", "hearts")),
            ("power-ups", ("powerup", "power-up", "bonus")),
        ),
    },
    "puzzle": {
        "label": "Puzzle",
        "aliases": ("퍼즐", "puzzle game"),
        "patterns": (
            ("levels", "level progression", r"\b(?:level|stage)\w*"),
            ("hints", "hint system", r"\bhints?\b|\bshowHint\b"),
            ("solve-check", "solution check", r"\b(?:isSolved|checkSolution|checkWin|solved)\b"),
            ("move-count", "move counter", r"\bmoves?\b|\bmoveCount\b"),
        ),
        "features": (
            ("hint button", ("hint", "힌트")),
            ("timer", ("timer", "countdown", "시간")),
            ("undo/retry", ("undo", "retry", "다시")),
            ("star rating", ("star", "rating", "별")),
        ),
    },
    "racing": {
        "label": "Racing",
        "aliases": ("레이싱", "racing game"),
        "patterns": (
            ("steering", "tilt steering", r"\bsteer\w*|orientation\.gamma"),
            ("acceleration", "acceleration handling", r"\baccelerat\w*"),
            ("laps", "lap tracking", r"\blaps?\b|\blapCount\b|\blapTime\b"),
            ("track", "track rendering", r"\btrack\b|\broad\b"),
        ),
        "features": (
            ("lap time", ("laptime", "lap time", "랩")),
            ("boost", ("boost", "nitro", "부스트")),
            ("opponents", ("opponent", "rival", "경쟁")),
            ("speedometer", ("speedometer", "km/h", "kmh", "속도")),
        ),
    },
}
