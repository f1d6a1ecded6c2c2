"""
Thresholds and default values for repository pulse metrics.
"""

# --- Status ---

# Score thresholds (0-100). Below COOLING is at_risk.
STATUS_THRESHOLDS = {
    "THRIVING": 75,
    "STABLE": 50,
    "COOLING": 25,
}

STATUS_LABELS = {
    "thriving": {"label": "Thriving", "description": "Excellent health and activity"},
    "stable": {"label": "Stable", "description": "Healthy and maintained"},
    "cooling": {"label": "Cooling", "description": "Declining activity"},
    "at_risk": {"label": "At Risk", "description": "Needs attention"},
}

# Percentage change needed before a trend counts as up/down
TREND_THRESHOLDS = {
    "SIGNIFICANT": 5,
    "NOTABLE": 15,
    "DRAMATIC": 30,
}

# Display-only arrow threshold, independent of TREND_THRESHOLDS
TREND_ARROW_THRESHOLD = 1
TREND_ARROW_MAX_PERCENTAGE = 999

# --- Velocity ---

VELOCITY = {
    "RECENT_WEEKS": 4,
    "PREVIOUS_WEEKS": 12,
    "SPARKLINE_WEEKS": 13,
    # Commits per week
    "COMMITS": {
        "EXCELLENT": 20,
        "GOOD": 10,
        "FAIR": 5,
        "MINIMAL": 1,
    },
    # Growth rate (percentage). Below COOLING is at_risk.
    "GROWTH": {
        "THRIVING": 25,
        "STABLE": -10,
        "COOLING": -30,
    },
}

# --- Community momentum ---

COMMUNITY = {
    "STARS": {
        "EXCELLENT": 10000,
        "GOOD": 1000,
        "FAIR": 100,
        "EMERGING": 10,
    },
    # Lifetime stars per day
    "GROWTH_RATE": {
        "THRIVING": 5,
        "STABLE": 1,
        "COOLING": 0.1,
    },
    # forks / stars
    "FORK_RATIO": {
        "HIGH": 0.3,
        "MEDIUM": 0.1,
        "LOW": 0.05,
    },
    "MAX_AGE_DAYS": 365 * 10,
    "SPARKLINE_DAYS": 30,
}

# --- Issue temperature ---

ISSUES = {
    "WINDOW_DAYS": 30,
    # Percentage of windowed issues closed
    "CLOSE_RATE": {
        "COOL": 70,
        "WARM": 40,
        "HOT": 20,
    },
    # Average days to close
    "RESPONSE_TIME": {
        "EXCELLENT": 1,
        "GOOD": 3,
        "FAIR": 7,
        "SLOW": 14,
    },
    "TEMPERATURE": {
        "cool": {"label": "Cool", "description": "Issues resolved quickly"},
        "warm": {"label": "Warm", "description": "Moderate issue activity"},
        "hot": {"label": "Hot", "description": "Issues piling up"},
        "critical": {"label": "Critical", "description": "Urgent attention needed"},
    },
}

# --- PR health ---

PR_HEALTH = {
    "WINDOW_DAYS": 30,
    "MERGE_RATE": {
        "EXCELLENT": 80,
        "GOOD": 60,
        "FAIR": 40,
        "POOR": 20,
    },
    # Average days to merge
    "TIME_TO_MERGE": {
        "EXCELLENT": 1,
        "GOOD": 3,
        "FAIR": 7,
        "SLOW": 14,
    },
    # PRs opened per week
    "VOLUME": {
        "HIGH": 10,
        "MEDIUM": 5,
        "LOW": 1,
    },
}

# --- Bus factor ---

BUS_FACTOR = {
    "MIN": 1,
    "MAX": 10,
    # Bus factor at or above this is considered healthy
    "HEALTHY": 5,
    # Share of all commits the key contributors must hold together
    "CONTINUITY_SHARE": 75,
    # Top contributor share (percentage)
    "CONCENTRATION": {
        "CRITICAL": 50,
        "WARNING": 30,
    },
    "SPARKLINE_POINTS": 10,
}

# --- Freshness ---

FRESHNESS = {
    # Days since last push. Beyond STALE is dormant.
    "PUSH_DAYS": {
        "FRESH": 7,
        "RECENT": 30,
        "AGING": 90,
        "STALE": 180,
    },
    # A release this recent promotes a "recent" push to "fresh"
    "RELEASE_BOOST_DAYS": 30,
    "LABELS": {
        "fresh": {"label": "Fresh", "description": "Actively maintained"},
        "recent": {"label": "Recent", "description": "Recently updated"},
        "aging": {"label": "Aging", "description": "Showing signs of age"},
        "stale": {"label": "Stale", "description": "May be unmaintained"},
        "dormant": {"label": "Dormant", "description": "Likely abandoned"},
    },
}

# --- Overall pulse ---

METRIC_KEYS = ("velocity", "momentum", "issues", "prs", "busFactor", "freshness")

PULSE = {
    # Per-metric weights, summing to 100
    "WEIGHTS": {
        "velocity": 20,
        "momentum": 15,
        "issues": 20,
        "prs": 15,
        "busFactor": 15,
        "freshness": 15,
    },
    "STATUS_SCORES": {
        "thriving": 100,
        "stable": 70,
        "cooling": 40,
        "at_risk": 15,
    },
    # Milliseconds per heartbeat
    "ANIMATION_SPEED": {
        "thriving": 800,
        "stable": 1200,
        "cooling": 1800,
        "at_risk": 2500,
    },
    # Tuned for exactly six metrics
    "AGGREGATION": {
        "AT_RISK_COUNT": 2,
        "COOLING_COUNT": 3,
        "THRIVING_COUNT": 4,
    },
}

# --- Time ---

DAY_SECONDS = 24 * 60 * 60
