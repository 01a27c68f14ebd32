"""Score gauge geometry and colour bands."""

# Semicircle arc "M 20 100 A 80 80 0 0 1 180 100"
GAUGE_ARC_LENGTH = 251.33

SUCCESS_THRESHOLD = 80
WARNING_THRESHOLD = 50

BAND_COLORS = {"success": "green", "warning": "yellow", "critical": "red"}


def score_band(score: float) -> str:
    if score >= SUCCESS_THRESHOLD:
        return "success"
    elif score >= WARNING_THRESHOLD:
        return "warning"
    return "critical"


def gauge_dash_array() -> str:
    return f"{GAUGE_ARC_LENGTH} {GAUGE_ARC_LENGTH}"


def gauge_dash_offset(score: float) -> float:
    """Stroke offset that leaves score percent of the arc visible."""
    percentage = min(100, max(0, score)) / 100
    return GAUGE_ARC_LENGTH * (1 - percentage)


def gauge_color_class(score: float) -> str:
    return f"gauge-stroke gauge-stroke-{score_band(score)}"


def score_text_class(score: float) -> str:
    return f"gauge-score-value score-{score_band(score)}"


def score_color(score: float) -> str:
    """Terminal colour for a score."""
    return BAND_COLORS[score_band(score)]


def score_bar(score: float, width: int = 20) -> str:
    """Text gauge, e.g. ███████░░░ for 70 with width 10."""
    filled = round(width * min(100, max(0, score)) / 100)
    return "█" * filled + "░" * (width - filled)
