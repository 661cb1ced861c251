"""Static score tables and the predefined palettes.

Lookups are total: anything unknown, empty or malformed scores 0.
"""
import math
import re

_HEX_COLOR = re.compile(r"^(?:[0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})$")

DEFAULT_COLORS = [
    {"color": "#0000ff", "score": 40},
    {"color": "#00ff00", "score": 20},
    {"color": "#ff0000", "score": 10},
    {"color": "#ffff00", "score": 50},
    {"color": "#ffffff", "score": 30},
]

DEFAULT_DOT_SIZES = [
    {"size": "tiny", "score": 50},
    {"size": "small", "score": 40},
    {"size": "medium", "score": 30},
    {"size": "large", "score": 20},
    {"size": "huge", "score": 10},
]

# Pixel sizes used by the score-only dot records, paired by position.
LEGACY_SIZE_CYCLE = ["20px", "30px", "40px", "50px", "60px"]
LEGACY_SIZE_SCORE_CYCLE = [50, 40, 30, 20, 10]

FALLBACK_COLOR = "#000000"

COLOR_SCORES = {entry["color"]: entry["score"] for entry in DEFAULT_COLORS}
COLOR_SCORES[FALLBACK_COLOR] = 0

SIZE_SCORES = {entry["size"]: entry["score"] for entry in DEFAULT_DOT_SIZES}
SIZE_SCORES.update(zip(LEGACY_SIZE_CYCLE, LEGACY_SIZE_SCORE_CYCLE))


def default_colors():
    return [dict(entry) for entry in DEFAULT_COLORS]


def default_dot_sizes():
    return [dict(entry) for entry in DEFAULT_DOT_SIZES]


def normalize_color(color) -> str:
    """Lower-case, trim and give bare hex values their ``#``."""
    if not isinstance(color, str):
        return ""
    value = color.strip().lower()
    if value and not value.startswith("#") and _HEX_COLOR.match(value):
        value = f"#{value}"
    return value


def normalize_size(size) -> str:
    if not isinstance(size, str):
        return ""
    value = " ".join(size.strip().lower().split())
    if value.isdigit():
        value = f"{value}px"
    return value


def color_score(color) -> int:
    return COLOR_SCORES.get(normalize_color(color), 0)


def size_score(size) -> int:
    return SIZE_SCORES.get(normalize_size(size), 0)


def to_int(value, default=0):
    """Coerce stored or submitted numbers to a true int.

    Fractions are floored; booleans, blanks and non-numeric values give
    ``default``.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.floor(value) if math.isfinite(value) else default
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            return default
        return math.floor(number) if math.isfinite(number) else default
    return default
