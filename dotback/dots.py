"""Assign colors and scores to placed dots against a reconciled palette."""
from .errors import ValidationError
from .palette import palette_key
from .scores import FALLBACK_COLOR, color_score, to_int

_MISSING = object()


def _lookup(palette):
    return {palette_key(entry["color"]): entry for entry in palette}


def _validate(dots):
    if not isinstance(dots, list):
        raise ValidationError("Field dots must be an array.")
    for index, dot in enumerate(dots):
        if not isinstance(dot, dict):
            raise ValidationError(f"Dot at index {index} must be an object.")
        color = dot.get("color")
        if color is not None and not isinstance(color, str):
            raise ValidationError(f"Dot at index {index} must have color as a string.")


def _score_for(dot, entry):
    score = to_int(dot.get("colorScore"), _MISSING)
    if score is not _MISSING:
        return score
    if entry is not None:
        return to_int(entry.get("score"), 0)
    return color_score(dot.get("color"))


def split_orphans(palette, dots):
    """Partition dots into (kept, dropped) by whether their color is in the palette.

    Dots without a color are always kept; they get one assigned later.
    """
    valid = _lookup(palette)
    kept, dropped = [], []
    for dot in dots:
        key = palette_key(dot.get("color"))
        if key and key not in valid:
            dropped.append(dot)
        else:
            kept.append(dot)
    return kept, dropped


def resolve_dots(palette, dots):
    """Build the dots list to persist from a submitted list.

    Orphaned dots are dropped, color-less dots take ``palette[i % len]`` where
    ``i`` is their index after filtering, and missing scores come from the
    palette (or the static table).
    """
    _validate(dots)
    lookup = _lookup(palette)
    kept, _ = split_orphans(palette, dots)

    resolved = []
    for index, dot in enumerate(kept):
        key = palette_key(dot.get("color"))
        if key:
            resolved.append({"color": dot["color"], "colorScore": _score_for(dot, lookup[key])})
        elif palette:
            entry = palette[index % len(palette)]
            resolved.append({"color": entry["color"], "colorScore": to_int(entry.get("score"), 0)})
        else:
            resolved.append({"color": FALLBACK_COLOR, "colorScore": 0})
    return resolved


def prune_dots(palette, dots):
    """Drop stored dots whose color left the palette, keeping order and scores."""
    kept, _ = split_orphans(palette, dots or [])
    return [
        {"color": dot.get("color"), "colorScore": to_int(dot.get("colorScore"), 0)}
        for dot in kept
    ]
