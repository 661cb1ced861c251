"""Canonical shape for level records.

Stored levels have been written under three older schemas before the current
palette + size table + scored dots layout. Each record is classified by a
fixed set of marker fields and converted with the function for its shape:

``FIXED_COLORS``
    ``dot1Color`` .. ``dot5Color`` plus a shared ``backgroundColor``.
``SCORED_DOTS``
    ``dots`` entries carrying a free-form ``size`` and a single ``score``.
``SIZED_DOTS``
    ``dots`` entries carrying ``sizeScore`` / ``colorScore`` / ``totalScore``.
``CANONICAL``
    ``colors`` / ``dotSizes`` / ``dots`` with ``colorScore``.

Legacy dots are first lifted to *sized dots* (color, size and both scores,
with ``totalScore`` always recomputed) and then projected onto the canonical
``{"color", "colorScore"}`` dot. When a legacy record has no stored palette or
size table, the colors and sizes its dots use are merged into the predefined
ones so that no migrated dot is left without a palette entry.
"""
from enum import Enum

from .errors import ValidationError
from .palette import classify, palette_key
from .scores import (
    LEGACY_SIZE_CYCLE,
    LEGACY_SIZE_SCORE_CYCLE,
    color_score,
    default_colors,
    default_dot_sizes,
    size_score,
    to_int,
)

LEGACY_COLOR_FIELDS = ("dot1Color", "dot2Color", "dot3Color", "dot4Color", "dot5Color")
# largest value the integer column holds
MAX_TARGET_SCORE = 2**63 - 1


class RecordShape(Enum):
    CANONICAL = "canonical"
    SIZED_DOTS = "sized_dots"
    SCORED_DOTS = "scored_dots"
    FIXED_COLORS = "fixed_colors"


def detect_shape(raw) -> RecordShape:
    dots = [d for d in raw.get("dots") or [] if isinstance(d, dict)]
    if dots:
        if any("sizeScore" in d or "totalScore" in d for d in dots):
            return RecordShape.SIZED_DOTS
        if any("score" in d and "colorScore" not in d for d in dots):
            return RecordShape.SCORED_DOTS
        return RecordShape.CANONICAL
    if any(raw.get(field) for field in LEGACY_COLOR_FIELDS):
        return RecordShape.FIXED_COLORS
    return RecordShape.CANONICAL


def _dot_color(dot):
    color = dot.get("color")
    if isinstance(color, str) and color.strip():
        return color
    return None


def _sized(color, size, size_points, color_points):
    return {
        "color": color,
        "size": size,
        "sizeScore": size_points,
        "colorScore": color_points,
        "totalScore": size_points + color_points,
    }


def lift_sized_dots(dots):
    lifted = []
    for dot in dots:
        color = _dot_color(dot)
        if color is None:
            continue
        size = dot.get("size") if isinstance(dot.get("size"), str) else ""
        lifted.append(
            _sized(
                color,
                size,
                to_int(dot.get("sizeScore"), size_score(size)),
                to_int(dot.get("colorScore"), color_score(color)),
            )
        )
    return lifted


def lift_scored_dots(dots):
    lifted = []
    for dot in dots:
        color = _dot_color(dot)
        if color is None:
            continue
        position = len(lifted) % len(LEGACY_SIZE_CYCLE)
        lifted.append(
            _sized(
                color,
                LEGACY_SIZE_CYCLE[position],
                LEGACY_SIZE_SCORE_CYCLE[position],
                to_int(dot.get("score"), color_score(color)),
            )
        )
    return lifted


def lift_fixed_colors(raw):
    dots = []
    for field in LEGACY_COLOR_FIELDS:
        color = raw.get(field)
        if isinstance(color, str) and color.strip():
            dots.append({"color": color, "colorScore": color_score(color)})
    return dots


def canonical_dots(dots):
    result = []
    for dot in dots:
        color = _dot_color(dot)
        if color is None:
            continue
        result.append({"color": color, "colorScore": to_int(dot.get("colorScore"), color_score(color))})
    return result


def _stored_entries(entries, id_field):
    cleaned = []
    for entry in entries or []:
        if not isinstance(entry, dict):
            continue
        ident = entry.get(id_field)
        if isinstance(ident, str) and ident.strip():
            cleaned.append({id_field: ident, "score": to_int(entry.get("score"), 0)})
    return cleaned


def _used_entries(items, id_field, score_field):
    seen = {}
    for item in items:
        key = palette_key(item[id_field])
        if key and key not in seen:
            seen[key] = {id_field: item[id_field], "score": item[score_field]}
    return list(seen.values())


def _extend(defaults, used, id_field):
    # Predefined entries win over anything inferred from legacy dots.
    known = {palette_key(entry[id_field]) for entry in defaults}
    return defaults + [entry for entry in used if palette_key(entry[id_field]) not in known]


def canonicalize(raw):
    """Return the canonical level dict for a stored or submitted record."""
    if not isinstance(raw, dict):
        raise ValidationError("Invalid payload.")
    shape = detect_shape(raw)

    sized = []
    if shape is RecordShape.SIZED_DOTS:
        sized = lift_sized_dots(d for d in raw["dots"] if isinstance(d, dict))
        dots = canonical_dots(sized)
    elif shape is RecordShape.SCORED_DOTS:
        sized = lift_scored_dots(d for d in raw["dots"] if isinstance(d, dict))
        dots = canonical_dots(sized)
    elif shape is RecordShape.FIXED_COLORS:
        dots = lift_fixed_colors(raw)
    else:
        dots = canonical_dots(d for d in raw.get("dots") or [] if isinstance(d, dict))

    colors = _stored_entries(raw.get("colors"), "color")
    if not colors:
        colors = default_colors()
        if shape is not RecordShape.CANONICAL:
            colors = _extend(colors, _used_entries(dots, "color", "colorScore"), "color")
    colors.sort(key=lambda entry: palette_key(entry["color"]))

    dot_sizes = _stored_entries(raw.get("dotSizes"), "size")
    if not dot_sizes:
        dot_sizes = default_dot_sizes()
        if sized:
            dot_sizes = _extend(dot_sizes, _used_entries(sized, "size", "sizeScore"), "size")

    background = raw.get("background")
    if background is None:
        background = raw.get("backgroundColor")

    level = {
        "level": to_int(raw.get("level"), None),
        "background": background or None,
        "logoUrl": raw.get("logoUrl") or None,
        "colors": colors,
        "dotSizes": dot_sizes,
        "dots": dots,
        "targetScore": max(0, to_int(raw.get("targetScore"), 0)),
        "useDefaultColors": classify(colors, default_colors(), "color"),
        "useDefaultDotSizes": classify(dot_sizes, default_dot_sizes(), "size"),
    }
    for key in ("_id", "createdAt", "updatedAt"):
        if key in raw:
            level[key] = raw[key]
    return level


def clean_fields(payload):
    """Validate the scalar fields of a create/update payload.

    Only keys present in ``payload`` are returned, so callers can tell an
    omitted field from one being cleared.
    """
    fields = {}
    for key in ("background", "logoUrl"):
        if key not in payload:
            continue
        value = payload[key]
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"Field {key} must be a string.")
        fields[key] = value if value and value.strip() else None
    if payload.get("targetScore") is not None:
        score = max(0, to_int(payload["targetScore"], 0))
        if score > MAX_TARGET_SCORE:
            raise ValidationError(f"Field targetScore must be at most {MAX_TARGET_SCORE}.")
        fields["targetScore"] = score
    return fields
