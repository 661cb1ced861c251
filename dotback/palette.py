"""Palette reconciliation for level colors and dot sizes.

Partial updates are key-merged into the stored palette: entries are keyed by
their lower-cased identifier, incoming entries win on collision, new keys are
added and keys the update does not mention are kept.
"""
from .errors import ValidationError
from .scores import default_colors, default_dot_sizes, to_int

DEFAULT = "default"
CUSTOM = "custom"


def palette_key(value) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def validate_entries(entries, field, id_field, label):
    """Check a submitted palette list and coerce its scores.

    Returns new ``{id_field: str, "score": int}`` dicts in submission order.
    """
    if not isinstance(entries, list):
        raise ValidationError(f"Field {field} must be an array.")
    cleaned = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValidationError(f"{label} at index {index} must be an object.")
        ident = entry.get(id_field)
        if not isinstance(ident, str) or not ident.strip():
            raise ValidationError(
                f"{label} at index {index} must have a non-empty {id_field} string."
            )
        cleaned.append({id_field: ident, "score": to_int(entry.get("score"), 0)})
    return cleaned


def merge(existing, incoming, id_field):
    """Key-merge ``incoming`` into ``existing``.

    Both are lists of palette entries. Returns a dict of key -> entry in
    first-seen order; an overwritten key keeps its original position.
    """
    merged = {}
    for entry in existing or []:
        key = palette_key(entry.get(id_field))
        if key:
            merged[key] = dict(entry)
    for entry in incoming or []:
        key = palette_key(entry.get(id_field))
        if key:
            merged[key] = dict(entry)
    return merged


def classify(palette, defaults, id_field) -> str:
    """Tag a palette ``default`` when it matches the predefined one value-for-value."""
    current = {(palette_key(e.get(id_field)), to_int(e.get("score"), 0)) for e in palette}
    expected = {(palette_key(e[id_field]), e["score"]) for e in defaults}
    if len(palette) == len(defaults) and current == expected:
        return DEFAULT
    return CUSTOM


def _reconcile(existing, incoming, field, id_field, label, defaults_factory):
    if incoming is not None:
        incoming = validate_entries(incoming, field, id_field, label)
    if not existing and not incoming:
        return defaults_factory()
    return list(merge(existing, incoming, id_field).values())


def reconcile_colors(existing, incoming=None):
    """Return ``(colors, tag)`` for a stored palette and an optional update list."""
    merged = _reconcile(existing, incoming, "colors", "color", "Color", default_colors)
    merged.sort(key=lambda entry: palette_key(entry["color"]))
    return merged, classify(merged, default_colors(), "color")


def reconcile_dot_sizes(existing, incoming=None):
    """Return ``(dot_sizes, tag)``; sizes keep their submission order."""
    merged = _reconcile(existing, incoming, "dotSizes", "size", "Dot size", default_dot_sizes)
    return merged, classify(merged, default_dot_sizes(), "size")
