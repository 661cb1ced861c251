"""Level store: create, read, update and delete level configurations.

Every read goes through :func:`canonicalize`, so callers always see the
current shape whatever schema a row was written under. Writes reconcile the
palettes, resolve the dots and store the canonical result.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError

from .assets import release_logo
from .dots import prune_dots, resolve_dots, split_orphans
from .errors import NotFoundError, StorageError, ValidationError
from .models import LevelConfig, db
from .normalize import canonicalize, clean_fields
from .palette import reconcile_colors, reconcile_dot_sizes

MIN_LEVEL = 1
MAX_LEVEL = 10


def looks_numeric(ref):
    """True for refs meant as a level number, signed or non-ASCII digits included."""
    text = ref.strip().lstrip("+-") if isinstance(ref, str) else ""
    return text.isdigit()


def parse_level(value):
    """Return ``value`` as a level number in [1, 10] or raise ValidationError."""
    number = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdecimal():
            number = int(text)
    if number is None or not MIN_LEVEL <= number <= MAX_LEVEL:
        raise ValidationError("Level must be an integer between 1 and 10.")
    return number


def _serialize(row):
    return canonicalize(row.to_document())


def _commit(action):
    try:
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to %s level", action)
        raise StorageError(f"Unable to {action} level.") from exc


def _find(ref):
    """Look a level up by number, or by record id when ``ref`` is not a number."""
    if isinstance(ref, str) and not looks_numeric(ref):
        return db.session.get(LevelConfig, ref.strip())
    return LevelConfig.query.filter_by(level=parse_level(ref)).first()


def _resolve_incoming_dots(colors, dots):
    resolved = resolve_dots(colors, dots)
    _, dropped = split_orphans(colors, dots)
    if dropped:
        current_app.logger.info("Dropped %d dot(s) with colors outside the palette", len(dropped))
    return resolved


def list_levels():
    rows = LevelConfig.query.order_by(LevelConfig.level.asc()).all()
    return [_serialize(row) for row in rows]


def get_level(number):
    row = LevelConfig.query.filter_by(level=parse_level(number)).first()
    if row is None:
        raise NotFoundError("Level not found.")
    return _serialize(row)


def get_level_by_id(record_id):
    row = db.session.get(LevelConfig, record_id)
    if row is None:
        raise NotFoundError("Level not found.")
    return _serialize(row)


def next_free_level():
    used = {number for (number,) in db.session.query(LevelConfig.level).all()}
    for number in range(MIN_LEVEL, MAX_LEVEL + 1):
        if number not in used:
            return number
    return None


def build_level(payload):
    """Canonical level dict for a brand new row, validated but not stored."""
    fields = clean_fields(payload)
    colors, colors_tag = reconcile_colors(None, payload.get("colors"))
    dot_sizes, sizes_tag = reconcile_dot_sizes(None, payload.get("dotSizes"))
    dots = payload.get("dots")
    return {
        "background": fields.get("background"),
        "logoUrl": fields.get("logoUrl"),
        "colors": colors,
        "dotSizes": dot_sizes,
        "dots": _resolve_incoming_dots(colors, dots) if dots is not None else [],
        "targetScore": fields.get("targetScore", 0),
        "useDefaultColors": colors_tag,
        "useDefaultDotSizes": sizes_tag,
    }


def create_level(payload=None):
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid payload.")

    if payload.get("level") is not None:
        number = parse_level(payload["level"])
        if LevelConfig.query.filter_by(level=number).first() is not None:
            raise ValidationError(f"Level {number} already exists.")
    else:
        number = next_free_level()
        if number is None:
            raise ValidationError("All 10 levels already exist.")

    row = LevelConfig(level=number)
    row.apply_canonical(build_level(payload))
    db.session.add(row)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise ValidationError(f"Level {number} already exists.") from exc
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to create level %d", number)
        raise StorageError("Unable to create level.") from exc

    current_app.logger.info("Created level %d", number)
    return _serialize(row)


def update_level(ref, payload):
    """Apply a partial update to an existing level; never creates one."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid payload.")
    row = _find(ref)
    if row is None:
        raise NotFoundError("Level not found.")

    current = _serialize(row)
    fields = clean_fields(payload)

    colors, colors_tag = reconcile_colors(current["colors"], payload.get("colors"))
    dot_sizes, sizes_tag = reconcile_dot_sizes(current["dotSizes"], payload.get("dotSizes"))

    if payload.get("dots") is not None:
        dots = _resolve_incoming_dots(colors, payload["dots"])
    elif payload.get("colors") is not None:
        dots = prune_dots(colors, current["dots"])
        if len(dots) != len(current["dots"]):
            current_app.logger.info(
                "Level %d: palette change removed %d dot(s)",
                row.level,
                len(current["dots"]) - len(dots),
            )
    else:
        dots = current["dots"]

    updated = dict(current)
    updated.update(fields)
    updated.update(
        colors=colors,
        dotSizes=dot_sizes,
        dots=dots,
        useDefaultColors=colors_tag,
        useDefaultDotSizes=sizes_tag,
    )

    old_logo = current["logoUrl"]
    row.apply_canonical(updated)
    _commit("update")

    if old_logo and old_logo != updated["logoUrl"]:
        release_logo(old_logo)
    current_app.logger.info("Updated level %d", row.level)
    return _serialize(row)


def delete_level(number):
    row = LevelConfig.query.filter_by(level=parse_level(number)).first()
    if row is None:
        raise NotFoundError("Level not found.")

    deleted = _serialize(row)
    db.session.delete(row)
    _commit("delete")

    if deleted["logoUrl"]:
        release_logo(deleted["logoUrl"])
    current_app.logger.info("Deleted level %d", deleted["level"])
    return deleted
