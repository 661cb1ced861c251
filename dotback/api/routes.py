from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required
from .. import levels
from ..errors import ValidationError

levels_bp = Blueprint("levels", __name__, url_prefix="/api/levels")


def _payload():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid payload.")
    return data


def _level_number(value):
    try:
        return levels.parse_level(value)
    except ValidationError:
        raise ValidationError("Invalid level.") from None


@levels_bp.before_request
@login_required
def require_admin():
    """Every level endpoint needs a logged-in admin."""


@levels_bp.get("")
def list_levels():
    current_app.logger.info("GET /api/levels for %s", current_user.email)
    return {"levels": levels.list_levels()}


@levels_bp.post("")
def create_level():
    level = levels.create_level(_payload())
    return jsonify({"level": level}), 201


@levels_bp.get("/<ref>")
def get_level(ref):
    return {"level": levels.get_level(_level_number(ref))}


@levels_bp.put("/<ref>")
def update_level(ref):
    if levels.looks_numeric(ref):
        ref = _level_number(ref)
    return {"level": levels.update_level(ref, _payload())}


@levels_bp.delete("/<ref>")
def delete_level(ref):
    return {"level": levels.delete_level(_level_number(ref))}
