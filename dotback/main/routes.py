from flask import Blueprint
from ..levels import list_levels

main_bp = Blueprint("main", __name__)

@main_bp.route("/health")
def health():
    return {"status": "ok"}

@main_bp.route("/api/get/levels")
def public_levels():
    """Read-only level list for the game client; no login needed."""
    items = list_levels()
    return {"levels": items, "count": len(items)}
