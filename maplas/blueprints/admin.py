from flask import Blueprint, jsonify, request

from ..errors import ValidationError
from ..security import admin_required, current_role
from ..services import accounts, places
from ..utils import json_body, parse_int

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("/api/admin")
@admin_required
def admin_listing():
    action = request.args.get("action")
    if action == "pending":
        return jsonify(places.list_pending())
    if action == "users":
        return jsonify(accounts.list_users())
    if action == "stats":
        return jsonify(places.stats())
    raise ValidationError(f"Unknown action: {action}")


@admin_bp.post("/api/admin")
@admin_required
def admin_decision():
    action = request.args.get("action")
    if action not in ("approve", "reject"):
        raise ValidationError(f"Unknown action: {action}")
    place_id = parse_int(json_body().get("id"), "id")
    return jsonify(places.moderate(place_id, action, current_role()))
