from flask import Blueprint, current_app, g, jsonify, request

from ..errors import ValidationError
from ..security import login_required
from ..services import accounts, places, rewards
from ..utils import DEFAULT_LANGUAGE, json_body, parse_int

user_bp = Blueprint("user", __name__)


@user_bp.get("/api/user")
@login_required
def profile():
    action = request.args.get("action")
    if action == "places":
        return jsonify(places.list_by_creator(g.user_id))
    if action == "comments":
        locale = request.args.get("lang", DEFAULT_LANGUAGE)
        return jsonify(accounts.list_comments_by_user(g.user_id, locale))
    if action:
        raise ValidationError(f"Unknown action: {action}")
    return jsonify(accounts.get_profile(g.user_id))


@user_bp.put("/api/user")
@login_required
def update_profile():
    return jsonify(accounts.update_profile(g.user_id, json_body()))


@user_bp.get("/api/leaderboard")
def leaderboard():
    limit = parse_int(request.args.get("limit"), "limit", required=False)
    if limit is None:
        limit = current_app.config["LEADERBOARD_SIZE"]
    return jsonify(rewards.leaderboard(limit))
