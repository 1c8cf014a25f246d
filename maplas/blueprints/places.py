from flask import Blueprint, g, jsonify, request

from ..errors import ValidationError
from ..security import admin_required, current_role, login_required, optional_auth
from ..services import comments, favorites, places
from ..utils import json_body, parse_float, parse_int

places_bp = Blueprint("places", __name__)


@places_bp.get("/api/places")
@optional_auth
def list_places():
    lat = parse_float(request.args.get("lat"), "lat", required=False)
    lng = parse_float(request.args.get("lng"), "lng", required=False)
    radius = parse_float(request.args.get("radius"), "radius", required=False)

    if lat is not None and lng is not None and radius is not None:
        return jsonify(places.list_nearby(lat, lng, radius, user_id=g.user_id))
    if any(value is not None for value in (lat, lng, radius)):
        raise ValidationError("lat, lng and radius must be given together")

    return jsonify(
        places.list_public(
            user_id=g.user_id,
            category=request.args.get("category"),
            city=request.args.get("city"),
        )
    )


@places_bp.post("/api/places")
@optional_auth
def create_place():
    place = places.create_place(json_body(), creator_id=g.user_id)
    return jsonify(place), 201


@places_bp.put("/api/places")
@optional_auth
def update_place():
    data = json_body()
    place_id = parse_int(request.args.get("id", data.get("id")), "id")
    return jsonify(places.update_place(place_id, data, g.user_id, current_role()))


@places_bp.delete("/api/places")
@admin_required
def delete_place():
    place_id = parse_int(request.args.get("id"), "id")
    places.delete_place(place_id, current_role())
    return jsonify({"id": place_id, "deleted": True})


@places_bp.get("/api/comments")
def list_comments():
    place_id = parse_int(request.args.get("place_id"), "place_id")
    return jsonify(comments.list_comments(place_id))


@places_bp.post("/api/comments")
@optional_auth
def post_comment():
    comment = comments.post_comment(json_body(), user_id=g.user_id)
    return jsonify(comment), 201


@places_bp.get("/api/favorites")
@login_required
def list_favorites():
    return jsonify(favorites.list_favorites(g.user_id))


@places_bp.post("/api/favorites")
@login_required
def add_favorite():
    place_id = parse_int(json_body().get("place_id"), "place_id")
    added = favorites.add_favorite(g.user_id, place_id)
    return jsonify({"place_id": place_id, "added": added}), 201


@places_bp.delete("/api/favorites")
@login_required
def remove_favorite():
    place_id = parse_int(request.args.get("place_id"), "place_id")
    removed = favorites.remove_favorite(g.user_id, place_id)
    return jsonify({"place_id": place_id, "removed": removed})
