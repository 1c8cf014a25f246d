import json
import logging

from .. import database
from ..errors import AuthError, ForbiddenError, NotFoundError, ValidationError
from ..utils import (
    check_coordinates,
    distance_km,
    load_json_text,
    localize_text,
    parse_float,
    title_case_city,
)
from . import rewards
from .moderation import INITIAL_STATUS, ROLE_ADMIN, ModerationAction, PlaceStatus, transition

logger = logging.getLogger(__name__)

PLACE_COLUMNS = "p.id, p.name, p.description, p.lat, p.lng, p.category, p.city, p.image_url, p.status, p.creator_id"

FAVORITE_FLAG = "EXISTS(SELECT 1 FROM favorites f WHERE f.place_id = p.id AND f.user_id = ?) AS is_favorite"

EDITABLE_FIELDS = ("name", "description", "lat", "lng", "category", "city", "imageUrl")


def serialize_place(row, distance=None):
    place = {
        "id": row["id"],
        "name": load_json_text(row["name"]),
        "description": load_json_text(row["description"]),
        "lat": row["lat"],
        "lng": row["lng"],
        "category": row["category"],
        "city": row["city"],
        "imageUrl": row["image_url"] or "",
        "status": row["status"],
        "creator_id": row["creator_id"],
    }
    if "is_favorite" in row.keys():
        place["is_favorite"] = bool(row["is_favorite"])
    if distance is not None:
        place["distance_km"] = round(distance, 3)
    return place


def _text_field(data, field):
    value = data.get(field)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value or ""


def _clean_place_input(data):
    if not isinstance(data, dict):
        raise ValidationError("Invalid body")
    name = localize_text(data.get("name"))
    if not any(text.strip() for text in name.values()):
        raise ValidationError("name is required")
    lat = parse_float(data.get("lat"), "lat")
    lng = parse_float(data.get("lng"), "lng")
    check_coordinates(lat, lng)
    return {
        "name": name,
        "description": localize_text(data.get("description")),
        "lat": lat,
        "lng": lng,
        "category": _text_field(data, "category").strip(),
        "city": title_case_city(_text_field(data, "city")),
        "image_url": _text_field(data, "imageUrl"),
    }


def get_place_row(place_id):
    return database.get_db().execute(
        f"SELECT {PLACE_COLUMNS} FROM places p WHERE p.id = ?", (place_id,)
    ).fetchone()


def create_place(data, creator_id=None):
    """Store a submission in the moderation queue.

    Authenticated submitters are credited in the same transaction as the
    insert; anonymous ones are not credited at all.
    """
    place = _clean_place_input(data)
    with database.transaction() as db:
        cursor = db.execute(
            """
            INSERT INTO places (name, description, lat, lng, category, city, image_url, status, creator_id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                json.dumps(place["name"], ensure_ascii=False),
                json.dumps(place["description"], ensure_ascii=False),
                place["lat"],
                place["lng"],
                place["category"],
                place["city"],
                place["image_url"],
                INITIAL_STATUS.value,
                creator_id,
            ),
        )
        place_id = cursor.lastrowid
        if creator_id:
            rewards.award_points(db, creator_id, rewards.PLACE_SUBMISSION_POINTS)

    logger.info("Place %s submitted by %s", place_id, creator_id or "anonymous")
    return serialize_place(get_place_row(place_id))


def list_public(user_id=None, category=None, city=None):
    query = f"SELECT {PLACE_COLUMNS}, {FAVORITE_FLAG} FROM places p WHERE p.status = ?"
    params = [user_id, PlaceStatus.APPROVED.value]
    if category:
        query += " AND p.category = ?"
        params.append(category)
    if city:
        query += " AND p.city = ?"
        params.append(title_case_city(city))
    query += " ORDER BY p.id DESC"
    rows = database.get_db().execute(query, params).fetchall()
    return [serialize_place(row) for row in rows]


def list_nearby(lat, lng, radius_km, user_id=None):
    """Approved places strictly within ``radius_km``, nearest first."""
    check_coordinates(lat, lng)
    if radius_km < 0:
        raise ValidationError("radius must not be negative")
    rows = database.get_db().execute(
        f"SELECT {PLACE_COLUMNS}, {FAVORITE_FLAG} FROM places p WHERE p.status = ?",
        (user_id, PlaceStatus.APPROVED.value),
    ).fetchall()

    matches = []
    for row in rows:
        distance = distance_km(lat, lng, row["lat"], row["lng"])
        if distance < radius_km:
            matches.append((distance, row["id"], row))
    matches.sort(key=lambda item: (item[0], item[1]))
    return [serialize_place(row, distance=distance) for distance, _, row in matches]


def list_pending():
    rows = database.get_db().execute(
        f"SELECT {PLACE_COLUMNS} FROM places p WHERE p.status = ? ORDER BY p.id DESC",
        (PlaceStatus.PENDING.value,),
    ).fetchall()
    return [serialize_place(row) for row in rows]


def list_by_creator(user_id):
    rows = database.get_db().execute(
        f"SELECT {PLACE_COLUMNS} FROM places p WHERE p.creator_id = ? ORDER BY p.id DESC",
        (user_id,),
    ).fetchall()
    return [serialize_place(row) for row in rows]


def update_place(place_id, data, user_id, role):
    if not user_id:
        raise AuthError("Authentication required")
    if not isinstance(data, dict):
        raise ValidationError("Invalid body")
    row = get_place_row(place_id)
    if not row:
        raise NotFoundError("Place not found")
    if row["creator_id"] != user_id and role != ROLE_ADMIN:
        raise ForbiddenError("Only the owner can edit this place")

    status = transition(row["status"], ModerationAction.EDIT, role)

    merged = serialize_place(row)
    merged.update({field: data[field] for field in EDITABLE_FIELDS if field in data})
    place = _clean_place_input(merged)
    with database.transaction() as db:
        db.execute(
            """
            UPDATE places
            SET name = ?, description = ?, lat = ?, lng = ?, category = ?, city = ?, image_url = ?, status = ?
            WHERE id = ?
            """,
            (
                json.dumps(place["name"], ensure_ascii=False),
                json.dumps(place["description"], ensure_ascii=False),
                place["lat"],
                place["lng"],
                place["category"],
                place["city"],
                place["image_url"],
                status.value,
                place_id,
            ),
        )
    logger.info("Place %s edited by user %s", place_id, user_id)
    return serialize_place(get_place_row(place_id))


def delete_place(place_id, role):
    row = get_place_row(place_id)
    if not row:
        raise NotFoundError("Place not found")
    transition(row["status"], ModerationAction.DELETE, role)
    with database.transaction() as db:
        db.execute("DELETE FROM places WHERE id = ?", (place_id,))
    logger.info("Place %s deleted", place_id)


def moderate(place_id, action, role):
    """Apply an admin queue decision.

    Acting on a place that no longer exists is a no-op so that repeated
    approve/reject requests stay harmless.
    """
    action = ModerationAction(action)
    row = get_place_row(place_id)
    if not row:
        # still reject non-admins before reporting the no-op
        transition(PlaceStatus.PENDING, action, role)
        logger.info("Ignoring %s for missing place %s", action.value, place_id)
        return {"id": place_id, "status": None, "changed": False}

    current = PlaceStatus(row["status"])
    new_status = transition(current, action, role)
    with database.transaction() as db:
        if new_status is None:
            db.execute("DELETE FROM places WHERE id = ?", (place_id,))
        elif new_status is not current:
            db.execute("UPDATE places SET status = ? WHERE id = ?", (new_status.value, place_id))

    logger.info("Place %s: %s -> %s", place_id, current.value, new_status.value if new_status else "deleted")
    return {
        "id": place_id,
        "status": new_status.value if new_status else None,
        "changed": new_status is not current,
    }


def stats():
    db = database.get_db()
    totals = db.execute(
        """
        SELECT
            (SELECT COUNT(*) FROM places) AS total_places,
            (SELECT COUNT(*) FROM places WHERE status = ?) AS pending_places,
            (SELECT COUNT(*) FROM users) AS total_users,
            (SELECT COUNT(*) FROM comments) AS total_comments
        """,
        (PlaceStatus.PENDING.value,),
    ).fetchone()
    categories = db.execute(
        "SELECT category, COUNT(*) AS count FROM places GROUP BY category ORDER BY category"
    ).fetchall()
    result = dict(totals)
    result["categories"] = {row["category"]: row["count"] for row in categories}
    return result
