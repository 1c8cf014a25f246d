import logging

from .. import database
from ..errors import NotFoundError
from .places import PLACE_COLUMNS, serialize_place

logger = logging.getLogger(__name__)


def list_favorites(user_id):
    # a user's own list shows favorites whatever their moderation status
    rows = database.get_db().execute(
        f"""
        SELECT {PLACE_COLUMNS}, 1 AS is_favorite
        FROM places p
        JOIN favorites f ON p.id = f.place_id
        WHERE f.user_id = ?
        ORDER BY f.created_at DESC, p.id DESC
        """,
        (user_id,),
    ).fetchall()
    return [serialize_place(row) for row in rows]


def add_favorite(user_id, place_id):
    db = database.get_db()
    if not db.execute("SELECT 1 FROM places WHERE id = ?", (place_id,)).fetchone():
        raise NotFoundError("Place not found")
    with database.transaction():
        cursor = db.execute(
            "INSERT OR IGNORE INTO favorites (user_id, place_id) VALUES (?, ?)",
            (user_id, place_id),
        )
    added = cursor.rowcount > 0
    if added:
        logger.info("User %s saved place %s", user_id, place_id)
    return added


def remove_favorite(user_id, place_id):
    with database.transaction() as db:
        cursor = db.execute(
            "DELETE FROM favorites WHERE user_id = ? AND place_id = ?",
            (user_id, place_id),
        )
    return cursor.rowcount > 0
