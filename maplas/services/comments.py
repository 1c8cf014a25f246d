import logging

from .. import database
from ..errors import NotFoundError, ValidationError
from ..utils import parse_int
from . import rewards

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def list_comments(place_id):
    rows = database.get_db().execute(
        """
        SELECT c.id, c.place_id, c.content, c.rating, c.created_at, c.user_id, u.username
        FROM comments c
        LEFT JOIN users u ON c.user_id = u.id
        WHERE c.place_id = ?
        ORDER BY c.created_at DESC, c.id DESC
        """,
        (place_id,),
    ).fetchall()
    return [dict(row) for row in rows]


def post_comment(data, user_id=None):
    if not isinstance(data, dict):
        raise ValidationError("Invalid body")
    place_id = parse_int(data.get("place_id"), "place_id")
    content = data.get("content")
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("content is required")
    rating = parse_int(data.get("rating"), "rating")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"rating must be between {MIN_RATING} and {MAX_RATING}")

    db = database.get_db()
    if not db.execute("SELECT 1 FROM places WHERE id = ?", (place_id,)).fetchone():
        raise NotFoundError("Place not found")

    with database.transaction():
        cursor = db.execute(
            "INSERT INTO comments (place_id, content, rating, user_id) VALUES (?, ?, ?, ?)",
            (place_id, content.strip(), rating, user_id),
        )
        comment_id = cursor.lastrowid
        if user_id:
            rewards.award_points(db, user_id, rewards.COMMENT_POINTS)

    logger.info("Comment %s on place %s by %s", comment_id, place_id, user_id or "anonymous")
    row = db.execute(
        """
        SELECT c.id, c.place_id, c.content, c.rating, c.created_at, c.user_id, u.username
        FROM comments c
        LEFT JOIN users u ON c.user_id = u.id
        WHERE c.id = ?
        """,
        (comment_id,),
    ).fetchone()
    return dict(row)
