import hmac
import logging
import sqlite3

from werkzeug.security import check_password_hash, generate_password_hash

from .. import database
from ..errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..utils import load_json_text, localized_content
from . import rewards
from .moderation import ROLE_ADMIN, ROLE_USER

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

PROFILE_FIELDS = ("email", "bio", "avatar_url")


def _credential(value, field):
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def register(username, password, secret_code, admin_secret):
    """Create an account and return the role it was given.

    The admin role is granted only when ``secret_code`` matches the
    configured enrollment code.
    """
    username = _credential(username, "Username").strip()
    password = _credential(password, "Password")
    if not username:
        raise ValidationError("Username is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    role = ROLE_USER
    if secret_code and admin_secret and hmac.compare_digest(str(secret_code), str(admin_secret)):
        role = ROLE_ADMIN

    db = database.get_db()
    try:
        with database.transaction():
            db.execute(
                "INSERT INTO users (username, password, role) VALUES (?, ?, ?)",
                (username, generate_password_hash(password), role),
            )
    except sqlite3.IntegrityError:
        raise ConflictError("Username already taken")

    logger.info("Registered user %s with role %s", username, role)
    return role


def login(username, password, tokens):
    username = _credential(username, "Username")
    password = _credential(password, "Password")
    db = database.get_db()
    user = db.execute(
        "SELECT username, password, role FROM users WHERE username = ?", (username or "",)
    ).fetchone()

    if not user or not check_password_hash(user["password"], password):
        logger.warning("Failed login for %r", username)
        raise AuthError("Invalid credentials")

    return {
        "token": tokens.issue(user["username"], user["role"]),
        "role": user["role"],
        "username": user["username"],
    }


def find_user_id(username):
    row = database.get_db().execute(
        "SELECT id FROM users WHERE username = ?", (username,)
    ).fetchone()
    return row["id"] if row else None


def get_profile(user_id):
    row = database.get_db().execute(
        """
        SELECT id, username, role, email, bio, avatar_url, points
        FROM users WHERE id = ?
        """,
        (user_id,),
    ).fetchone()
    if not row:
        raise NotFoundError("User not found")
    profile = dict(row)
    profile.update(rewards.rank_info(row["points"]))
    return profile


def update_profile(user_id, data):
    changes = {field: data[field] for field in PROFILE_FIELDS if field in data}
    for field, value in changes.items():
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")
    if changes:
        assignments = ", ".join(f"{field} = ?" for field in changes)
        params = [value or "" for value in changes.values()] + [user_id]
        with database.transaction() as db:
            db.execute(f"UPDATE users SET {assignments} WHERE id = ?", params)
    return get_profile(user_id)


def list_comments_by_user(user_id, locale):
    rows = database.get_db().execute(
        """
        SELECT c.id, c.content, c.rating, c.created_at, p.id AS place_id, p.name AS place_name
        FROM comments c
        JOIN places p ON c.place_id = p.id
        WHERE c.user_id = ?
        ORDER BY c.created_at DESC, c.id DESC
        """,
        (user_id,),
    ).fetchall()
    results = []
    for row in rows:
        item = dict(row)
        item["place_name"] = localized_content(load_json_text(row["place_name"]), locale)
        results.append(item)
    return results


def list_users():
    rows = database.get_db().execute(
        "SELECT id, username, role, points FROM users ORDER BY id ASC"
    ).fetchall()
    return [dict(row) for row in rows]
