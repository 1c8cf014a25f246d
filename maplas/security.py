import logging
from functools import wraps

from flask import current_app, g, request

from .errors import AuthError, ForbiddenError
from .services import accounts
from .services.moderation import ROLE_ADMIN

logger = logging.getLogger(__name__)


def get_tokens():
    return current_app.extensions["maplas.tokens"]


def bearer_token():
    header = request.headers.get("Authorization", "")
    if not header:
        return None
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return header.strip()


def _authenticate():
    token = bearer_token()
    if not token:
        raise AuthError("Missing authorization header")
    claims = get_tokens().validate(token)
    user_id = accounts.find_user_id(claims["username"])
    if user_id is None:
        raise AuthError("User not found")
    g.claims = claims
    g.user_id = user_id


def optional_auth(view):
    """Identify the caller when a valid token is sent, otherwise act anonymously."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        g.claims = None
        g.user_id = None
        if bearer_token():
            try:
                _authenticate()
            except AuthError as exc:
                logger.debug("Ignoring token on optional route: %s", exc)
                g.claims = None
                g.user_id = None
        return view(*args, **kwargs)

    return wrapped


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        _authenticate()
        return view(*args, **kwargs)

    return wrapped


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        _authenticate()
        if g.claims.get("role") != ROLE_ADMIN:
            raise ForbiddenError()
        return view(*args, **kwargs)

    return wrapped


def current_role():
    claims = g.get("claims")
    return claims.get("role") if claims else None
