"""Signed, time-limited bearer tokens."""

import logging

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..errors import AuthError

logger = logging.getLogger(__name__)

TOKEN_SALT = "maplas-auth"


class TokenService:
    def __init__(self, secret_key, ttl_seconds):
        self.ttl_seconds = ttl_seconds
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)

    def issue(self, username, role):
        return self._serializer.dumps({"username": username, "role": role})

    def validate(self, token):
        if not token:
            raise AuthError("Missing token")
        try:
            claims = self._serializer.loads(token, max_age=self.ttl_seconds)
        except SignatureExpired:
            raise AuthError("Token expired")
        except BadSignature:
            raise AuthError("Invalid token")
        if not isinstance(claims, dict) or "username" not in claims or "role" not in claims:
            raise AuthError("Invalid token")
        return claims
