import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent

DEV_SECRET_KEY = "dev-secret"
DEV_ADMIN_SECRET = "dev-admin-code"


class Settings:
    """Runtime configuration handed to the application factory.

    Secrets live here instead of module globals so tests can build an app
    with deterministic values.
    """

    def __init__(
        self,
        database=None,
        secret_key=DEV_SECRET_KEY,
        admin_secret=DEV_ADMIN_SECRET,
        token_ttl=24 * 60 * 60,
        upload_folder=None,
        max_upload_bytes=10 * 1024 * 1024,
        leaderboard_size=10,
        log_level="INFO",
    ):
        self.database = str(database or BASE_DIR / "maplas.db")
        self.secret_key = secret_key
        self.admin_secret = admin_secret
        self.token_ttl = int(token_ttl)
        self.upload_folder = str(upload_folder or BASE_DIR / "uploads")
        self.max_upload_bytes = int(max_upload_bytes)
        self.leaderboard_size = int(leaderboard_size)
        self.log_level = log_level

    @classmethod
    def from_env(cls):
        return cls(
            database=os.getenv("DATABASE_PATH"),
            secret_key=os.getenv("JWT_SECRET", DEV_SECRET_KEY),
            admin_secret=os.getenv("ADMIN_SECRET", DEV_ADMIN_SECRET),
            token_ttl=os.getenv("TOKEN_TTL_SECONDS", 24 * 60 * 60),
            upload_folder=os.getenv("UPLOAD_FOLDER"),
            max_upload_bytes=os.getenv("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
            leaderboard_size=os.getenv("LEADERBOARD_SIZE", 10),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def warn_insecure_defaults(self):
        if self.secret_key == DEV_SECRET_KEY:
            logger.warning("JWT_SECRET is not set, signing tokens with the development key")
        if self.admin_secret == DEV_ADMIN_SECRET:
            logger.warning("ADMIN_SECRET is not set, using the development enrollment code")
