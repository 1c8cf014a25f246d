import logging
import logging.config
import os
import sqlite3
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from . import database
from .config import Settings
from .errors import MaplasError, StoreError
from .services.tokens import TokenService

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
            },
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": "default"},
            },
            "loggers": {
                "maplas": {"handlers": ["console"], "level": level, "propagate": True},
            },
        }
    )


def register_error_handlers(app):
    @app.errorhandler(MaplasError)
    def handle_maplas_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(sqlite3.Error)
    def handle_store_error(exc):
        logger.error("Database error: %s", exc, exc_info=True)
        error = StoreError()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({"error": exc.description}), exc.code


def create_app(settings=None):
    """Application factory to build the Flask app with blueprints and config."""
    load_dotenv()
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    settings.warn_insecure_defaults()

    app = Flask(__name__)
    app.config.update(
        DATABASE=settings.database,
        SECRET_KEY=settings.secret_key,
        ADMIN_SECRET=settings.admin_secret,
        UPLOAD_FOLDER=settings.upload_folder,
        MAX_CONTENT_LENGTH=settings.max_upload_bytes,
        LEADERBOARD_SIZE=settings.leaderboard_size,
    )
    app.json.sort_keys = False
    app.extensions["maplas.tokens"] = TokenService(settings.secret_key, settings.token_ttl)

    database.init_app(app)
    register_error_handlers(app)

    from .blueprints.admin import admin_bp
    from .blueprints.auth import auth_bp
    from .blueprints.places import places_bp
    from .blueprints.uploads import uploads_bp
    from .blueprints.user import user_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(places_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(uploads_bp)

    @app.after_request
    def enable_cors(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        return response

    os.makedirs(settings.upload_folder, exist_ok=True)
    with app.app_context():
        if not Path(settings.database).exists():
            database.init_db()

    return app
