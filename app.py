"""Application factory."""

import os
import uuid
from datetime import datetime, timezone

import click
from flask import Flask, Response, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes.admin import admin_bp
from routes.auth import auth_bp
from routes.submissions import submissions_bp
from services.mailer import mailer
from services.password_reset import purge_stale_tokens
from utils.errors import DatabaseError, InvalidToken, MissingToken, error_code_for

migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mailer.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "200 per 15 minutes")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.limit(lambda: app.config.get("AUTH_RATE_LIMIT", "20 per 15 minutes"))(auth_bp)
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(submissions_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    # Health
    @app.route("/api/health", methods=["GET"])
    def health_check():
        try:
            db.session.execute(text("SELECT 1"))
            db_healthy = True
        except SQLAlchemyError:
            db.session.rollback()
            app.logger.exception("Database health check failed")
            db_healthy = False
        return jsonify(
            {
                "status": "healthy" if db_healthy else "degraded",
                "db": "connected" if db_healthy else "disconnected",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    @app.cli.command("purge-reset-tokens")
    def purge_reset_tokens_command():
        """Delete used or expired password reset tokens."""
        removed = purge_stale_tokens()
        click.echo(f"Removed {removed} stale password reset tokens.")

    # Errors
    _register_error_handlers(app)

    return app


def _error_response(error: HTTPException) -> Response:
    request_id = g.get("request_id") or str(uuid.uuid4())
    payload = {
        "success": False,
        "error": getattr(error, "name", "Error"),
        "detail": error.description,
        "code": error_code_for(error),
        "request_id": request_id,
    }
    response = jsonify(payload)
    response.status_code = error.code or 500
    for key, value in error.get_headers():
        if key.lower() != "content-type":
            response.headers.setdefault(key, value)
    response.headers.setdefault("X-Request-ID", request_id)
    return response


@jwt.unauthorized_loader
def _missing_token(reason: str) -> Response:
    # A header that is present but not "Bearer <jwt>" is a bad token, not a missing one.
    if request.headers.get("Authorization"):
        return _error_response(InvalidToken("Forbidden - Invalid token"))
    return _error_response(MissingToken("Unauthorized"))


@jwt.invalid_token_loader
def _invalid_token(reason: str) -> Response:
    return _error_response(InvalidToken("Forbidden - Invalid token"))


@jwt.expired_token_loader
def _expired_token(jwt_header: dict, jwt_payload: dict) -> Response:
    return _error_response(InvalidToken("Forbidden - Token has expired"))


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        return _error_response(error)

    @app.errorhandler(SQLAlchemyError)
    def _handle_database_error(error: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Database operation failed", exc_info=error)
        return _error_response(DatabaseError())

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        request_id = g.get("request_id") or str(uuid.uuid4())
        app.logger.exception("Unhandled application error", exc_info=error)
        payload = {
            "success": False,
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred.",
            "code": None,
            "request_id": request_id,
        }
        response = jsonify(payload)
        response.status_code = 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
