"""Flask application entry point.

Run with:

    flask --app taskkeeper.main run
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .api.auth import create_auth_blueprint
from .api.v1 import create_api_v1_blueprint
from .auth.guard import AccessGuard
from .auth.service import AuthService
from .config import Settings, settings as default_settings
from .db import Database
from .exceptions import (
    AuthenticationError,
    ConflictError,
    ResourceNotFound,
    TaskKeeperError,
    ValidationError,
)
from .tasks.service import TaskService

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


# ============================================================================
# Error handlers
# ============================================================================


def _error_response(error: TaskKeeperError, error_type: str | None = None) -> dict:
    response = {
        "error": {
            "type": error_type or error.__class__.__name__,
            "message": error.message
        }
    }
    if error.details:
        response["error"]["details"] = error.details
    return response


def handle_validation_error(error):
    """Handle ValidationError exceptions."""
    return jsonify(_error_response(error, "ValidationError")), 400


def handle_authentication_error(error):
    """Handle AuthenticationError exceptions."""
    return jsonify(_error_response(error, "AuthenticationError")), 401


def handle_not_found(error):
    """Handle ResourceNotFound exceptions."""
    return jsonify(_error_response(error, "ResourceNotFound")), 404


def handle_conflict(error):
    """Handle ConflictError exceptions."""
    return jsonify(_error_response(error, "ConflictError")), 409


def handle_task_keeper_error(error):
    """Handle generic TaskKeeperError exceptions (DatabaseError included)."""
    logger.error(f"{error.__class__.__name__}: {error.message}")
    return jsonify(_error_response(error)), 500


def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error}")
    return jsonify({
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }), 500


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(AuthenticationError, handle_authentication_error)
    app.register_error_handler(ResourceNotFound, handle_not_found)
    app.register_error_handler(ConflictError, handle_conflict)
    app.register_error_handler(TaskKeeperError, handle_task_keeper_error)
    app.register_error_handler(500, handle_internal_error)


# ============================================================================
# Application factory
# ============================================================================


def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


def create_app(settings: Settings | None = None) -> Flask:
    """Create the Flask app and wire its services.

    Args:
        settings: Settings to use (default: module-level settings loaded
            from the environment)
    """
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = Flask(__name__)
    CORS(app, origins=settings.cors_origins, supports_credentials=True)

    database = Database(settings.database_path)
    try:
        database.init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    auth_service = AuthService(
        database,
        secret_key=settings.jwt_secret_key,
        token_expiry_seconds=settings.jwt_expiry_seconds,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    task_service = TaskService(database)
    guard = AccessGuard(auth_service, secret_key=settings.jwt_secret_key)

    register_error_handlers(app)
    app.add_url_rule("/health", view_func=health)
    app.register_blueprint(create_auth_blueprint(auth_service, guard))
    app.register_blueprint(
        create_api_v1_blueprint(task_service, guard),
        url_prefix=settings.api_v1_prefix
    )

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
