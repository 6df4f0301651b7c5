"""
Flask Application Factory

Builds the HTTP app around an explicit Settings object and a set of wired
components. Routes are async; they need the `flask[async]` extra.
"""

from typing import Optional

from flask import Blueprint, Flask, jsonify
from flask_cors import CORS

from expense_tracker.api.auth import auth_bp
from expense_tracker.api.context import EXTENSION_KEY, get_components
from expense_tracker.api.errors import register_error_handlers
from expense_tracker.api.expenses import expenses_bp
from expense_tracker.api.tokens import init_jwt
from expense_tracker.config import Settings, get_settings
from expense_tracker.logs import configure_logging, get_logger
from expense_tracker.orchestrator import AppComponents, create_app_components
from expense_tracker.services import StorageError


logger = get_logger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
async def health():
    try:
        await get_components().check_storage()
    except StorageError as e:
        logger.warning("health_check_failed", error=str(e))
        return jsonify({"status": "unavailable", "message": str(e)}), 503
    return jsonify({"status": "ok"}), 200


def create_app(
    settings: Optional[Settings] = None,
    components: Optional[AppComponents] = None,
) -> Flask:
    """
    Create the Flask application.

    Args:
        settings: Configuration; defaults to the cached settings
        components: Pre-built components (tests pass in-memory ones)
    """
    settings = settings or (components.settings if components else get_settings())
    configure_logging(settings.app.log_level)

    app = Flask(__name__)
    app.config["DEBUG"] = settings.app.debug_mode

    CORS(app, origins=settings.app.cors_origins_list)
    init_jwt(app, settings.auth)

    app.extensions[EXTENSION_KEY] = components or create_app_components(settings)

    app.register_blueprint(auth_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(health_bp)
    register_error_handlers(app)

    logger.info(
        "app_created",
        environment=settings.app.app_environment,
        storage_backend=settings.app.storage_backend,
    )
    return app
