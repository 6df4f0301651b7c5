"""
HTTP Server Entry Point

Starts the expense tracker API:

    python app/main.py

Configuration comes from the environment and .env (see
expense_tracker.config.settings). The built-in Flask server is used; put a
WSGI server in front of `create_app()` for anything beyond local use.
"""

from expense_tracker.api import create_app
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.logs import get_logger
from expense_tracker.orchestrator import create_app_components


logger = get_logger("expense_tracker.main")


def main():
    """Main application entry point."""
    settings = get_settings()
    components = create_app_components(settings)
    app = create_app(settings, components)

    logger.info("settings_loaded", groups=validate_all_settings())
    logger.info(
        "server_starting",
        host=settings.app.host,
        port=settings.app.port,
    )
    try:
        app.run(
            host=settings.app.host,
            port=settings.app.port,
            debug=settings.app.debug_mode,
            threaded=True,
        )
    finally:
        components.close()
        logger.info("server_stopped")


if __name__ == "__main__":
    main()
