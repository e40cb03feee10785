"""
Web server — Flask app factory.

Serves the JSON API that front-ends (launcher plugins, dashboards)
render. No templates: every endpoint returns JSON.
"""

from __future__ import annotations

import logging

from flask import Flask

from brewdeck.core.config.loader import Settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Runtime settings. Defaults to ``Settings()``.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)

    app.config["BREWDECK_SETTINGS"] = settings or Settings()
    app.json.sort_keys = False

    from brewdeck.ui.web.routes_packages import packages_bp

    app.register_blueprint(packages_bp, url_prefix="/api")

    logger.info("Web app created (cache=%s)", app.config["BREWDECK_SETTINGS"].cache_dir)
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 8000,
    debug: bool = False,
) -> None:
    """Run the Flask development server."""
    logger.info("Starting web API on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False)
