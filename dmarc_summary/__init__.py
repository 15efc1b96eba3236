"""
Flask application factory for the DMARC summary report viewer.

Creates and configures the Flask application, registers the blueprints
and initialises Flask-WTF CSRF protection.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, redirect, url_for
from flask_wtf.csrf import CSRFProtect

from dmarc_summary.config import Config

csrf: CSRFProtect = CSRFProtect()


def _configure_logging(debug: bool) -> None:
    """Configure root logger for the application.

    Logging is sent to stdout so most WSGI hosts capture it automatically
    without requiring file handlers.

    Format: timestamp  level  logger-name  message

    Args:
        debug: When True, sets the root level to DEBUG.  Otherwise INFO.
    """
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
    )

    root_logger = logging.getLogger()
    # Avoid adding duplicate handlers if create_app() is called multiple times
    # (e.g. in tests).
    if not root_logger.handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def create_app(config_object: object = Config) -> Flask:
    """Application factory.

    Args:
        config_object: Configuration class or object to load settings from.

    Returns:
        A fully configured Flask application instance.
    """
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_object(config_object)

    _configure_logging(debug=app.debug)

    csrf.init_app(app)

    # ------------------------------------------------------------------
    # Register blueprints
    # ------------------------------------------------------------------
    from dmarc_summary.summary import bp as summary_bp

    app.register_blueprint(summary_bp)

    @app.route("/")
    def root():
        return redirect(url_for("summary.index"))

    @app.route("/health")
    def health():
        """Public health-check endpoint."""
        return jsonify(
            {
                "status": "ok",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "service": "DMARC Summary Reports",
            }
        )

    # ------------------------------------------------------------------
    # Security headers
    # Applied to every response from this application.
    # ------------------------------------------------------------------

    @app.after_request
    def set_security_headers(response: Response) -> Response:
        """Attach security-related HTTP response headers.

        cdn.jsdelivr.net serves the Bootstrap stylesheet.
        """
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self'; "
            "style-src 'self' cdn.jsdelivr.net; "
            "img-src 'self' data:; "
            "connect-src 'self';"
        )
        return response

    logging.getLogger(__name__).debug(
        "Application created; summary endpoint %s", app.config.get("SUMMARY_API_URL")
    )
    return app
