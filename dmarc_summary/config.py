"""
Configuration module for the DMARC summary report viewer.

Loads settings from environment variables with sensible defaults.
"""

import os


class Config:
    """Base configuration shared by all environments."""

    # Security
    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-change-me")

    # Session hardening
    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SAMESITE: str = "Lax"
    SESSION_COOKIE_SECURE: bool = os.environ.get("SESSION_COOKIE_SECURE", "False").lower() == "true"

    # CSRF protection (Flask-WTF)
    WTF_CSRF_ENABLED: bool = True

    # Reporting backend: a dmarc-srg compatible summary endpoint
    SUMMARY_API_URL: str = os.environ.get("SUMMARY_API_URL", "http://localhost/summary.php")
    SUMMARY_API_TIMEOUT: float = float(os.environ.get("SUMMARY_API_TIMEOUT", "10"))
    SUMMARY_API_VERIFY_TLS: bool = os.environ.get("SUMMARY_API_VERIFY_TLS", "True").lower() == "true"

    # Date display for the report range line
    DISPLAY_TIMEZONE: str = os.environ.get("DISPLAY_TIMEZONE", "UTC")
    DATE_FORMAT: str = os.environ.get("DATE_FORMAT", "%Y-%m-%d")
