"""
Shared pytest fixtures for the DMARC summary report viewer test suite.

No fixture talks to a real reporting backend: tests that reach the HTTP
layer patch ``requests.get`` and hand back canned JSON payloads.
"""

from __future__ import annotations

import copy
from unittest.mock import MagicMock

import pytest

from dmarc_summary import create_app


# ---------------------------------------------------------------------------
# Test configuration
# ---------------------------------------------------------------------------


class TestConfig:
    """Minimal Flask config for automated testing."""

    TESTING = True
    WTF_CSRF_ENABLED = False
    SECRET_KEY = "test-secret-key-not-for-production"
    SUMMARY_API_URL = "http://reports.test/summary.php"
    SUMMARY_API_TIMEOUT = 5.0
    SUMMARY_API_VERIFY_TLS = True
    DISPLAY_TIMEZONE = "UTC"
    DATE_FORMAT = "%Y-%m-%d"


# ---------------------------------------------------------------------------
# Canned backend payloads
# ---------------------------------------------------------------------------

STRUCTURED_RECORD: dict = {
    "domain": "example.com",
    "data": {
        "date_range": {"begin": "2024-03-01T00:00:00Z", "end": "2024-03-07T23:59:59Z"},
        "summary": {
            "emails": {
                "total": 200,
                "dkim_spf_aligned": 120,
                "dkim_aligned": 30,
                "spf_aligned": 10,
            },
            "organizations": 2,
        },
        "sources": [
            {"ip": "198.51.100.7", "emails": 150, "spf_aligned": 130, "dkim_aligned": 149},
            {"ip": "2001:DB8:0:0::1", "emails": 50, "spf_aligned": 0, "dkim_aligned": 25},
        ],
        "organizations": [
            {"name": "google.com", "emails": 1500, "reports": 12},
            {"name": "Yahoo", "emails": 40, "reports": 3},
        ],
    },
}

TEXT_RECORD: dict = {
    "domain": "example.org",
    "text": ["Domain: example.org", "Total: 42"],
}


def make_response(payload=None, status_code: int = 200) -> MagicMock:
    """Build a fake ``requests.Response`` returning *payload* from ``json()``."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.json.return_value = payload
    return resp


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="function")
def app():
    """Create a Flask application instance for the test configuration."""
    flask_app = create_app(TestConfig)
    with flask_app.app_context():
        yield flask_app


@pytest.fixture(scope="function")
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def structured_record() -> dict:
    """A deep copy of the structured report record, safe to mutate."""
    return copy.deepcopy(STRUCTURED_RECORD)


@pytest.fixture()
def text_record() -> dict:
    return copy.deepcopy(TEXT_RECORD)
