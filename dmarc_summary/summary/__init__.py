"""Summary reports blueprint."""

from __future__ import annotations

from flask import Blueprint

bp: Blueprint = Blueprint("summary", __name__, url_prefix="/summary")

from dmarc_summary.summary import routes  # noqa: E402, F401
