"""
HTTP client for a dmarc-srg compatible summary endpoint.

Two GET requests are issued against the configured endpoint URL:

  ?mode=options                                   -> {"domains": [...]}
  ?mode=report&domain=..&period=..&format=..      -> {"reports": [...]}

Both responses may instead carry an error envelope
``{"error_code": <non-zero>, "message": "..."}`` which is turned into an
exception by :func:`check_result`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from dmarc_summary.exceptions import AuthException, ReportFetchError, SoftException

if TYPE_CHECKING:
    from dmarc_summary.summary.filters import FilterState

logger = logging.getLogger(__name__)

HTTP_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Cache-Control": "no-store",
}

_AUTH_STATUS_CODES = (401, 403)


def check_result(payload: Any) -> dict:
    """Validate a decoded response body and return it.

    Raises:
        ReportFetchError: when *payload* is not a JSON object.
        AuthException: when the error envelope names an ``auth_type``.
        SoftException: for any other error envelope.
    """
    if not isinstance(payload, dict):
        raise ReportFetchError("Unexpected response from the server")
    error_code = payload.get("error_code")
    if error_code:
        message = payload.get("message") or "Unknown error"
        try:
            code = int(error_code)
        except (TypeError, ValueError):
            code = -1
        if "auth_type" in payload:
            raise AuthException(message, code, str(payload.get("auth_type") or ""))
        raise SoftException(message, code)
    return payload


class SummaryClient:
    """Thin wrapper around ``requests.get`` for the summary endpoint."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        verify: bool = True,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.verify = verify
        self.headers = dict(HTTP_HEADERS)
        if headers:
            self.headers.update(headers)

    @classmethod
    def from_config(cls, config: dict) -> SummaryClient:
        """Create a client from a Flask config mapping."""
        return cls(
            config["SUMMARY_API_URL"],
            timeout=float(config.get("SUMMARY_API_TIMEOUT", 10.0)),
            verify=bool(config.get("SUMMARY_API_VERIFY_TLS", True)),
        )

    # ------------------------------------------------------------------
    # Endpoint operations
    # ------------------------------------------------------------------

    def fetch_options(self) -> list[str]:
        """Return the catalog of domains reports can be built for."""
        data = self._get({"mode": "options"}, "Failed to fetch the report options list")
        domains = data.get("domains")
        if not isinstance(domains, list):
            raise ReportFetchError("Failed to fetch the report options list")
        return [str(name) for name in domains]

    def fetch_reports(self, filter_state: FilterState) -> list[dict]:
        """Return the summary report records matching *filter_state*."""
        params = {"mode": "report", **filter_state.to_request_params()}
        data = self._get(params, "Failed to fetch the report")
        reports = data.get("reports")
        if not isinstance(reports, list):
            raise ReportFetchError("Failed to fetch the report")
        return reports

    # ------------------------------------------------------------------
    # Internal HTTP helper
    # ------------------------------------------------------------------

    def _get(self, params: dict[str, str], failure_message: str) -> dict:
        try:
            resp = requests.get(
                self.url,
                params=params,
                headers=self.headers,
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.RequestException as exc:
            logger.warning("GET %s mode=%s failed: %s", self.url, params.get("mode"), exc)
            raise ReportFetchError(failure_message) from exc

        if resp.status_code in _AUTH_STATUS_CODES:
            logger.info("GET %s mode=%s: authentication required", self.url, params.get("mode"))
            raise AuthException("Authentication needed", resp.status_code)
        if not resp.ok:
            logger.warning(
                "GET %s mode=%s returned HTTP %s", self.url, params.get("mode"), resp.status_code
            )
            raise ReportFetchError(failure_message, resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.warning("GET %s mode=%s returned malformed JSON: %s", self.url, params.get("mode"), exc)
            raise ReportFetchError("Malformed response from the server") from exc

        return check_result(payload)
