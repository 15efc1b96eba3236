"""
Exception hierarchy for the DMARC summary report viewer.

  SummaryError          - base class for every error raised by this package
  SoftException         - an expected failure whose message is safe to show
  ReportFetchError      - transport or payload failure talking to the backend
  AuthException         - the backend asked the caller to re-authenticate
"""

from __future__ import annotations


class SummaryError(Exception):
    """Base class for all errors raised by the summary viewer."""

    def __init__(self, message: str = "", code: int = -1) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class SoftException(SummaryError):
    """A failure that is displayed to the user as-is (no stack trace)."""


class ReportFetchError(SoftException):
    """Non-success HTTP status or malformed payload from the reporting backend."""


class AuthException(SoftException):
    """Represents an authentication error.

    ``auth_type`` classifies the failure; an empty string means the backend
    did not say which kind of authentication is required.
    """

    def __init__(self, message: str = "", code: int = -1, auth_type: str = "") -> None:
        super().__init__(message, code)
        self._auth_type = auth_type

    @property
    def auth_type(self) -> str:
        return self._auth_type
