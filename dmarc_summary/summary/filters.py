"""
Report filter state and its URL query-string encoding.

The filter is carried in three query parameters:

  domain  - comma-separated list of policy domains
  period  - ``lastweek``, ``lastmonth`` or ``lastndays:<N>``
  format  - ``text`` or ``html``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

PERIOD_LAST_WEEK = "lastweek"
PERIOD_LAST_MONTH = "lastmonth"
PERIOD_LAST_N_DAYS = "lastndays"

PERIOD_CHOICES: list[tuple[str, str]] = [
    (PERIOD_LAST_WEEK, "Last week"),
    (PERIOD_LAST_MONTH, "Last month"),
    (PERIOD_LAST_N_DAYS, "Last N days"),
]

FORMAT_CHOICES: list[tuple[str, str]] = [
    ("text", "Plain text"),
    ("html", "HTML"),
]

DEFAULT_FORMAT = "text"

MIN_DAYS = 1
MAX_DAYS = 9999


@dataclass(frozen=True)
class FilterState:
    """Immutable report selection criteria."""

    domains: tuple[str, ...]
    period: str
    days: int | None = None
    format: str = DEFAULT_FORMAT

    @property
    def domain_csv(self) -> str:
        return ",".join(self.domains)

    @property
    def period_token(self) -> str:
        """The period as stored in the URL (``lastndays:<N>`` when applicable)."""
        if self.period == PERIOD_LAST_N_DAYS and self.days is not None:
            return f"{self.period}:{self.days}"
        return self.period

    @property
    def transport_format(self) -> str:
        """Format value understood by the reporting backend."""
        return "raw" if self.format == "html" else "text"

    def to_query_params(self) -> dict[str, str]:
        """Serialise into the page's URL query parameters."""
        return {
            "domain": self.domain_csv,
            "period": self.period_token,
            "format": self.format,
        }

    def to_request_params(self) -> dict[str, str]:
        """Serialise into the reporting endpoint's query parameters."""
        return {
            "domain": self.domain_csv,
            "period": self.period_token,
            "format": self.transport_format,
        }


def split_domains(value: str | None) -> tuple[str, ...]:
    """Split a comma-joined domain list, dropping empty items."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def parse_days(value: object, default: int = MIN_DAYS) -> int:
    """Parse a day count, returning *default* when unparsable or not positive."""
    try:
        days = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    if days < MIN_DAYS:
        return default
    return min(days, MAX_DAYS)


def split_period(token: str) -> tuple[str, int | None]:
    """Split ``lastndays:<N>`` into its name and day count.

    Any other token is returned unchanged so the backend can judge it.
    """
    name, _, suffix = token.partition(":")
    if name != PERIOD_LAST_N_DAYS:
        return token, None
    return name, parse_days(suffix)


def read_filter(args: Mapping[str, str]) -> FilterState | None:
    """Build a FilterState from request query parameters.

    Both ``domain`` and ``period`` must be present; ``format`` defaults to
    ``text``.  Returns None when the filter is incomplete.
    """
    domain = args.get("domain")
    period = args.get("period")
    if not domain or not period:
        return None
    domains = split_domains(domain)
    if not domains:
        return None
    name, days = split_period(period)
    return FilterState(
        domains=domains,
        period=name,
        days=days,
        format=args.get("format") or DEFAULT_FORMAT,
    )
