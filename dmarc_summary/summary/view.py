"""
Summary page orchestration.

:class:`SummaryView` owns the filter read from the page URL, the options
summary panel and the list of rendered report items.  It does not know
about Flask; the route builds it from ``request.args`` and hands the result
to the template.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping

from dmarc_summary.exceptions import AuthException, ReportFetchError, SummaryError
from dmarc_summary.summary.filters import FilterState, read_filter
from dmarc_summary.summary.report import Node, SummaryReport

if TYPE_CHECKING:
    from dmarc_summary.api.client import SummaryClient

logger = logging.getLogger(__name__)

NOT_SELECTED_MESSAGE = "Report options are not selected"
NO_DATA_MESSAGE = "No data"
TEXT_SEPARATOR = "==========\n"
INLINE_DOMAIN_LIMIT = 3


# ---------------------------------------------------------------------------
# Rendered output items
# ---------------------------------------------------------------------------


@dataclass
class ReportItem:
    """One entry of the report output block.

    ``kind`` is one of ``text`` (``content`` is a string shown
    preformatted), ``html`` (``nodes`` is a document tree), ``separator``
    (``content`` is the text separator, or empty for a thematic break),
    ``no_data``, ``message`` or ``error``.
    """

    kind: str
    content: str = ""
    nodes: list[Node] = field(default_factory=list)

    @property
    def is_rule(self) -> bool:
        return self.kind == "separator" and not self.content


@dataclass
class DomainsSummary:
    inline: str
    hidden_count: int = 0
    full: str = ""

    @property
    def more_label(self) -> str:
        return f"and {self.hidden_count} more"


@dataclass
class OptionsPanel:
    period: str
    format: str
    domains: DomainsSummary


def separator_for(text: str | None) -> ReportItem:
    """Separator placed before a report, chosen by that report's rendition."""
    if text:
        return ReportItem("separator", TEXT_SEPARATOR)
    return ReportItem("separator")


def summarize_domains(domains: tuple[str, ...] | list[str]) -> DomainsSummary:
    """Show at most three domains inline; the rest behind an expander."""
    names = list(domains) or ["none"]
    summary = DomainsSummary(inline=", ".join(names[:INLINE_DOMAIN_LIMIT]), full=", ".join(names))
    if len(names) > INLINE_DOMAIN_LIMIT:
        summary.hidden_count = len(names) - INLINE_DOMAIN_LIMIT
    return summary


def display_error(err: Exception) -> str:
    """Log *err* and return the message to show the user."""
    if isinstance(err, AuthException):
        logger.info("Authentication required (auth_type=%r): %s", err.auth_type, err.message)
        return "Authentication required. Please sign in to the reporting server and try again."
    if isinstance(err, SummaryError):
        logger.warning("Summary request failed: %s (code=%s)", err.message, err.code)
        return err.message or str(err)
    logger.error("Unexpected summary failure", exc_info=err)
    return str(err) or err.__class__.__name__


# ---------------------------------------------------------------------------
# SummaryView
# ---------------------------------------------------------------------------


class SummaryView:
    """State and rendering logic of the summary reports page."""

    title = "Summary Reports"

    def __init__(
        self,
        filter_state: FilterState | None,
        *,
        tz_name: str = "UTC",
        date_format: str = "%Y-%m-%d",
    ) -> None:
        self.filter = filter_state
        self.items: list[ReportItem] = []
        self.errors: list[str] = []
        self.loading: bool = False
        self.auth_required: bool = False
        self._tz_name = tz_name
        self._date_format = date_format

    @classmethod
    def from_args(cls, args: Mapping[str, str], **kwargs) -> SummaryView:
        """Build the view from the page's URL query parameters."""
        return cls(read_filter(args), **kwargs)

    def options_panel(self) -> OptionsPanel:
        f = self.filter
        return OptionsPanel(
            period=(f.period_token if f else "") or "none",
            format=(f.format if f else "") or "none",
            domains=summarize_domains(f.domains if f else ()),
        )

    def fetch_and_render(self, client: SummaryClient) -> list[ReportItem]:
        """Fetch the reports for the current filter and render them."""
        self.items = []
        if self.filter is None:
            self.items.append(ReportItem("message", NOT_SELECTED_MESSAGE))
            return self.items

        self.loading = True
        logger.debug(
            "Fetching reports for domain=%r period=%r",
            self.filter.domain_csv,
            self.filter.period_token,
        )
        try:
            records = client.fetch_reports(self.filter)
            self.items = self._render_records(records)
        except SummaryError as exc:
            message = display_error(exc)
            self.auth_required = isinstance(exc, AuthException)
            self.errors.append(message)
            self.items = [ReportItem("error", f"Error: {exc.message or exc}")]
        finally:
            self.loading = False
            logger.debug(
                "Report fetch done: %d item(s) for domain=%r",
                len(self.items),
                self.filter.domain_csv,
            )
        return self.items

    def _render_records(self, records: list) -> list[ReportItem]:
        try:
            reports = [
                SummaryReport(rec, tz_name=self._tz_name, date_format=self._date_format)
                for rec in records
            ]
            return self.render_reports(reports)
        except (TypeError, ValueError, AttributeError, OverflowError) as exc:
            logger.warning("Malformed report record for domain=%r: %s", self.filter.domain_csv, exc)
            raise ReportFetchError("Malformed response from the server") from exc

    @staticmethod
    def render_reports(reports: list[SummaryReport]) -> list[ReportItem]:
        """Turn reports into output items, separating consecutive ones."""
        if not reports:
            return [ReportItem("no_data", NO_DATA_MESSAGE)]
        items: list[ReportItem] = []
        for index, report in enumerate(reports):
            text = report.text()
            if index:
                items.append(separator_for(text))
            if text:
                items.append(ReportItem("text", text))
                continue
            nodes = report.html()
            if nodes:
                items.append(ReportItem("html", nodes=nodes))
            else:
                items.append(ReportItem("no_data", NO_DATA_MESSAGE))
        return items
