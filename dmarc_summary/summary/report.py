"""
Summary report rendering.

:class:`SummaryReport` wraps one report record as returned by the
summary endpoint and turns it into either the precomputed plain text or a
toolkit-neutral document tree.  The tree is a flat list of nodes
(headings, paragraphs, labelled lists and tables); adapters in
``templates/summary/_report.html`` and :mod:`dmarc_summary.summary.plain`
render it as HTML and plain text respectively.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from zoneinfo import ZoneInfo

from dmarc_summary.utils.address import format_address

logger = logging.getLogger(__name__)

PASS_CLASS = "report-result-pass"
FAIL_CLASS = "report-result-fail"


# ---------------------------------------------------------------------------
# Document tree
# ---------------------------------------------------------------------------


@dataclass
class Heading:
    text: str
    level: int = 2
    kind: str = field(default="heading", init=False)


@dataclass
class Paragraph:
    text: str
    kind: str = field(default="paragraph", init=False)


@dataclass
class LabeledRow:
    """One ``title: value`` row of a labelled list."""

    title: str
    value: str
    css_class: str | None = None


@dataclass
class LabeledList:
    rows: list[LabeledRow]
    kind: str = field(default="labeled_list", init=False)


@dataclass
class Cell:
    value: str
    css_class: str | None = None
    colspan: int = 0
    rowspan: int = 0
    is_address: bool = False


@dataclass
class Table:
    caption: str
    head: list[list[Cell]]
    body: list[list[Cell]]
    kind: str = field(default="table", init=False)


Node = Heading | Paragraph | LabeledList | Table


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def num2percent(per: Any, cent: Any) -> str:
    """Format *per* out of *cent* as ``"<pct>% (<per>)"``.

    A zero (or missing) numerator is rendered as the bare string ``"0"``.
    """
    if not per:
        return "0"
    if not cent:
        return f"0% ({per})"
    return f"{_round_half_up(per / cent * 100)}% ({per})"


def format_rate(fraction: float) -> str:
    """Render a 0..1 fraction as an integer percentage, rounding half up."""
    pct = Decimal(fraction * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return f"{pct}%"


def to_count(value: Any) -> int:
    """Coerce a count from the payload to int; numeric strings are accepted."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise TypeError(f"count expected, got {value!r}")
    return int(value)


def group_thousands(value: Any) -> str:
    """Render an integer with thousands separators; other values verbatim."""
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:,}"
    return str(value)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an epoch-seconds number or an ISO 8601 string."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _from_epoch(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.isdigit():
        return _from_epoch(int(text))
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _from_epoch(seconds: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


# ---------------------------------------------------------------------------
# SummaryReport
# ---------------------------------------------------------------------------


class SummaryReport:
    """One summary report record and its two renditions."""

    def __init__(self, data: dict, *, tz_name: str = "UTC", date_format: str = "%Y-%m-%d") -> None:
        """Wrap one record.

        Raises:
            TypeError: when *data* is not a JSON object.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise TypeError(f"report record must be an object, got {type(data).__name__}")
        self._report = data
        self._tz = ZoneInfo(tz_name)
        self._date_format = date_format

    @property
    def domain(self) -> str:
        return str(self._report.get("domain") or "")

    def text(self) -> str | None:
        """Return the precomputed lines joined by newlines, or None."""
        lines = self._report.get("text") or []
        if not isinstance(lines, list):
            raise TypeError(f"report text must be a list of lines, got {type(lines).__name__}")
        if len(lines) > 0:
            return "\n".join(str(line) for line in lines)
        return None

    def html(self) -> list[Node]:
        """Build the structured rendition as a list of document nodes.

        Returns an empty list when the record carries no summary data.
        """
        data = self._report.get("data")
        if not isinstance(data, dict):
            return []

        doc: list[Node] = [Heading(f"Domain: {self.domain}", 2)]

        date_range = data.get("date_range") or {}
        d1 = self._format_date(date_range.get("begin"))
        d2 = self._format_date(date_range.get("end"))
        doc.append(Paragraph(f"Range: {d1} - {d2}"))

        doc.append(Heading("Summary", 3))
        doc.append(self._summary_block(data.get("summary") or {}))

        sources = data.get("sources") or []
        if sources:
            doc.append(Heading("Sources", 3))
            doc.append(self._sources_table(sources))

        organizations = data.get("organizations") or []
        if organizations:
            doc.append(Heading("Organizations", 3))
            doc.append(self._organizations_table(organizations))

        return doc

    @staticmethod
    def num2percent(per: Any, cent: Any) -> str:
        return num2percent(per, cent)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _summary_block(self, summary: dict) -> LabeledList:
        emails = summary.get("emails") or {}
        total = to_count(emails.get("total"))
        aligned = (
            to_count(emails.get("dkim_spf_aligned"))
            + to_count(emails.get("dkim_aligned"))
            + to_count(emails.get("spf_aligned"))
        )
        n_aligned = total - aligned
        return LabeledList([
            LabeledRow("Total", str(total)),
            LabeledRow("DKIM or SPF aligned", num2percent(aligned, total), PASS_CLASS if aligned else None),
            LabeledRow("Not aligned", num2percent(n_aligned, total), FAIL_CLASS if n_aligned else None),
            LabeledRow("Organizations", str(summary.get("organizations", 0))),
        ])

    def _sources_table(self, sources: list[dict]) -> Table:
        head = [
            [
                Cell("IP address", rowspan=2),
                Cell("Email volume", rowspan=2),
                Cell("SPF", colspan=3),
                Cell("DKIM", colspan=3),
            ],
            [Cell(title) for title in ("pass", "fail", "rate", "pass", "fail", "rate")],
        ]
        body: list[list[Cell]] = []
        for sou in sources:
            ett = to_count(sou.get("emails"))
            row = [Cell(format_address(sou.get("ip")), is_address=True), Cell(group_thousands(ett))]
            for key in ("spf_aligned", "dkim_aligned"):
                passed = to_count(sou.get(key))
                failed = ett - passed
                row.append(Cell(group_thousands(passed), PASS_CLASS if passed else None))
                row.append(Cell(group_thousands(failed), FAIL_CLASS if failed else None))
                row.append(Cell(format_rate(passed / ett) if ett else "0%"))
            body.append(row)
        return Table(f"Total records: {len(sources)}", head, body)

    def _organizations_table(self, organizations: list[dict]) -> Table:
        head = [[Cell("Name"), Cell("Emails"), Cell("Reports")]]
        body = [
            [
                Cell(str(org.get("name") or "")),
                Cell(group_thousands(to_count(org.get("emails")))),
                Cell(group_thousands(to_count(org.get("reports")))),
            ]
            for org in organizations
        ]
        return Table(f"Total records: {len(organizations)}", head, body)

    def _format_date(self, value: Any) -> str:
        dt = parse_timestamp(value)
        if dt is None:
            logger.debug("Unparsable date_range value %r for domain %r", value, self.domain)
            return str(value) if value is not None else ""
        return dt.astimezone(self._tz).strftime(self._date_format)
