"""
Report options dialog.

The dialog is modelled without any UI toolkit: it holds the field values
and the enabled/disabled state of every control, and exposes the user
actions (select domains, change period, apply, reset, cancel) as methods.
The ``/summary/options`` route drives it from posted form data and renders
its state through :class:`~dmarc_summary.summary.forms.OptionsForm`.

States::

    closed --open()--> loading --load_catalog() ok--> ready --submit()--> closed (result)
                          |                             |
                          +--- load_catalog() error --> failed
                                                        ready --cancel()--> closed (None)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from dmarc_summary.exceptions import SummaryError
from dmarc_summary.summary.filters import (
    DEFAULT_FORMAT,
    FORMAT_CHOICES,
    PERIOD_CHOICES,
    PERIOD_LAST_N_DAYS,
    PERIOD_LAST_WEEK,
    FilterState,
    parse_days,
)

if TYPE_CHECKING:
    from dmarc_summary.api.client import SummaryClient

logger = logging.getLogger(__name__)

CLOSED = "closed"
LOADING = "loading"
READY = "ready"
FAILED = "failed"

_DEFAULT_DAYS = "1"


def on_period_change(
    new_period: str, days_value: str, saved_value: str | None
) -> tuple[bool, str, str | None]:
    """Compute the day-count field state after the period selector changes.

    Args:
        new_period: The newly selected period value.
        days_value: What the day-count field currently displays.
        saved_value: The value remembered while the field was disabled.

    Returns:
        ``(days_enabled, days_display, saved_value)``.  Selecting
        ``lastndays`` enables the field and restores the remembered value
        (or ``"1"``); any other period disables the field, blanks it and
        remembers what it showed.  The remembered value survives
        re-enabling, so re-applying ``lastndays`` restores it.
    """
    if new_period == PERIOD_LAST_N_DAYS:
        return True, saved_value or _DEFAULT_DAYS, saved_value
    return False, "", days_value or saved_value or _DEFAULT_DAYS


class OptionsDialog:
    """Collects domain list, period and output format from the user."""

    title = "Report options"

    def __init__(self, initial: FilterState | None = None) -> None:
        self._initial = initial
        self.state: str = CLOSED
        self.result: FilterState | None = None
        self.error: str | None = None

        self.domains: list[str] | None = None
        self.selected: list[str] = []
        self.period: str = PERIOD_LAST_WEEK
        self.days_value: str = ""
        self._saved_days: str | None = None
        self.days_enabled: bool = False
        self.format: str = DEFAULT_FORMAT

    # ------------------------------------------------------------------
    # Derived control state
    # ------------------------------------------------------------------

    @property
    def initial(self) -> FilterState | None:
        return self._initial

    @property
    def controls_enabled(self) -> bool:
        return self.state == READY

    @property
    def apply_enabled(self) -> bool:
        return self.controls_enabled and bool(self.selected)

    @property
    def period_choices(self) -> list[tuple[str, str]]:
        return list(PERIOD_CHOICES)

    @property
    def format_choices(self) -> list[tuple[str, str]]:
        return list(FORMAT_CHOICES)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Populate the fields from the initial filter."""
        self.result = None
        self.error = None
        initial = self._initial
        self.format = initial.format if initial else DEFAULT_FORMAT
        if initial and initial.days is not None:
            self.days_value = str(initial.days)
            self._saved_days = str(initial.days)
        self.change_period(initial.period if initial else PERIOD_LAST_WEEK)
        self.state = READY if self.domains is not None else LOADING

    def load_catalog(self, client: SummaryClient) -> None:
        """Fetch the domain catalog, once per dialog instance."""
        if self.domains is not None:
            return
        self.state = LOADING
        logger.debug("Fetching the report options list")
        try:
            domains = client.fetch_options()
        except SummaryError as exc:
            self.state = FAILED
            self.error = exc.message or str(exc)
            raise
        self.domains = domains
        self._update_domain_element()
        self.state = READY

    def close(self, result: FilterState | None = None) -> FilterState | None:
        self.result = result
        self.state = CLOSED
        return result

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def select_domains(self, names: list[str]) -> None:
        """Replace the selection, keeping only names present in the catalog."""
        catalog = self.domains or []
        self.selected = [name for name in names if name in catalog]

    def change_period(self, period: str) -> None:
        self.period = period
        self.days_enabled, self.days_value, self._saved_days = on_period_change(
            period, self.days_value, self._saved_days
        )

    def set_days(self, value: str) -> None:
        if self.days_enabled:
            self.days_value = value

    def set_format(self, value: str) -> None:
        self.format = value

    def submit(self) -> FilterState | None:
        """Close the dialog with the entered filter.

        Returns None without closing when submission is not allowed
        (catalog not loaded or no domain selected).
        """
        if not self.apply_enabled:
            return None
        days = parse_days(self.days_value) if self.period == PERIOD_LAST_N_DAYS else None
        return self.close(
            FilterState(
                domains=tuple(self.selected),
                period=self.period,
                days=days,
                format=self.format,
            )
        )

    def reset(self) -> None:
        """Restore the initial domain selection and re-apply the period."""
        initial = self._initial
        self.select_domains(list(initial.domains) if initial else [])
        self.change_period(self.period)

    def cancel(self) -> None:
        self.close(None)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _update_domain_element(self) -> None:
        if self._initial:
            self.select_domains(list(self._initial.domains))
        else:
            self.selected = []
