"""
Unit tests for dmarc_summary/summary/dialog.py

The domain catalog is served by a MagicMock standing in for SummaryClient.
Covers: day-count enable/restore rules, the dialog states, Apply
enablement, submission and Reset.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from dmarc_summary.exceptions import ReportFetchError
from dmarc_summary.summary.dialog import (
    CLOSED,
    FAILED,
    LOADING,
    READY,
    OptionsDialog,
    on_period_change,
)
from dmarc_summary.summary.filters import FilterState


def _client(domains=("a.com", "b.com", "c.com")) -> MagicMock:
    client = MagicMock()
    client.fetch_options.return_value = list(domains)
    return client


def _ready_dialog(initial: FilterState | None = None, **kwargs) -> OptionsDialog:
    dialog = OptionsDialog(initial)
    dialog.open()
    dialog.load_catalog(_client(**kwargs))
    return dialog


# ---------------------------------------------------------------------------
# on_period_change
# ---------------------------------------------------------------------------


class TestOnPeriodChange:
    def test_enable_without_saved_value_shows_one(self):
        assert on_period_change("lastndays", "", None) == (True, "1", None)

    def test_enable_restores_saved_value(self):
        assert on_period_change("lastndays", "", "14") == (True, "14", "14")

    def test_disable_remembers_displayed_value(self):
        assert on_period_change("lastweek", "9", None) == (False, "", "9")

    def test_disable_keeps_previous_saved_value_when_blank(self):
        assert on_period_change("lastmonth", "", "5") == (False, "", "5")

    def test_disable_defaults_to_one(self):
        assert on_period_change("lastmonth", "", None) == (False, "", "1")


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_new_dialog_is_closed(self):
        assert OptionsDialog().state == CLOSED

    def test_open_without_catalog_is_loading(self):
        dialog = OptionsDialog()
        dialog.open()

        assert dialog.state == LOADING
        assert not dialog.controls_enabled
        assert not dialog.apply_enabled
        assert dialog.period == "lastweek"
        assert dialog.format == "text"
        assert not dialog.days_enabled

    def test_catalog_loaded_once(self):
        client = _client()
        dialog = OptionsDialog()
        dialog.open()
        dialog.load_catalog(client)
        dialog.load_catalog(client)

        client.fetch_options.assert_called_once()
        assert dialog.state == READY
        assert dialog.domains == ["a.com", "b.com", "c.com"]

    def test_reopen_with_loaded_catalog_is_ready(self):
        dialog = _ready_dialog()
        dialog.cancel()
        dialog.open()
        assert dialog.state == READY

    def test_catalog_failure(self):
        client = MagicMock()
        client.fetch_options.side_effect = ReportFetchError("Failed to fetch the report options list")
        dialog = OptionsDialog()
        dialog.open()

        with pytest.raises(ReportFetchError):
            dialog.load_catalog(client)

        assert dialog.state == FAILED
        assert dialog.error == "Failed to fetch the report options list"
        assert not dialog.controls_enabled
        assert dialog.submit() is None

    def test_cancel_closes_without_result(self):
        dialog = _ready_dialog()
        dialog.select_domains(["a.com"])
        dialog.cancel()

        assert dialog.state == CLOSED
        assert dialog.result is None


# ---------------------------------------------------------------------------
# Initial values
# ---------------------------------------------------------------------------


class TestInitialValues:
    def test_initial_selection_intersects_catalog(self):
        initial = FilterState(domains=("a.com", "gone.com"), period="lastmonth", format="html")
        dialog = _ready_dialog(initial)

        assert dialog.selected == ["a.com"]
        assert dialog.period == "lastmonth"
        assert dialog.format == "html"
        assert dialog.apply_enabled

    def test_initial_day_count(self):
        initial = FilterState(domains=("a.com",), period="lastndays", days=7)
        dialog = _ready_dialog(initial)

        assert dialog.days_enabled
        assert dialog.days_value == "7"


# ---------------------------------------------------------------------------
# User actions
# ---------------------------------------------------------------------------


class TestActions:
    def test_apply_requires_selection(self):
        dialog = _ready_dialog()
        assert not dialog.apply_enabled
        assert dialog.submit() is None

        dialog.select_domains(["b.com"])
        assert dialog.apply_enabled

    def test_unknown_domains_are_not_selectable(self):
        dialog = _ready_dialog()
        dialog.select_domains(["evil.com"])
        assert dialog.selected == []

    def test_submit_fixed_period(self):
        dialog = _ready_dialog()
        dialog.select_domains(["a.com", "c.com"])
        dialog.set_format("html")

        result = dialog.submit()

        assert result == FilterState(domains=("a.com", "c.com"), period="lastweek", days=None, format="html")
        assert dialog.state == CLOSED
        assert dialog.result is result

    @pytest.mark.parametrize("typed, expected", [("30", 30), ("", 1), ("0", 1), ("-2", 1), ("abc", 1)])
    def test_submit_day_count(self, typed, expected):
        dialog = _ready_dialog()
        dialog.select_domains(["a.com"])
        dialog.change_period("lastndays")
        dialog.set_days(typed)

        assert dialog.submit().days == expected

    def test_days_ignored_while_disabled(self):
        dialog = _ready_dialog()
        dialog.set_days("12")
        assert dialog.days_value == ""

    def test_day_count_survives_period_round_trip(self):
        dialog = _ready_dialog()
        dialog.change_period("lastndays")
        dialog.set_days("5")
        dialog.change_period("lastweek")

        assert not dialog.days_enabled
        assert dialog.days_value == ""

        dialog.change_period("lastndays")
        assert dialog.days_enabled
        assert dialog.days_value == "5"

    def test_reset_restores_initial_domains(self):
        initial = FilterState(domains=("a.com", "b.com"), period="lastweek")
        dialog = _ready_dialog(initial)
        dialog.select_domains(["c.com"])

        dialog.reset()

        assert dialog.selected == ["a.com", "b.com"]

    def test_reset_restores_remembered_day_count(self):
        initial = FilterState(domains=("a.com",), period="lastndays", days=7)
        dialog = _ready_dialog(initial)
        dialog.set_days("4")

        dialog.reset()

        assert dialog.days_enabled
        assert dialog.days_value == "7"

    def test_reset_without_initial_filter_clears_selection(self):
        dialog = _ready_dialog()
        dialog.select_domains(["a.com"])

        dialog.reset()

        assert dialog.selected == []
        assert not dialog.apply_enabled
