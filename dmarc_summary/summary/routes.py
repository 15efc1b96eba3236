"""
Summary reports blueprint routes.

Provides two pages:
  GET       /summary/          - options summary panel and the rendered reports
  GET/POST  /summary/options   - report options dialog

The filter lives in the page URL (``domain``, ``period``, ``format``).
Applying the dialog redirects back to ``/summary/`` with the new query
string, which re-renders the whole page.
"""

from __future__ import annotations

import logging

from flask import current_app, flash, redirect, render_template, request, session, url_for

from dmarc_summary.api.client import SummaryClient
from dmarc_summary.exceptions import AuthException, SummaryError
from dmarc_summary.summary import bp
from dmarc_summary.summary.dialog import OptionsDialog
from dmarc_summary.summary.filters import DEFAULT_FORMAT, PERIOD_LAST_WEEK, read_filter
from dmarc_summary.summary.forms import OptionsForm
from dmarc_summary.summary.view import SummaryView, display_error

logger = logging.getLogger(__name__)

_FOCUS_KEY = "focus_options_button"


def _client() -> SummaryClient:
    return SummaryClient.from_config(current_app.config)


def _flash_error(err: SummaryError) -> None:
    flash(display_error(err), "warning" if isinstance(err, AuthException) else "danger")


@bp.route("/", methods=["GET"])
def index():
    """Render the options summary panel and the reports for the URL filter."""
    view = SummaryView.from_args(
        request.args,
        tz_name=current_app.config["DISPLAY_TIMEZONE"],
        date_format=current_app.config["DATE_FORMAT"],
    )
    view.fetch_and_render(_client())
    for message in view.errors:
        flash(message, "warning" if view.auth_required else "danger")

    return render_template(
        "summary/index.html",
        view=view,
        panel=view.options_panel(),
        change_url=url_for("summary.options", **request.args),
        focus_options=session.pop(_FOCUS_KEY, False),
    )


@bp.route("/options", methods=["GET", "POST"])
def options():
    """Show the report options dialog and apply the submitted filter.

    The current filter is carried in the query string so Cancel and Reset
    can restore it.
    """
    initial = read_filter(request.args)
    dialog = OptionsDialog(initial)
    dialog.open()
    try:
        dialog.load_catalog(_client())
    except SummaryError as exc:
        _flash_error(exc)

    form = OptionsForm()
    form.bind_catalog(dialog)

    if request.method == "POST" and dialog.controls_enabled:
        dialog.select_domains(form.domains.data or [])
        dialog.change_period(form.period.data or PERIOD_LAST_WEEK)
        dialog.set_days(form.days.data or "")
        dialog.set_format(form.format.data or DEFAULT_FORMAT)

        if form.reset.data:
            dialog.reset()
        elif form.validate_on_submit():
            result = dialog.submit()
            if result is not None:
                logger.info(
                    "Report options applied: domain=%r period=%r format=%r",
                    result.domain_csv,
                    result.period_token,
                    result.format,
                )
                session[_FOCUS_KEY] = True
                return redirect(url_for("summary.index", **result.to_query_params()))

    form.load_dialog(dialog)
    return render_template(
        "summary/options.html",
        form=form,
        dialog=dialog,
        cancel_url=url_for("summary.index", **request.args),
    )
