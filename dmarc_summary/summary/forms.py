"""
Flask-WTF form backing the report options dialog.
"""

from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import SelectField, SelectMultipleField, StringField, SubmitField
from wtforms.validators import DataRequired

from dmarc_summary.summary.dialog import OptionsDialog
from dmarc_summary.summary.filters import FORMAT_CHOICES, MAX_DAYS, MIN_DAYS, PERIOD_CHOICES


class OptionsForm(FlaskForm):
    """Domain list, period and output format of the summary report."""

    domains: SelectMultipleField = SelectMultipleField(
        "Domains",
        choices=[],
        validators=[DataRequired(message="Pick at least one domain.")],
        render_kw={"class": "form-select", "size": 8, "data-placeholder": "Pick domains"},
    )
    period: SelectField = SelectField(
        "Period",
        choices=PERIOD_CHOICES,
        render_kw={"class": "form-select"},
    )
    # Kept as a string: unparsable or non-positive values fall back to 1
    # instead of failing validation.
    days: StringField = StringField(
        "Days",
        render_kw={"class": "form-control", "type": "number", "min": MIN_DAYS, "max": MAX_DAYS},
    )
    format: SelectField = SelectField(
        "Format",
        choices=FORMAT_CHOICES,
        render_kw={"class": "form-select"},
    )
    apply: SubmitField = SubmitField("Apply", render_kw={"class": "btn btn-primary"})
    reset: SubmitField = SubmitField("Reset", render_kw={"class": "btn btn-outline-secondary"})

    def bind_catalog(self, dialog: OptionsDialog) -> None:
        """Offer the dialog's domain catalog as the multi-select choices."""
        self.domains.choices = [(name, name) for name in dialog.domains or []]

    def load_dialog(self, dialog: OptionsDialog) -> None:
        """Copy the dialog's field values and control state into the form."""
        self.bind_catalog(dialog)
        self.domains.data = list(dialog.selected)
        self.period.data = dialog.period
        self.days.data = dialog.days_value
        self.format.data = dialog.format

        enabled = dialog.controls_enabled
        for fld in (self.domains, self.period, self.format, self.reset):
            _set_disabled(fld, not enabled)
        _set_disabled(self.days, not (enabled and dialog.days_enabled))
        _set_disabled(self.apply, not dialog.apply_enabled)


def _set_disabled(fld, disabled: bool) -> None:
    render_kw = dict(fld.render_kw or {})
    if disabled:
        render_kw["disabled"] = True
    else:
        render_kw.pop("disabled", None)
    fld.render_kw = render_kw
