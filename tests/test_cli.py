"""
Tests for the summary_report.py command-line tool.

The reporting backend is mocked through ``requests.get``.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

import summary_report
from conftest import STRUCTURED_RECORD, TEXT_RECORD, make_response


@patch("dmarc_summary.api.client.requests.get")
def test_prints_text_reports(mock_get, capsys):
    mock_get.return_value = make_response({"reports": [TEXT_RECORD]})

    rc = summary_report.main(["--domain", "example.org", "--api-url", "http://reports.test/s.php"])

    assert rc == 0
    assert capsys.readouterr().out == "Domain: example.org\nTotal: 42\n"
    args, kwargs = mock_get.call_args
    assert args == ("http://reports.test/s.php",)
    assert kwargs["params"] == {
        "mode": "report",
        "domain": "example.org",
        "period": "lastweek",
        "format": "text",
    }


@patch("dmarc_summary.api.client.requests.get")
def test_structured_reports_for_n_days(mock_get, capsys):
    mock_get.return_value = make_response({"reports": [STRUCTURED_RECORD]})

    rc = summary_report.main(
        ["--domain", "example.com,example.net", "--period", "lastndays", "--days", "30", "--format", "html"]
    )

    assert rc == 0
    out = capsys.readouterr().out
    assert out.startswith("Domain: example.com\n")
    assert "DKIM or SPF aligned: 80% (160)" in out
    params = mock_get.call_args.kwargs["params"]
    assert params["domain"] == "example.com,example.net"
    assert params["period"] == "lastndays:30"
    assert params["format"] == "raw"


@patch("dmarc_summary.api.client.requests.get")
def test_fetch_failure_exit_code(mock_get, capsys):
    mock_get.return_value = make_response(status_code=500)

    rc = summary_report.main(["--domain", "example.com"])

    assert rc == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Failed to fetch the report" in captured.err


@patch("dmarc_summary.api.client.requests.get")
def test_empty_domain_list(mock_get):
    assert summary_report.main(["--domain", ","]) == 1
    mock_get.assert_not_called()


def test_domain_is_required():
    with pytest.raises(SystemExit):
        summary_report.main([])
