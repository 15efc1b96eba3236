"""
Command-line summary report tool for the DMARC summary report viewer.

Fetches summary reports from the configured dmarc-srg compatible summary
endpoint and prints them to stdout, one after another, using the same
separators as the web page.  Suitable for cron jobs that mail the output.

ENVIRONMENT
===========
  SUMMARY_API_URL       summary endpoint (default http://localhost/summary.php)
  SUMMARY_API_TIMEOUT   request timeout in seconds (default 10)
  DISPLAY_TIMEZONE      timezone of the "Range:" dates (default UTC)

USAGE
=====
  # Last week's report for one domain
  python summary_report.py --domain example.com

  # Several domains, last 14 days
  python summary_report.py --domain example.com,example.org --period lastndays --days 14

  # Enable debug-level logging
  python summary_report.py --domain example.com --verbose

EXIT CODES
==========
  0 - Reports printed (possibly "No data")
  1 - Fetch failed or invalid arguments
"""

from __future__ import annotations

import argparse
import logging
import sys


# ---------------------------------------------------------------------------
# Argument parsing (done before app import so --help works without Flask)
# ---------------------------------------------------------------------------


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Print DMARC summary reports.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--domain",
        metavar="DOMAINS",
        required=True,
        help="Comma-separated list of domains to report on.",
    )
    parser.add_argument(
        "--period",
        choices=["lastweek", "lastmonth", "lastndays"],
        default="lastweek",
        help="Reporting period (default: lastweek).",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Number of days for --period lastndays (1-9999, default 1).",
    )
    parser.add_argument(
        "--format",
        choices=["text", "html"],
        default="text",
        help="text: the server's own text rendition; html: structured data laid out locally.",
    )
    parser.add_argument(
        "--api-url",
        metavar="URL",
        default=None,
        help="Override SUMMARY_API_URL.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable DEBUG-level logging output.",
    )
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> logging.Logger:
    """Configure root logger for the script.

    Log lines go to stderr so they never mix with the printed reports.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    return logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """Fetch and print the requested summary reports.

    Returns:
        Integer exit code: 0 for success, 1 for failure.
    """
    args = _parse_args(argv)
    logger = _configure_logging(args.verbose)

    from dmarc_summary.api.client import SummaryClient
    from dmarc_summary.config import Config
    from dmarc_summary.summary.filters import PERIOD_LAST_N_DAYS, FilterState, parse_days, split_domains
    from dmarc_summary.summary.plain import render_items
    from dmarc_summary.summary.view import SummaryView

    domains = split_domains(args.domain)
    if not domains:
        logger.error("No domain given.")
        return 1

    filter_state = FilterState(
        domains=domains,
        period=args.period,
        days=parse_days(args.days) if args.period == PERIOD_LAST_N_DAYS else None,
        format=args.format,
    )
    client = SummaryClient(
        args.api_url or Config.SUMMARY_API_URL,
        timeout=Config.SUMMARY_API_TIMEOUT,
        verify=Config.SUMMARY_API_VERIFY_TLS,
    )

    view = SummaryView(filter_state, tz_name=Config.DISPLAY_TIMEZONE, date_format=Config.DATE_FORMAT)
    items = view.fetch_and_render(client)
    if view.errors:
        for message in view.errors:
            print(message, file=sys.stderr)
        return 1

    print(render_items(items))
    return 0


# ---------------------------------------------------------------------------
# Script entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
