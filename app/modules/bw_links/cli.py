"""Command line entry point for Send link delivery.

Usage:
  export SLACK_BOT_TOKEN=xoxb-...
  bw-links --csv-path ./bw-send-links.csv --fallback-channel C0123456
  bw-links --csv-path ./bw-send-links.csv --report-csv ./delivery.csv --dry-run
"""

import argparse
import sys
from typing import List, Optional

from infrastructure.configuration import settings
from infrastructure.logging import configure_logging, get_module_logger
from modules.bw_links.core import (
    INPUT_COLUMNS,
    REPORT_FIELDS,
    STATUS_FAILED,
    deliver_links,
)
from modules.script_support import (
    EXIT_FAILURE,
    EXIT_OK,
    build_dispatcher,
    run_script,
)
from utils.csv_files import read_rows, write_rows

logger = get_module_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bw-links",
        description="DM each new user their Bitwarden Send link on Slack.",
    )
    parser.add_argument("--csv-path", required=True)
    parser.add_argument("--report-csv", default=None)
    parser.add_argument("--slack-token", default=settings.slack.SLACK_TOKEN)
    parser.add_argument(
        "--fallback-channel", default=settings.slack.SLACK_FALLBACK_CHANNEL
    )
    parser.add_argument("--dry-run", action="store_true")
    parser.add_argument("--log-level", default=None)
    return parser


def _run(args: argparse.Namespace) -> int:
    # Fail on configuration before reading any data
    dispatcher = None
    if not args.dry_run:
        dispatcher = build_dispatcher(
            args.slack_token, fallback_channel=args.fallback_channel
        )

    rows = read_rows(args.csv_path, required_columns=INPUT_COLUMNS)
    if not rows:
        logger.info("no_rows_to_process", csv_path=args.csv_path)
        return EXIT_OK

    deliveries = deliver_links(rows, dispatcher, dry_run=args.dry_run)

    if args.report_csv:
        write_rows(args.report_csv, REPORT_FIELDS, (d.to_row() for d in deliveries))

    failed = sum(1 for d in deliveries if d.status == STATUS_FAILED)
    logger.info("bw_links_completed", rows=len(deliveries), failed=failed)
    return EXIT_FAILURE if failed else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level)
    return run_script("bw_links", lambda: _run(args))


if __name__ == "__main__":
    sys.exit(main())
